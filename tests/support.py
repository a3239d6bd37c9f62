"""Shared test helpers: in-memory database, API client with dependency overrides, factories."""

import unittest
from decimal import Decimal
from unittest.mock import patch

import bcrypt
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.api.deps import get_rate_limit_store
from storefront.core.config import Settings, get_settings
from storefront.core.database import get_db
from storefront.core.security import create_access_token
from storefront.main import app
from storefront.models import Base, Category, Product, Role, User
from storefront.services.rate_limit import MemoryCounterStore

TEST_PASSWORD = "Passw0rd!"
# Low bcrypt cost keeps the suite fast; verify_password accepts any cost.
_TEST_HASH = bcrypt.hashpw(TEST_PASSWORD.encode("utf-8"), bcrypt.gensalt(rounds=4)).decode("utf-8")


def make_session_factory() -> sessionmaker[Session]:
    """Fresh in-memory SQLite database with every table created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def make_settings(**overrides) -> Settings:
    values = {"APP_ENV": "dev", "DATABASE_URL": "sqlite://"}
    values.update(overrides)
    return Settings(**values)


def create_user(
    db: Session,
    email: str = "customer@shopmail.com",
    role: Role = Role.USER,
    name: str = "Test Customer",
) -> User:
    user = User(email=email, password_hash=_TEST_HASH, name=name, role=role.value)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_category(db: Session, name: str = "Shoes", slug: str = "shoes", **kwargs) -> Category:
    category = Category(name=name, slug=slug, **kwargs)
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def create_product(
    db: Session,
    category: Category,
    name: str = "Runner",
    slug: str = "runner",
    price: str = "100.00",
    **kwargs,
) -> Product:
    product = Product(
        name=name,
        slug=slug,
        price=Decimal(price),
        category_id=category.id,
        stock=kwargs.pop("stock", 10),
        **kwargs,
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def auth_headers(user: User) -> dict[str, str]:
    token = create_access_token(sub=user.id, role=user.role)
    return {"Authorization": f"Bearer {token}"}


def address_payload(**overrides) -> dict:
    payload = {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "address1": "Istiklal Cd. 10",
        "city": "Istanbul",
        "postalCode": "34000",
    }
    payload.update(overrides)
    return payload


class ApiTestCase(unittest.TestCase):
    """
    Runs the real app against a per-test in-memory database and an in-process
    rate-limit store. Seed data through self.db and commit before requests.
    """

    settings_overrides: dict = {}

    def setUp(self) -> None:
        self.session_factory = make_session_factory()
        self.store = MemoryCounterStore()
        self.settings = make_settings(**self.settings_overrides)

        def override_get_db():
            db = self.session_factory()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_rate_limit_store] = lambda: self.store
        app.dependency_overrides[get_settings] = lambda: self.settings
        self.addCleanup(app.dependency_overrides.clear)

        patcher = patch("storefront.core.security.BCRYPT_ROUNDS", 4)
        patcher.start()
        self.addCleanup(patcher.stop)

        self.client = TestClient(app, raise_server_exceptions=False)
        self.db = self.session_factory()
        self.addCleanup(self.db.close)

    def fresh_db(self) -> Session:
        """New session for asserting on what requests committed."""
        db = self.session_factory()
        self.addCleanup(db.close)
        return db
