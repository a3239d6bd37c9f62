"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from storefront.api.errors import register_exception_handlers
from storefront.api.v1 import router as v1_router
from storefront.core.config import settings
from storefront.core.database import create_db_engine, create_session_factory
from storefront.core.logging_config import configure_logging
from storefront.services.rate_limit import build_counter_store

configure_logging(settings)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the engine/pool and rate-limit store once; release them on shutdown."""
    engine = create_db_engine(settings)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.rate_limit_store = build_counter_store(settings)
    logger.info("Storefront API started", extra={"environment": settings.APP_ENV})
    try:
        yield
    finally:
        app.state.rate_limit_store.close()
        engine.dispose()
        logger.info("Storefront API stopped")


app = FastAPI(
    title="Storefront API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(v1_router, prefix=settings.API_V1_PREFIX)

app.mount(
    "/uploads",
    StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
    name="uploads",
)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Storefront API"}
