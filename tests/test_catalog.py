"""Endpoint tests for product listing/detail and category management."""

import unittest
from datetime import timedelta

from storefront.models import Category, Discount, Review, Role
from storefront.models.base import utcnow
from support import ApiTestCase, auth_headers, create_category, create_product, create_user

PRODUCTS_URL = "/api/v1/products"
CATEGORIES_URL = "/api/v1/categories"


class TestProductList(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.shoes = create_category(self.db, "Shoes", "shoes")
        self.bags = create_category(self.db, "Bags", "bags")
        self.runner = create_product(
            self.db, self.shoes, "Runner", "runner", price="120.00",
            description="Light 100% mesh", is_featured=True,
        )
        self.boot = create_product(self.db, self.shoes, "Boot", "boot", price="80.00")
        self.tote = create_product(self.db, self.bags, "Tote", "tote", price="40.00")
        create_product(self.db, self.bags, "Hidden", "hidden", price="10.00", is_active=False)

    def slugs(self, **params) -> list[str]:
        resp = self.client.get(PRODUCTS_URL, params=params)
        self.assertEqual(resp.status_code, 200)
        return [p["slug"] for p in resp.json()["data"]]

    def test_only_active_products(self) -> None:
        self.assertNotIn("hidden", self.slugs())
        self.assertEqual(len(self.slugs()), 3)

    def test_category_filter_by_slug(self) -> None:
        self.assertEqual(sorted(self.slugs(category="shoes")), ["boot", "runner"])
        self.assertEqual(len(self.slugs(category="all")), 3)

    def test_search_case_insensitive_over_name_and_description(self) -> None:
        self.assertEqual(self.slugs(search="TOTE"), ["tote"])
        self.assertEqual(self.slugs(search="mesh"), ["runner"])

    def test_search_wildcards_are_literal(self) -> None:
        self.assertEqual(self.slugs(search="100%"), ["runner"])
        self.assertEqual(self.slugs(search="%"), ["runner"])
        self.assertEqual(self.slugs(search="_"), [])

    def test_sorting(self) -> None:
        self.assertEqual(self.slugs(sortBy="price-low"), ["tote", "boot", "runner"])
        self.assertEqual(self.slugs(sortBy="price-high"), ["runner", "boot", "tote"])
        self.assertEqual(self.slugs(sortBy="name"), ["boot", "runner", "tote"])
        self.assertEqual(self.slugs(sortBy="newest"), ["tote", "boot", "runner"])

    def test_default_sort_featured_first(self) -> None:
        self.assertEqual(self.slugs()[0], "runner")

    def test_featured_filter(self) -> None:
        self.assertEqual(self.slugs(featured="true"), ["runner"])

    def test_derived_fields(self) -> None:
        reviewer = create_user(self.db)
        now = utcnow()
        self.db.add_all(
            [
                Review(product_id=self.boot.id, user_id=reviewer.id, rating=5),
                Review(product_id=self.boot.id, user_id=reviewer.id, rating=4),
                Review(product_id=self.boot.id, user_id=reviewer.id, rating=4),
                Discount(
                    product_id=self.boot.id,
                    percentage=15,
                    badge_text="SALE",
                    badge_color="red",
                    start_date=now - timedelta(days=1),
                    end_date=now + timedelta(days=1),
                ),
                Discount(
                    product_id=self.tote.id,
                    percentage=50,
                    start_date=now - timedelta(days=10),
                    end_date=now - timedelta(days=5),
                ),
            ]
        )
        self.db.commit()
        resp = self.client.get(PRODUCTS_URL)
        by_slug = {p["slug"]: p for p in resp.json()["data"]}

        boot = by_slug["boot"]
        self.assertEqual(boot["rating"], 4.3)
        self.assertEqual(boot["reviews"], 3)
        self.assertEqual(boot["discount"]["percentage"], 15)
        self.assertEqual(boot["discount"]["badgeText"], "SALE")
        self.assertTrue(boot["isNew"])
        self.assertEqual(boot["category"]["slug"], "shoes")
        self.assertEqual(boot["price"], 80.0)

        self.assertIsNone(by_slug["tote"]["discount"])
        self.assertEqual(by_slug["tote"]["rating"], 0)

    def test_old_product_not_new(self) -> None:
        self.boot.created_at = utcnow() - timedelta(days=31)
        self.db.commit()
        by_slug = {p["slug"]: p for p in self.client.get(PRODUCTS_URL).json()["data"]}
        self.assertFalse(by_slug["boot"]["isNew"])


class TestProductDetail(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        category = create_category(self.db)
        self.product = create_product(self.db, category)
        create_product(self.db, category, "Gone", "gone", is_active=False)

    def test_detail_includes_reviews(self) -> None:
        reviewer = create_user(self.db, name="Grace")
        self.db.add(
            Review(product_id=self.product.id, user_id=reviewer.id, rating=3, comment="ok")
        )
        self.db.commit()
        resp = self.client.get(f"{PRODUCTS_URL}/runner")
        self.assertEqual(resp.status_code, 200)
        data = resp.json()["data"]
        self.assertEqual(data["reviews"], 1)
        self.assertEqual(data["reviewsList"][0]["userName"], "Grace")
        self.assertEqual(data["reviewsList"][0]["comment"], "ok")

    def test_inactive_or_missing_is_404(self) -> None:
        self.assertEqual(self.client.get(f"{PRODUCTS_URL}/gone").status_code, 404)
        resp = self.client.get(f"{PRODUCTS_URL}/nope")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["error"], "Product not found")


class TestCategoryList(ApiTestCase):
    def test_subcategories_and_counts(self) -> None:
        women = create_category(self.db, "Women", "women")
        create_category(self.db, "Dresses", "dresses", parent_id=women.id, display_order=2)
        create_category(self.db, "Archived", "archived", parent_id=women.id, is_active=False)
        create_product(self.db, women, "Scarf", "scarf")
        create_product(self.db, women, "Old", "old", is_active=False)

        resp = self.client.get(CATEGORIES_URL)
        self.assertEqual(resp.status_code, 200)
        names = [c["name"] for c in resp.json()["data"]]
        self.assertEqual(names, sorted(names))
        women_out = next(c for c in resp.json()["data"] if c["slug"] == "women")
        self.assertEqual(women_out["productCount"], 1)
        self.assertEqual([s["slug"] for s in women_out["subcategories"]], ["dresses"])

    def test_get_category_includes_parent(self) -> None:
        parent = create_category(self.db, "Women", "women")
        child = create_category(self.db, "Dresses", "dresses", parent_id=parent.id)
        resp = self.client.get(f"{CATEGORIES_URL}/{child.id}")
        self.assertEqual(resp.json()["data"]["parent"]["slug"], "women")


class TestCategoryAdmin(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.admin = create_user(self.db, email="boss@shopmail.com", role=Role.ADMIN)
        self.headers = auth_headers(self.admin)

    def test_create_requires_admin(self) -> None:
        user = create_user(self.db)
        resp = self.client.post(
            CATEGORIES_URL, json={"name": "Hats"}, headers=auth_headers(user)
        )
        self.assertEqual(resp.status_code, 401)

    def test_create_generates_unique_slug(self) -> None:
        first = self.client.post(
            CATEGORIES_URL, json={"name": "Çocuk Giyim"}, headers=self.headers
        )
        second = self.client.post(
            CATEGORIES_URL, json={"name": "Çocuk  Giyim!"}, headers=self.headers
        )
        self.assertEqual(first.status_code, 201)
        self.assertEqual(first.json()["data"]["slug"], "cocuk-giyim")
        self.assertEqual(second.json()["data"]["slug"], "cocuk-giyim-1")

    def test_update_validation(self) -> None:
        category = create_category(self.db, "Hats", "hats")
        url = f"{CATEGORIES_URL}/{category.id}"
        self.assertEqual(
            self.client.put(url, json={"name": ""}, headers=self.headers).status_code, 400
        )
        self.assertEqual(
            self.client.put(
                url, json={"name": "Hats", "displayOrder": 1000}, headers=self.headers
            ).status_code,
            400,
        )
        self.assertEqual(
            self.client.put(
                url, json={"name": "Hats", "parentId": category.id}, headers=self.headers
            ).status_code,
            400,
        )
        self.assertEqual(
            self.client.put(
                url, json={"name": "Hats", "parentId": 999}, headers=self.headers
            ).status_code,
            400,
        )

    def test_rename_regenerates_slug(self) -> None:
        category = create_category(self.db, "Hats", "hats")
        resp = self.client.put(
            f"{CATEGORIES_URL}/{category.id}",
            json={"name": "Şapka", "displayOrder": 3},
            headers=self.headers,
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["data"]["slug"], "sapka")
        self.assertEqual(resp.json()["data"]["displayOrder"], 3)

    def test_delete_refused_with_products_or_children(self) -> None:
        with_product = create_category(self.db, "Hats", "hats")
        create_product(self.db, with_product)
        parent = create_category(self.db, "Women", "women")
        create_category(self.db, "Dresses", "dresses", parent_id=parent.id)

        resp = self.client.delete(f"{CATEGORIES_URL}/{with_product.id}", headers=self.headers)
        self.assertEqual(resp.status_code, 400)
        resp = self.client.delete(f"{CATEGORIES_URL}/{parent.id}", headers=self.headers)
        self.assertEqual(resp.status_code, 400)

    def test_delete_empty_category(self) -> None:
        category = create_category(self.db, "Hats", "hats")
        resp = self.client.delete(f"{CATEGORIES_URL}/{category.id}", headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        self.assertIsNone(self.fresh_db().get(Category, category.id))


if __name__ == "__main__":
    unittest.main()
