"""Endpoint tests for public active banners and banner management."""

import unittest
from datetime import timedelta

from storefront.models import Banner, Role
from storefront.models.base import utcnow
from support import ApiTestCase, auth_headers, create_user

BANNERS_URL = "/api/v1/banners"


class TestActiveBanners(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        now = utcnow()
        self.db.add_all(
            [
                Banner(title="Always", image="/a.jpg", display_order=2),
                Banner(title="First", image="/b.jpg", display_order=1),
                Banner(title="Off", image="/c.jpg", is_active=False),
                Banner(title="Future", image="/d.jpg", start_date=now + timedelta(days=1)),
                Banner(title="Expired", image="/e.jpg", end_date=now - timedelta(days=1)),
                Banner(
                    title="Window",
                    image="/f.jpg",
                    type="FEATURED_PRODUCTS",
                    display_order=3,
                    start_date=now - timedelta(days=1),
                    end_date=now + timedelta(days=1),
                ),
            ]
        )
        self.db.commit()

    def titles(self, **params) -> list[str]:
        resp = self.client.get(f"{BANNERS_URL}/active", params=params)
        self.assertEqual(resp.status_code, 200)
        return [b["title"] for b in resp.json()["data"]]

    def test_active_within_window_ordered(self) -> None:
        self.assertEqual(self.titles(), ["First", "Always", "Window"])

    def test_type_filter(self) -> None:
        self.assertEqual(self.titles(type="FEATURED_PRODUCTS"), ["Window"])
        self.assertEqual(self.titles(type="HERO"), ["First", "Always"])

    def test_unknown_type_400(self) -> None:
        resp = self.client.get(f"{BANNERS_URL}/active", params={"type": "POPUP"})
        self.assertEqual(resp.status_code, 400)


class TestBannerAdmin(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.admin = create_user(self.db, email="boss@shopmail.com", role=Role.ADMIN)
        self.headers = auth_headers(self.admin)

    def test_management_requires_admin(self) -> None:
        user = create_user(self.db)
        resp = self.client.get(BANNERS_URL, headers=auth_headers(user))
        self.assertEqual(resp.status_code, 401)

    def test_create_update_delete(self) -> None:
        resp = self.client.post(
            BANNERS_URL,
            json={
                "title": "Summer",
                "image": "/uploads/banners/s.jpg",
                "order": 1,
                "startDate": "2026-06-01T00:00:00Z",
                "endDate": "2026-09-01T00:00:00Z",
            },
            headers=self.headers,
        )
        self.assertEqual(resp.status_code, 201)
        banner = resp.json()["data"]
        self.assertEqual(banner["type"], "HERO")
        self.assertEqual(banner["order"], 1)

        resp = self.client.put(
            f"{BANNERS_URL}/{banner['id']}",
            json={"title": "Autumn", "image": "/x.jpg", "type": "FEATURED_PRODUCTS"},
            headers=self.headers,
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["data"]["title"], "Autumn")
        self.assertIsNone(resp.json()["data"]["startDate"])

        resp = self.client.delete(f"{BANNERS_URL}/{banner['id']}", headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        self.assertIsNone(self.fresh_db().get(Banner, banner["id"]))
        self.assertEqual(
            self.client.get(f"{BANNERS_URL}/{banner['id']}", headers=self.headers).status_code,
            404,
        )

    def test_validation(self) -> None:
        cases = [
            {"image": "/x.jpg"},
            {"title": "T"},
            {"title": "T", "image": "/x.jpg", "type": "POPUP"},
            {"title": "T", "image": "/x.jpg", "order": -1},
            {"title": "T", "image": "/x.jpg", "startDate": "not a date"},
            {
                "title": "T",
                "image": "/x.jpg",
                "startDate": "2026-09-01T00:00:00Z",
                "endDate": "2026-06-01T00:00:00Z",
            },
        ]
        for body in cases:
            with self.subTest(body=body):
                resp = self.client.post(BANNERS_URL, json=body, headers=self.headers)
                self.assertEqual(resp.status_code, 400)
                self.assertFalse(resp.json()["success"])


if __name__ == "__main__":
    unittest.main()
