"""Endpoint tests for rate-limited registration and first-user-admin bootstrap."""

import unittest

from storefront.core.security import verify_password
from storefront.models import Role, User
from support import ApiTestCase, create_user

REGISTER_URL = "/api/v1/auth/register"


def register_body(email: str, name: str = "Ada Lovelace", password: str = "Abcdef1!") -> dict:
    return {"name": name, "email": email, "password": password}


class TestFirstUserBootstrap(ApiTestCase):
    """The first account in an empty store is ADMIN; later accounts are USER."""

    def test_first_admin_then_user(self) -> None:
        first = self.client.post(REGISTER_URL, json=register_body("first@shopmail.com"))
        self.assertEqual(first.status_code, 201)
        body = first.json()
        self.assertTrue(body["success"])
        self.assertTrue(body["isAdmin"])
        self.assertEqual(body["data"]["role"], Role.ADMIN.value)
        self.assertIn("admin", body["message"])

        second = self.client.post(REGISTER_URL, json=register_body("second@shopmail.com"))
        self.assertEqual(second.status_code, 201)
        self.assertFalse(second.json()["isAdmin"])
        self.assertEqual(second.json()["data"]["role"], Role.USER.value)

    def test_response_never_contains_password_hash(self) -> None:
        resp = self.client.post(REGISTER_URL, json=register_body("ada@shopmail.com"))
        data = resp.json()["data"]
        self.assertNotIn("passwordHash", data)
        self.assertNotIn("password", data)

    def test_email_stored_normalized_and_hashed(self) -> None:
        self.client.post(REGISTER_URL, json=register_body("  Ada@ShopMail.com "))
        user = self.fresh_db().query(User).one()
        self.assertEqual(user.email, "ada@shopmail.com")
        self.assertNotEqual(user.password_hash, "Abcdef1!")
        self.assertTrue(user.password_hash.startswith("$2"))

    def test_trailing_space_counts_as_special_character(self) -> None:
        resp = self.client.post(
            REGISTER_URL, json=register_body("ada@shopmail.com", password="Abcdefg1 ")
        )
        self.assertEqual(resp.status_code, 201)
        user = self.fresh_db().query(User).one()
        self.assertTrue(verify_password("Abcdefg1 ", user.password_hash))
        self.assertFalse(verify_password("Abcdefg1", user.password_hash))

    def test_password_hashed_exactly_as_sent(self) -> None:
        self.client.post(
            REGISTER_URL, json=register_body("ada@shopmail.com", password="  Abcdef1!")
        )
        user = self.fresh_db().query(User).one()
        self.assertTrue(verify_password("  Abcdef1!", user.password_hash))
        self.assertFalse(verify_password("Abcdef1!", user.password_hash))

        login = self.client.post(
            "/api/v1/auth/login",
            json={"email": "ada@shopmail.com", "password": "  Abcdef1!"},
        )
        self.assertEqual(login.status_code, 200)

    def test_rate_limit_info_reports_remaining(self) -> None:
        resp = self.client.post(REGISTER_URL, json=register_body("ada@shopmail.com"))
        info = resp.json()["rateLimitInfo"]
        self.assertEqual(info, {"ipRemaining": 4, "emailRemaining": 0})


class TestRegistrationValidation(ApiTestCase):
    def test_missing_fields_rejected(self) -> None:
        resp = self.client.post(REGISTER_URL, json={"email": "ada@shopmail.com"})
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(resp.json()["success"])
        self.assertIn("required", resp.json()["error"])

    def test_name_that_sanitizes_to_empty_rejected(self) -> None:
        resp = self.client.post(REGISTER_URL, json=register_body("ada@shopmail.com", name="<>"))
        self.assertEqual(resp.status_code, 400)

    def test_weak_password_reports_first_rule(self) -> None:
        resp = self.client.post(
            REGISTER_URL, json=register_body("ada@shopmail.com", password="abc")
        )
        self.assertEqual(resp.status_code, 400)
        self.assertIn("at least 8", resp.json()["error"])

    def test_invalid_email_rejected(self) -> None:
        resp = self.client.post(REGISTER_URL, json=register_body("nope"))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "Enter a valid email address")

    def test_rejected_input_does_not_consume_attempts(self) -> None:
        for _ in range(6):
            self.client.post(REGISTER_URL, json=register_body("nope"))
        resp = self.client.post(REGISTER_URL, json=register_body("ada@shopmail.com"))
        self.assertEqual(resp.status_code, 201)


class TestDuplicateEmail(ApiTestCase):
    settings_overrides = {"REGISTER_EMAIL_ATTEMPTS": 5}

    def test_existing_email_rejected(self) -> None:
        create_user(self.db, email="taken@shopmail.com")
        resp = self.client.post(REGISTER_URL, json=register_body("Taken@shopmail.com"))
        self.assertEqual(resp.status_code, 400)
        self.assertIn("already exists", resp.json()["error"])


class TestRegistrationRateLimits(ApiTestCase):
    def test_sixth_attempt_from_same_ip_blocked(self) -> None:
        headers = {"X-Forwarded-For": "203.0.113.7, 10.0.0.1"}
        for i in range(5):
            resp = self.client.post(
                REGISTER_URL, json=register_body(f"user{i}@shopmail.com"), headers=headers
            )
            self.assertEqual(resp.status_code, 201, resp.json())
        resp = self.client.post(
            REGISTER_URL, json=register_body("user5@shopmail.com"), headers=headers
        )
        self.assertEqual(resp.status_code, 429)
        body = resp.json()
        self.assertFalse(body["success"])
        self.assertTrue(body["rateLimited"])
        self.assertEqual(body["reason"], "IP_BLOCKED")
        self.assertIsInstance(body["resetTime"], int)
        self.assertIn("hour", body["error"])

    def test_other_ip_not_affected(self) -> None:
        for i in range(6):
            self.client.post(
                REGISTER_URL,
                json=register_body(f"user{i}@shopmail.com"),
                headers={"X-Forwarded-For": "203.0.113.7"},
            )
        resp = self.client.post(
            REGISTER_URL,
            json=register_body("other@shopmail.com"),
            headers={"X-Real-IP": "198.51.100.2"},
        )
        self.assertEqual(resp.status_code, 201)

    def test_second_attempt_for_same_email_blocked(self) -> None:
        first = self.client.post(
            REGISTER_URL,
            json=register_body("dup@shopmail.com"),
            headers={"X-Forwarded-For": "203.0.113.1"},
        )
        self.assertEqual(first.status_code, 201)
        second = self.client.post(
            REGISTER_URL,
            json=register_body(" DUP@shopmail.com"),
            headers={"X-Forwarded-For": "203.0.113.2"},
        )
        self.assertEqual(second.status_code, 429)
        self.assertEqual(second.json()["reason"], "EMAIL_BLOCKED")


if __name__ == "__main__":
    unittest.main()
