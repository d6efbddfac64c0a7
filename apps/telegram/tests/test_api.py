from unittest.mock import patch

from django.test import TestCase
from rest_framework.test import APIClient

from accounts.models import User


class TelegramUsernameApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            username="owner",
            email="owner@example.com",
            password="StrongPass123!",
        )
        self.other = User.objects.create_user(
            username="neighbour",
            email="neighbour@example.com",
            password="StrongPass123!",
            telegram_username="taken_name",
        )
        self.client.force_authenticate(user=self.user)

    def test_status_is_null_before_linking(self):
        response = self.client.get("/api/telegram/status/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data, {"telegram_username": None})

    @patch("apps.telegram.views.TelegramAuditService.log_username_updated")
    def test_add_telegram_username(self, log_updated):
        response = self.client.post(
            "/api/telegram/add-telegram/",
            {"telegram_username": "@farm_owner"},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["message"], "Telegram username updated successfully")
        self.assertEqual(response.data["telegram_username"], "farm_owner")
        self.user.refresh_from_db()
        self.assertEqual(self.user.telegram_username, "farm_owner")
        log_updated.assert_called_once()

        response = self.client.get("/api/telegram/status/")
        self.assertEqual(response.data["telegram_username"], "farm_owner")

    def test_saving_same_username_again_is_allowed(self):
        self.user.telegram_username = "farm_owner"
        self.user.save()

        response = self.client.post(
            "/api/telegram/add-telegram/",
            {"telegram_username": "farm_owner"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)

    @patch("apps.telegram.views.TelegramAuditService.log_username_conflict")
    def test_username_of_another_user_is_rejected(self, log_conflict):
        response = self.client.post(
            "/api/telegram/add-telegram/",
            {"telegram_username": "Taken_Name"},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["detail"], "Telegram username already registered with another user")
        self.user.refresh_from_db()
        self.assertIsNone(self.user.telegram_username)
        log_conflict.assert_called_once()

    def test_invalid_usernames_are_rejected(self):
        for value in ("ab", "x" * 33, "bad-name", "with space"):
            response = self.client.post(
                "/api/telegram/add-telegram/",
                {"telegram_username": value},
                format="json",
            )
            self.assertEqual(response.status_code, 400, value)
            self.assertIn("telegram_username", response.data)

    def test_blank_value_unlinks_account(self):
        self.user.telegram_username = "farm_owner"
        self.user.save()

        response = self.client.post(
            "/api/telegram/add-telegram/",
            {"telegram_username": ""},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["message"], "Telegram username removed successfully")
        self.user.refresh_from_db()
        self.assertIsNone(self.user.telegram_username)

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)

        self.assertEqual(self.client.get("/api/telegram/status/").status_code, 401)
        self.assertEqual(
            self.client.post("/api/telegram/add-telegram/", {"telegram_username": "abc"}, format="json").status_code,
            401,
        )
