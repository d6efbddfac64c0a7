from unittest.mock import patch

from django.test import TestCase
from rest_framework.test import APIClient

from accounts.models import User


class PlatformRouteTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_health_is_public(self):
        response = self.client.get("/health/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "OK")

    def test_unknown_api_route_returns_json_404(self):
        response = self.client.get("/api/does-not-exist/")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"detail": "Route not found."})

    def test_unexpected_error_becomes_generic_500(self):
        user = User.objects.create_user(username="owner", email="owner@example.com", password="StrongPass123!")
        self.client.force_authenticate(user=user)

        with patch("apps.workers.views.Worker.objects.all", side_effect=RuntimeError("boom")):
            with self.assertLogs("config.exceptions", level="ERROR"):
                response = self.client.get("/api/workers/")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data, {"detail": "Server error."})
