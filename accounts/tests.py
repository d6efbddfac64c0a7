from datetime import timedelta
from io import StringIO
from unittest.mock import patch

from django.core.management import call_command
from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework.test import APIClient

from .models import OTP, AuditLog, User
from .services import OTPService


class RegisterApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_register_returns_tokens_and_user(self):
        response = self.client.post(
            "/api/auth/register/",
            {"username": "owner", "email": "Owner@Example.com", "password": "StrongPass123!"},
            format="json",
        )

        self.assertEqual(response.status_code, 201)
        self.assertIn("token", response.data)
        self.assertIn("refresh", response.data)
        self.assertEqual(response.data["user"]["username"], "owner")
        self.assertEqual(response.data["user"]["email"], "owner@example.com")
        self.assertEqual(response.data["user"]["role"], "user")
        self.assertIsNone(response.data["user"]["telegram_username"])
        self.assertTrue(User.objects.get(username="owner").check_password("StrongPass123!"))
        self.assertTrue(AuditLog.objects.filter(action="user_registered").exists())

    def test_register_rejects_duplicate_username_and_email(self):
        User.objects.create_user(username="owner", email="owner@example.com", password="StrongPass123!")

        response = self.client.post(
            "/api/auth/register/",
            {"username": "OWNER", "email": "owner@example.com", "password": "StrongPass123!"},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn("username", response.data)
        self.assertIn("email", response.data)

    def test_register_rejects_short_password(self):
        response = self.client.post(
            "/api/auth/register/",
            {"username": "owner", "email": "owner@example.com", "password": "123"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("password", response.data)


class LoginApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            username="owner",
            email="owner@example.com",
            password="StrongPass123!",
        )

    def test_login_with_username(self):
        response = self.client.post(
            "/api/auth/login/",
            {"login": "owner", "password": "StrongPass123!"},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertIn("token", response.data)
        self.assertEqual(response.data["user"]["id"], self.user.id)

    def test_login_with_email_any_case(self):
        response = self.client.post(
            "/api/auth/login/",
            {"email": "OWNER@example.com", "password": "StrongPass123!"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)

    def test_wrong_password_is_rejected_and_audited(self):
        response = self.client.post(
            "/api/auth/login/",
            {"login": "owner", "password": "wrong"},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["detail"], "Invalid credentials.")
        self.assertTrue(AuditLog.objects.filter(action="login_failed", user=self.user).exists())

    def test_missing_identifier(self):
        response = self.client.post("/api/auth/login/", {"password": "StrongPass123!"}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertIn("login", response.data)

    def test_issued_token_authenticates_me(self):
        login = self.client.post(
            "/api/auth/login/",
            {"login": "owner", "password": "StrongPass123!"},
            format="json",
        )
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {login.data['token']}")

        response = self.client.get("/api/auth/me/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["username"], "owner")

    def test_me_requires_authentication(self):
        self.assertEqual(self.client.get("/api/auth/me/").status_code, 401)


class OTPApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    @override_settings(DEBUG=True)
    def test_request_returns_code_in_debug(self):
        response = self.client.post("/api/auth/otp/request/", {"mobile_number": "9999999999"}, format="json")

        self.assertEqual(response.status_code, 201)
        self.assertEqual(len(response.data["code"]), 6)
        self.assertTrue(OTP.objects.filter(mobile_number="9999999999", code=response.data["code"]).exists())

    def test_request_hides_code_outside_debug(self):
        response = self.client.post("/api/auth/otp/request/", {"mobile_number": "9999999999"}, format="json")

        self.assertEqual(response.status_code, 201)
        self.assertNotIn("code", response.data)

    def test_request_rejects_bad_number(self):
        response = self.client.post("/api/auth/otp/request/", {"mobile_number": "12ab"}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertIn("mobile_number", response.data)

    def test_verify_consumes_code_once(self):
        otp = OTPService.issue(mobile_number="9999999999")
        payload = {"mobile_number": "9999999999", "code": otp.code}

        first = self.client.post("/api/auth/otp/verify/", payload, format="json")
        second = self.client.post("/api/auth/otp/verify/", payload, format="json")

        self.assertEqual(first.status_code, 200)
        self.assertTrue(first.data["verified"])
        self.assertEqual(second.status_code, 400)
        otp.refresh_from_db()
        self.assertTrue(otp.is_used)

    def test_expired_code_is_rejected(self):
        otp = OTP.objects.create(
            mobile_number="9999999999",
            code="123456",
            expires_at=timezone.now() - timedelta(minutes=1),
        )

        response = self.client.post(
            "/api/auth/otp/verify/",
            {"mobile_number": "9999999999", "code": otp.code},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["detail"], "Invalid or expired OTP.")

    @patch("accounts.services.OTPService._generate_code", return_value="654321")
    def test_issue_uses_configured_ttl(self, _generate):
        with override_settings(OTP_TTL_MINUTES=5):
            otp = OTPService.issue(mobile_number="9999999999")

        self.assertEqual(otp.code, "654321")
        remaining = otp.expires_at - timezone.now()
        self.assertTrue(timedelta(minutes=4) < remaining <= timedelta(minutes=5))


class PurgeExpiredOTPCommandTests(TestCase):
    def test_purge_removes_only_expired_codes(self):
        now = timezone.now()
        OTP.objects.create(mobile_number="9999999999", code="111111", expires_at=now - timedelta(minutes=1))
        live = OTP.objects.create(mobile_number="9999999999", code="222222", expires_at=now + timedelta(minutes=10))
        out = StringIO()

        call_command("purge_expired_otps", stdout=out)

        self.assertEqual(list(OTP.objects.values_list("id", flat=True)), [live.id])
        self.assertIn("deleted=1", out.getvalue())
