from datetime import date
from decimal import Decimal

from django.test import TestCase
from rest_framework.test import APIClient

from accounts.models import User
from apps.agriculture.models import Cultivation
from apps.attendance.models import Attendance
from apps.payments.models import Payment
from apps.properties.models import Property
from apps.workers.models import Worker


class AnalyticsApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username="owner", email="owner@example.com", password="StrongPass123!")
        self.client.force_authenticate(user=self.user)

        self.worker = Worker.objects.create(name="Ramesh", phone="9999999999", salary=Decimal("5000"))
        Attendance.objects.create(worker=self.worker, date=date(2024, 1, 1), status="present")
        Attendance.objects.create(worker=self.worker, date=date(2024, 2, 1), status="absent")
        Payment.objects.create(
            kind=Payment.Kind.WORKER,
            worker=self.worker,
            amount=Decimal("1000"),
            date=date(2024, 1, 5),
            payment_mode="cash",
        )
        Cultivation.objects.create(
            crop_name="Wheat",
            area=Decimal("2"),
            rate_per_bigha=Decimal("1000"),
            amount_received=Decimal("1500"),
            payment_mode="cash",
            cultivation_date=date(2024, 1, 10),
        )
        Property.objects.create(
            property_type="sell",
            area=Decimal("1"),
            area_unit="Bigha",
            partner_name="Gopal",
            rate_per_unit=Decimal("3000"),
            total_cost=Decimal("3000"),
            amount_paid=Decimal("2500"),
            transaction_date=date(2024, 1, 15),
        )

    def test_dashboard_with_range(self):
        response = self.client.get(
            "/api/analytics/dashboard/",
            {"start_date": "2024-01-01", "end_date": "2024-01-31"},
        )

        self.assertEqual(response.status_code, 200)
        summary = response.data["summary"]
        self.assertEqual(summary["total_expenses"], Decimal("1000"))
        self.assertEqual(summary["total_income"], Decimal("4000"))
        self.assertEqual(summary["total_absent_days"], 0)
        self.assertEqual(len(response.data["time_series"]), 31)
        self.assertEqual(response.data["filters"]["category"], "all")

    def test_dashboard_rejects_inverted_range(self):
        response = self.client.get(
            "/api/analytics/dashboard/",
            {"start_date": "2024-02-01", "end_date": "2024-01-01"},
        )
        self.assertEqual(response.status_code, 400)

    def test_workers_agriculture_and_real_estate(self):
        response = self.client.get("/api/analytics/workers/")
        self.assertEqual(response.data[0]["name"], "Ramesh")
        self.assertEqual(response.data[0]["attendance_rate"], 50.0)

        response = self.client.get("/api/analytics/agriculture/")
        self.assertEqual(response.data["Wheat"]["profit_margin"], -25.0)

        response = self.client.get("/api/analytics/real-estate/")
        self.assertEqual(response.data["Gopal"]["total_revenue"], Decimal("2500"))

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)
        self.assertEqual(self.client.get("/api/analytics/dashboard/").status_code, 401)
