from datetime import date
from decimal import Decimal
from unittest.mock import patch

from django.test import TestCase
from rest_framework.test import APIClient

from accounts.models import User
from apps.payments.models import Payment

from .models import Cultivation, Person


class CultivationModelTests(TestCase):
    def test_save_derives_total_and_pending(self):
        cultivation = Cultivation.objects.create(
            crop_name="Wheat",
            area=Decimal("2"),
            rate_per_bigha=Decimal("1000"),
            amount_received=Decimal("1500"),
            payment_mode=Cultivation.PaymentMode.CASH,
        )
        self.assertEqual(cultivation.total_cost, Decimal("2000.00"))
        self.assertEqual(cultivation.amount_pending, Decimal("500.00"))
        self.assertEqual(cultivation.profit, Decimal("-500.00"))

    def test_pending_is_clamped_at_zero(self):
        cultivation = Cultivation.objects.create(
            crop_name="Mustard",
            area=Decimal("1"),
            rate_per_bigha=Decimal("1000"),
            amount_received=Decimal("1800"),
            payment_mode=Cultivation.PaymentMode.UPI,
        )
        self.assertEqual(cultivation.amount_pending, Decimal("0.00"))

        cultivation.amount_received = Decimal("200")
        cultivation.save(update_fields=["amount_received"])
        cultivation.refresh_from_db()
        self.assertEqual(cultivation.amount_pending, Decimal("800.00"))


class PersonApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username="owner", email="owner@example.com", password="StrongPass123!")
        self.other = User.objects.create_user(username="other", email="other@example.com", password="StrongPass123!")
        self.client.force_authenticate(user=self.user)

    @patch("apps.agriculture.views.AgricultureAuditService.log_person_created")
    def test_create_and_list_only_own_persons(self, log_created):
        response = self.client.post("/api/persons/", {"name": "  Mohan  ", "phone": "9876543210"}, format="json")
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["name"], "Mohan")
        log_created.assert_called_once()

        Person.objects.create(name="Amit", created_by=self.user)
        Person.objects.create(name="Zed", created_by=self.other)

        response = self.client.get("/api/persons/")
        self.assertEqual([item["name"] for item in response.data], ["Amit", "Mohan"])

    def test_create_rejects_bad_phone(self):
        response = self.client.post("/api/persons/", {"name": "Mohan", "phone": "12ab"}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertIn("phone", response.data)

    def test_detail_reports_cultivation_totals_from_payments(self):
        person = Person.objects.create(name="Mohan", created_by=self.user)
        cultivation = Cultivation.objects.create(
            person=person,
            crop_name="Wheat",
            area=Decimal("2"),
            rate_per_bigha=Decimal("1000"),
            payment_mode="cash",
        )
        Payment.objects.create(
            kind=Payment.Kind.CULTIVATION,
            cultivation=cultivation,
            amount=Decimal("700"),
            paid_to="Mohan",
            payment_mode="cash",
        )

        response = self.client.get(f"/api/persons/{person.id}/")

        self.assertEqual(response.status_code, 200)
        row = response.data["cultivations"][0]
        self.assertEqual(row["total_received"], Decimal("700"))
        self.assertEqual(row["amount_pending"], Decimal("1300"))
        self.assertEqual(len(row["payments"]), 1)
        self.assertEqual(response.data["totals"]["investment"], Decimal("2000"))
        self.assertEqual(response.data["totals"]["profit"], Decimal("-1300"))

    def test_other_users_person_is_not_found(self):
        person = Person.objects.create(name="Zed", created_by=self.other)
        response = self.client.get(f"/api/persons/{person.id}/")
        self.assertEqual(response.status_code, 404)

    @patch("apps.agriculture.views.AgricultureAuditService.log_person_deleted")
    def test_delete_cascades_to_cultivations_and_payments(self, log_deleted):
        person = Person.objects.create(name="Mohan", created_by=self.user)
        cultivation = Cultivation.objects.create(
            person=person,
            crop_name="Wheat",
            area=Decimal("1"),
            rate_per_bigha=Decimal("500"),
            payment_mode="cash",
        )
        Payment.objects.create(
            kind=Payment.Kind.CULTIVATION,
            cultivation=cultivation,
            amount=Decimal("100"),
            paid_to="Mohan",
            payment_mode="UPI",
        )

        response = self.client.delete(f"/api/persons/{person.id}/")

        self.assertEqual(response.status_code, 200)
        self.assertFalse(Person.objects.filter(id=person.id).exists())
        self.assertFalse(Cultivation.objects.exists())
        self.assertFalse(Payment.objects.exists())
        log_deleted.assert_called_once()


class CultivationApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username="owner", email="owner@example.com", password="StrongPass123!")
        self.client.force_authenticate(user=self.user)
        self.person = Person.objects.create(name="Mohan", created_by=self.user)

    def _create(self, **overrides):
        values = {
            "person": self.person,
            "crop_name": "Wheat",
            "area": Decimal("2"),
            "rate_per_bigha": Decimal("1000"),
            "payment_mode": "cash",
        }
        values.update(overrides)
        return Cultivation.objects.create(**values)

    @patch("apps.agriculture.views.AgricultureAuditService.log_cultivation_created")
    def test_create_computes_total_cost_server_side(self, log_created):
        response = self.client.post(
            "/api/cultivations/",
            {
                "person": self.person.id,
                "crop_name": "Wheat",
                "area": "2",
                "rate_per_bigha": "1000",
                "amount_received": "1500",
                "payment_mode": "cash",
            },
            format="json",
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["total_cost"], Decimal("2000.00"))
        self.assertEqual(response.data["amount_pending"], Decimal("500.00"))
        self.assertEqual(response.data["person_name"], "Mohan")
        log_created.assert_called_once()

    def test_create_rejects_foreign_person_and_bad_mode(self):
        other = User.objects.create_user(username="other", email="other@example.com", password="StrongPass123!")
        foreign = Person.objects.create(name="Zed", created_by=other)

        response = self.client.post(
            "/api/cultivations/",
            {
                "person": foreign.id,
                "crop_name": "Wheat",
                "area": "2",
                "rate_per_bigha": "1000",
                "payment_mode": "bank",
            },
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn("person", response.data)
        self.assertIn("payment_mode", response.data)

    def test_update_recomputes_pending(self):
        cultivation = self._create(amount_received=Decimal("500"))

        response = self.client.patch(
            f"/api/cultivations/{cultivation.id}/",
            {"area": "3"},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["total_cost"], Decimal("3000.00"))
        self.assertEqual(response.data["amount_pending"], Decimal("2500.00"))

    def test_list_filters(self):
        self._create(crop_name="Wheat", cultivation_date=date(2024, 1, 10))
        self._create(crop_name="Buckwheat", cultivation_date=date(2024, 2, 10), payment_mode="UPI")
        self._create(crop_name="Rice", cultivation_date=date(2024, 3, 10))

        response = self.client.get("/api/cultivations/", {"crop_name": "wheat"})
        self.assertEqual([item["crop_name"] for item in response.data], ["Buckwheat", "Wheat"])

        response = self.client.get("/api/cultivations/", {"start_date": "2024-02-01", "end_date": "2024-03-31"})
        self.assertEqual(len(response.data), 2)

        response = self.client.get("/api/cultivations/", {"payment_mode": "UPI"})
        self.assertEqual(len(response.data), 1)

    def test_detail_includes_payments(self):
        cultivation = self._create()
        Payment.objects.create(
            kind=Payment.Kind.CULTIVATION,
            cultivation=cultivation,
            amount=Decimal("100"),
            paid_to="Mohan",
            payment_mode="bank",
        )

        response = self.client.get(f"/api/cultivations/{cultivation.id}/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data["payments"]), 1)

    def test_crop_summary_groups_by_crop(self):
        self._create(crop_name="Wheat", amount_received=Decimal("2500"))
        self._create(crop_name="Wheat", area=Decimal("1"), amount_received=Decimal("0"))
        self._create(crop_name="Rice", area=Decimal("1"), rate_per_bigha=Decimal("800"))

        response = self.client.get("/api/cultivations/summary/crops/")

        self.assertEqual(response.status_code, 200)
        wheat = response.data["Wheat"]
        self.assertEqual(wheat["count"], 2)
        self.assertEqual(wheat["total_area"], Decimal("3"))
        self.assertEqual(wheat["total_cost"], Decimal("3000"))
        self.assertEqual(wheat["total_pending"], Decimal("1000"))
        self.assertEqual(wheat["profit"], Decimal("-500"))
        self.assertEqual(response.data["Rice"]["count"], 1)

    def test_unknown_cultivation_returns_404(self):
        response = self.client.delete("/api/cultivations/999/")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["detail"], "Cultivation not found.")
