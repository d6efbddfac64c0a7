from datetime import date
from decimal import Decimal
from unittest.mock import patch

from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.models import User
from apps.agriculture.models import Cultivation
from apps.workers.models import Worker

from .models import Payment


class CultivationPaymentApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username="owner", email="owner@example.com", password="StrongPass123!")
        self.client.force_authenticate(user=self.user)
        self.cultivation = Cultivation.objects.create(
            crop_name="Wheat",
            area=Decimal("2"),
            rate_per_bigha=Decimal("1000"),
            payment_mode="cash",
        )

    def _post(self, amount, **extra):
        payload = {
            "cultivation_id": self.cultivation.id,
            "amount": amount,
            "paid_to": "Mohan",
            "payment_mode": "bank",
            **extra,
        }
        return self.client.post("/api/payments/", payload, format="json")

    @patch("apps.payments.views.PaymentsAuditService.log_cultivation_payment_created")
    def test_create_recomputes_cultivation_received(self, log_created):
        self._post("500", date="2024-03-01")
        response = self._post("700")

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["date"], timezone.localdate().isoformat())
        self.cultivation.refresh_from_db()
        self.assertEqual(self.cultivation.amount_received, Decimal("1200.00"))
        self.assertEqual(self.cultivation.amount_pending, Decimal("800.00"))
        self.assertEqual(log_created.call_count, 2)

    def test_overpayment_clamps_pending(self):
        self._post("2500")
        self.cultivation.refresh_from_db()
        self.assertEqual(self.cultivation.amount_pending, Decimal("0.00"))

    def test_update_and_delete_recompute(self):
        first = self._post("500").data["id"]
        self._post("300")

        response = self.client.put(
            f"/api/payments/{first}/",
            {"amount": "900", "paid_to": "Mohan", "payment_mode": "UPI"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.cultivation.refresh_from_db()
        self.assertEqual(self.cultivation.amount_received, Decimal("1200.00"))

        response = self.client.delete(f"/api/payments/{first}/")
        self.assertEqual(response.status_code, 200)
        self.cultivation.refresh_from_db()
        self.assertEqual(self.cultivation.amount_received, Decimal("300.00"))
        self.assertEqual(self.cultivation.amount_pending, Decimal("1700.00"))

    def test_create_validates_input(self):
        response = self.client.post(
            "/api/payments/",
            {"cultivation_id": self.cultivation.id, "amount": "abc", "paid_to": "", "payment_mode": "cheque"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("amount", response.data)
        self.assertIn("paid_to", response.data)
        self.assertIn("payment_mode", response.data)

    def test_unknown_cultivation_returns_404(self):
        response = self.client.post(
            "/api/payments/",
            {"cultivation_id": 999, "amount": "10", "paid_to": "Mohan", "payment_mode": "cash"},
            format="json",
        )
        self.assertEqual(response.status_code, 404)

    def test_list_for_cultivation_newest_first(self):
        self._post("100", date="2024-01-01")
        self._post("200", date="2024-02-01")

        response = self.client.get(f"/api/payments/cultivation/{self.cultivation.id}/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual([item["date"] for item in response.data], ["2024-02-01", "2024-01-01"])


class WorkerPaymentApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username="owner", email="owner@example.com", password="StrongPass123!")
        self.client.force_authenticate(user=self.user)
        self.worker = Worker.objects.create(name="Ramesh", phone="9999999999", salary=Decimal("5000"))

    @patch("apps.payments.views.PaymentsAuditService.log_worker_payment_created")
    def test_create_and_list(self, log_created):
        response = self.client.post(
            "/api/worker-payments/",
            {
                "worker_id": self.worker.id,
                "amount": "2500",
                "date": "2024-03-01",
                "payment_mode": "UPI",
                "description": "March advance",
            },
            format="json",
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["worker_name"], "Ramesh")
        payment = Payment.objects.get(id=response.data["id"])
        self.assertEqual(payment.kind, Payment.Kind.WORKER)
        log_created.assert_called_once()

        response = self.client.get(f"/api/worker-payments/worker/{self.worker.id}/")
        self.assertEqual(len(response.data), 1)

    def test_bank_mode_is_rejected_for_workers(self):
        response = self.client.post(
            "/api/worker-payments/",
            {"worker_id": self.worker.id, "amount": "100", "date": "2024-03-01", "payment_mode": "bank"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("payment_mode", response.data)

    def test_date_is_required(self):
        response = self.client.post(
            "/api/worker-payments/",
            {"worker_id": self.worker.id, "amount": "100", "payment_mode": "cash"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("date", response.data)

    def test_update_and_delete(self):
        payment = Payment.objects.create(
            kind=Payment.Kind.WORKER,
            worker=self.worker,
            amount=Decimal("100"),
            date=date(2024, 3, 1),
            payment_mode="cash",
        )

        response = self.client.put(
            f"/api/worker-payments/{payment.id}/",
            {"amount": "150", "date": "2024-03-02", "payment_mode": "UPI"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        payment.refresh_from_db()
        self.assertEqual(payment.amount, Decimal("150.00"))
        self.assertEqual(payment.payment_mode, "UPI")

        response = self.client.delete(f"/api/worker-payments/{payment.id}/")
        self.assertEqual(response.status_code, 200)
        self.assertFalse(Payment.objects.filter(id=payment.id).exists())

    def test_cultivation_payment_id_is_not_a_worker_payment(self):
        cultivation = Cultivation.objects.create(
            crop_name="Wheat",
            area=Decimal("1"),
            rate_per_bigha=Decimal("100"),
            payment_mode="cash",
        )
        payment = Payment.objects.create(
            kind=Payment.Kind.CULTIVATION,
            cultivation=cultivation,
            amount=Decimal("10"),
            payment_mode="cash",
        )
        response = self.client.delete(f"/api/worker-payments/{payment.id}/")
        self.assertEqual(response.status_code, 404)
