from datetime import date
from decimal import Decimal
from unittest.mock import patch

from django.test import TestCase
from rest_framework.test import APIClient

from accounts.models import User
from apps.attendance.models import Attendance
from apps.payments.models import Payment

from .models import Worker
from .services import WorkerService


class WorkerServiceTests(TestCase):
    def test_create_defaults_to_active(self):
        worker = WorkerService.create(name="Ramesh", phone="9999999999", salary=Decimal("5000"))

        self.assertTrue(worker.is_active)
        self.assertEqual(worker.total_working_days, 0)
        self.assertFalse(WorkerService.create(name="Old", phone="1", salary=Decimal("1"), is_active=False).is_active)

    def test_adjust_working_days_never_goes_negative(self):
        worker = Worker.objects.create(name="Ramesh", phone="9999999999", salary=Decimal("5000"))

        WorkerService.adjust_working_days(worker_id=worker.id, delta=2)
        WorkerService.adjust_working_days(worker_id=worker.id, delta=-5)

        worker.refresh_from_db()
        self.assertEqual(worker.total_working_days, 0)

    def test_find_by_name_prefers_exact_match(self):
        ramesh = Worker.objects.create(name="Ramesh", phone="1", salary=Decimal("1"))
        Worker.objects.create(name="Ramesh Kumar", phone="2", salary=Decimal("1"))

        self.assertEqual(WorkerService.find_by_name("ramesh"), [ramesh])
        self.assertEqual(len(WorkerService.find_by_name("kumar")), 1)
        self.assertEqual(len(WorkerService.find_by_name("Ram")), 2)
        self.assertEqual(WorkerService.find_by_name("  "), [])


class WorkerApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            username="owner",
            email="owner@example.com",
            password="StrongPass123!",
        )
        self.client.force_authenticate(user=self.user)

    @patch("apps.workers.views.WorkersAuditService.log_worker_created")
    def test_create_worker(self, log_created):
        response = self.client.post(
            "/api/workers/",
            {"name": " Ramesh ", "phone": "9999999999", "salary": "5000", "joining_date": "2024-01-15"},
            format="json",
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["name"], "Ramesh")
        self.assertEqual(response.data["salary"], Decimal("5000.00"))
        self.assertEqual(response.data["address"], "")
        self.assertTrue(response.data["is_active"])
        self.assertEqual(response.data["total_working_days"], 0)
        log_created.assert_called_once()

    def test_create_requires_name_phone_salary(self):
        response = self.client.post("/api/workers/", {"name": "", "salary": "-1"}, format="json")

        self.assertEqual(response.status_code, 400)
        self.assertIn("name", response.data)
        self.assertIn("phone", response.data)
        self.assertIn("salary", response.data)

    def test_list_is_newest_first(self):
        first = Worker.objects.create(name="First", phone="1", salary=Decimal("100"))
        second = Worker.objects.create(name="Second", phone="2", salary=Decimal("100"))

        response = self.client.get("/api/workers/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual([item["id"] for item in response.data], [second.id, first.id])

    def test_detail_includes_attendance_and_payment_summaries(self):
        worker = Worker.objects.create(name="Ramesh", phone="9999999999", salary=Decimal("1000"))
        Attendance.objects.create(worker=worker, date=date(2024, 3, 1), status="present")
        Attendance.objects.create(worker=worker, date=date(2024, 3, 2), status="absent")
        Payment.objects.create(kind=Payment.Kind.WORKER, worker=worker, amount=Decimal("3000"), payment_mode="cash")
        Payment.objects.create(kind=Payment.Kind.WORKER, worker=worker, amount=Decimal("2000"), payment_mode="UPI")

        response = self.client.get(f"/api/workers/{worker.id}/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data["attendance"]), 2)
        self.assertEqual(len(response.data["payments"]), 2)
        self.assertEqual(response.data["attendance_summary"]["present"], 1)
        self.assertEqual(response.data["attendance_summary"]["attendance_rate"], 50.0)
        summary = response.data["payment_summary"]
        self.assertEqual(summary["total_salary"], Decimal("12000.00"))
        self.assertEqual(summary["paid"], Decimal("5000.00"))
        self.assertEqual(summary["pending"], Decimal("7000.00"))

    def test_pending_salary_is_clamped_at_zero(self):
        worker = Worker.objects.create(name="Ramesh", phone="9999999999", salary=Decimal("100"))
        Payment.objects.create(kind=Payment.Kind.WORKER, worker=worker, amount=Decimal("5000"), payment_mode="cash")

        response = self.client.get(f"/api/workers/{worker.id}/")

        self.assertEqual(response.data["payment_summary"]["pending"], Decimal("0.00"))

    @patch("apps.workers.views.WorkersAuditService.log_worker_updated")
    def test_patch_updates_given_fields(self, log_updated):
        worker = Worker.objects.create(name="Ramesh", phone="9999999999", salary=Decimal("5000"), address="Old")

        response = self.client.patch(f"/api/workers/{worker.id}/", {"is_active": False}, format="json")

        self.assertEqual(response.status_code, 200)
        worker.refresh_from_db()
        self.assertFalse(worker.is_active)
        self.assertEqual(worker.address, "Old")
        log_updated.assert_called_once()
        self.assertEqual(log_updated.call_args.kwargs["changed_fields"], ["is_active"])

    @patch("apps.workers.views.WorkersAuditService.log_worker_updated")
    def test_put_without_changes_is_not_audited(self, log_updated):
        worker = Worker.objects.create(name="Ramesh", phone="9999999999", salary=Decimal("5000"))

        response = self.client.put(
            f"/api/workers/{worker.id}/",
            {"name": "Ramesh", "phone": "9999999999", "salary": "5000.00"},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        log_updated.assert_not_called()

    def test_delete_cascades_to_attendance_and_payments(self):
        worker = Worker.objects.create(name="Ramesh", phone="9999999999", salary=Decimal("5000"))
        Attendance.objects.create(worker=worker, date=date(2024, 3, 1), status="present")
        Payment.objects.create(kind=Payment.Kind.WORKER, worker=worker, amount=Decimal("10"), payment_mode="cash")

        response = self.client.delete(f"/api/workers/{worker.id}/")

        self.assertEqual(response.status_code, 200)
        self.assertFalse(Worker.objects.filter(id=worker.id).exists())
        self.assertFalse(Attendance.objects.exists())
        self.assertFalse(Payment.objects.exists())

    def test_unknown_worker_returns_404(self):
        for method in ("get", "put", "delete"):
            response = getattr(self.client, method)("/api/workers/999/")
            self.assertEqual(response.status_code, 404)
            self.assertEqual(response.data["detail"], "Worker not found.")

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)
        self.assertEqual(self.client.get("/api/workers/").status_code, 401)
