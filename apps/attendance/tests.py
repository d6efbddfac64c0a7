from datetime import date
from decimal import Decimal
from unittest.mock import patch

from django.test import TestCase
from rest_framework.test import APIClient

from accounts.models import User
from apps.workers.models import Worker

from .models import Attendance
from .services import AttendanceService, attendance_rate, normalize_status


class NormalizeStatusTests(TestCase):
    def test_accepts_known_spellings(self):
        self.assertEqual(normalize_status("Present"), "present")
        self.assertEqual(normalize_status("present"), "present")
        self.assertEqual(normalize_status("HalfDay"), "half_day")
        self.assertEqual(normalize_status("half-day"), "half_day")
        self.assertEqual(normalize_status("half_day"), "half_day")
        self.assertEqual(normalize_status("Half Day"), "half_day")
        self.assertEqual(normalize_status("LEAVE"), "leave")
        self.assertEqual(normalize_status("absent"), "absent")

    def test_rejects_unknown_values(self):
        self.assertIsNone(normalize_status("late"))
        self.assertIsNone(normalize_status(""))
        self.assertIsNone(normalize_status(None))

    def test_attendance_rate_counts_half_days(self):
        self.assertEqual(attendance_rate(present=3, half_day=2, total=5), 80.0)
        self.assertEqual(attendance_rate(present=0, half_day=0, total=0), 0.0)


class AttendanceApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            username="owner",
            email="owner@example.com",
            password="StrongPass123!",
        )
        self.client.force_authenticate(user=self.user)
        self.worker = Worker.objects.create(name="Ramesh", phone="9999999999", salary=Decimal("5000"))
        self.other_worker = Worker.objects.create(name="Suresh", phone="8888888888", salary=Decimal("4000"))

    @patch("apps.attendance.views.AttendanceAuditService.log_attendance_created")
    def test_post_creates_record_and_counts_present_day(self, log_created):
        response = self.client.post(
            "/api/attendance/",
            {"worker_id": self.worker.id, "date": "2024-03-01", "status": "Present"},
            format="json",
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["status"], "present")
        self.assertEqual(response.data["worker"]["name"], "Ramesh")
        self.worker.refresh_from_db()
        self.assertEqual(self.worker.total_working_days, 1)
        log_created.assert_called_once()

    @patch("apps.attendance.views.AttendanceAuditService.log_attendance_updated")
    def test_post_same_date_updates_existing(self, log_updated):
        Attendance.objects.create(worker=self.worker, date=date(2024, 3, 1), status="absent", notes="old")

        response = self.client.post(
            "/api/attendance/",
            {"worker_id": self.worker.id, "date": "2024-03-01", "status": "present", "notes": "late start"},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(Attendance.objects.filter(worker=self.worker, date=date(2024, 3, 1)).count(), 1)
        record = Attendance.objects.get(worker=self.worker, date=date(2024, 3, 1))
        self.assertEqual(record.status, "present")
        self.assertEqual(record.notes, "late start")
        self.worker.refresh_from_db()
        self.assertEqual(self.worker.total_working_days, 1)
        log_updated.assert_called_once()

    def test_post_twice_present_keeps_counter_at_one(self):
        payload = {"worker_id": self.worker.id, "date": "2024-03-01", "status": "present"}
        self.client.post("/api/attendance/", payload, format="json")
        response = self.client.post("/api/attendance/", payload, format="json")

        self.assertEqual(response.status_code, 200)
        self.worker.refresh_from_db()
        self.assertEqual(self.worker.total_working_days, 1)

    def test_post_rejects_unknown_status(self):
        response = self.client.post(
            "/api/attendance/",
            {"worker_id": self.worker.id, "date": "2024-03-01", "status": "late"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("status", response.data)

    def test_post_unknown_worker_returns_404(self):
        response = self.client.post(
            "/api/attendance/",
            {"worker_id": 999, "date": "2024-03-01", "status": "present"},
            format="json",
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["detail"], "Worker not found.")

    def test_put_leaving_present_decrements_counter(self):
        AttendanceService.upsert(worker=self.worker, day=date(2024, 3, 1), status="present")
        record = Attendance.objects.get(worker=self.worker)

        response = self.client.put(f"/api/attendance/{record.id}/", {"status": "Absent"}, format="json")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], "absent")
        self.worker.refresh_from_db()
        self.assertEqual(self.worker.total_working_days, 0)

    def test_delete_present_record_decrements_counter(self):
        AttendanceService.upsert(worker=self.worker, day=date(2024, 3, 1), status="present")
        AttendanceService.upsert(worker=self.worker, day=date(2024, 3, 2), status="present")
        record = Attendance.objects.get(worker=self.worker, date=date(2024, 3, 2))

        response = self.client.delete(f"/api/attendance/{record.id}/")

        self.assertEqual(response.status_code, 200)
        self.assertFalse(Attendance.objects.filter(id=record.id).exists())
        self.worker.refresh_from_db()
        self.assertEqual(self.worker.total_working_days, 1)

    def test_detail_unknown_id_returns_404(self):
        response = self.client.get("/api/attendance/999/")
        self.assertEqual(response.status_code, 404)

    def test_list_filters_by_worker_status_and_range(self):
        Attendance.objects.create(worker=self.worker, date=date(2024, 3, 1), status="present")
        Attendance.objects.create(worker=self.worker, date=date(2024, 3, 5), status="absent")
        Attendance.objects.create(worker=self.worker, date=date(2024, 4, 1), status="present")
        Attendance.objects.create(worker=self.other_worker, date=date(2024, 3, 1), status="present")

        response = self.client.get(
            "/api/attendance/",
            {"worker_id": self.worker.id, "start_date": "2024-03-01", "end_date": "2024-03-31"},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual([item["date"] for item in response.data], ["2024-03-05", "2024-03-01"])

        response = self.client.get("/api/attendance/", {"status": "Present"})
        self.assertEqual(len(response.data), 3)

    def test_list_ignores_half_open_range(self):
        Attendance.objects.create(worker=self.worker, date=date(2024, 3, 1), status="present")
        Attendance.objects.create(worker=self.worker, date=date(2024, 4, 1), status="present")

        response = self.client.get("/api/attendance/", {"start_date": "2024-03-15"})
        self.assertEqual(len(response.data), 2)

    @patch("apps.attendance.views.AttendanceAuditService.log_bulk_created")
    def test_bulk_reports_per_row_results(self, log_bulk):
        response = self.client.post(
            "/api/attendance/bulk/",
            {
                "date": "2024-03-01",
                "attendance_data": [
                    {"worker_id": self.worker.id, "status": "present"},
                    {"worker_id": self.other_worker.id, "status": "HalfDay"},
                    {"worker_id": 999, "status": "present"},
                    {"worker_id": self.worker.id, "status": "late"},
                ],
            },
            format="json",
        )

        self.assertEqual(response.status_code, 201)
        results = response.data["results"]
        self.assertTrue(results[0]["success"])
        self.assertTrue(results[0]["created"])
        self.assertTrue(results[1]["success"])
        self.assertFalse(results[2]["success"])
        self.assertEqual(results[2]["message"], "Worker not found.")
        self.assertFalse(results[3]["success"])
        self.assertEqual(response.data["succeeded"], 2)
        self.assertEqual(response.data["failed"], 2)
        self.assertEqual(
            Attendance.objects.get(worker=self.other_worker, date=date(2024, 3, 1)).status,
            "half_day",
        )
        log_bulk.assert_called_once()

    def test_worker_summary_counts_statuses(self):
        Attendance.objects.create(worker=self.worker, date=date(2024, 3, 1), status="present", working_hours=Decimal("8"))
        Attendance.objects.create(worker=self.worker, date=date(2024, 3, 2), status="half_day", working_hours=Decimal("4"))
        Attendance.objects.create(worker=self.worker, date=date(2024, 3, 3), status="absent")
        Attendance.objects.create(worker=self.worker, date=date(2024, 4, 1), status="leave")

        response = self.client.get(
            f"/api/attendance/summary/worker/{self.worker.id}/",
            {"start_date": "2024-03-01", "end_date": "2024-03-31"},
        )

        self.assertEqual(response.status_code, 200)
        summary = response.data["summary"]
        self.assertEqual(summary["total_days"], 3)
        self.assertEqual(summary["present"], 1)
        self.assertEqual(summary["half_day"], 1)
        self.assertEqual(summary["absent"], 1)
        self.assertEqual(summary["leave"], 0)
        self.assertEqual(summary["total_working_hours"], Decimal("12"))
        self.assertEqual(summary["attendance_rate"], 50.0)

    def test_overview_lists_every_worker(self):
        Attendance.objects.create(worker=self.worker, date=date(2024, 3, 1), status="present")

        response = self.client.get("/api/attendance/summary/overview/")

        self.assertEqual(response.status_code, 200)
        by_name = {row["name"]: row for row in response.data}
        self.assertEqual(by_name["Ramesh"]["present"], 1)
        self.assertEqual(by_name["Ramesh"]["attendance_rate"], 100.0)
        self.assertEqual(by_name["Suresh"]["total_days"], 0)

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)
        response = self.client.get("/api/attendance/")
        self.assertEqual(response.status_code, 401)
