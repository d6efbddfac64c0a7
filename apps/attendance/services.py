from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from django.db import IntegrityError, transaction
from django.db.models import Count, Q, Sum
from django.db.models.functions import Coalesce

from apps.workers.models import Worker
from apps.workers.services import WorkerService

from .models import Attendance


ZERO = Decimal("0.00")

STATUS_ALIASES = {
    "present": Attendance.Status.PRESENT,
    "absent": Attendance.Status.ABSENT,
    "halfday": Attendance.Status.HALF_DAY,
    "leave": Attendance.Status.LEAVE,
}

# Fields a caller may set besides status on create/update.
DETAIL_FIELDS = ("check_in_time", "check_out_time", "working_hours", "notes")


def normalize_status(raw) -> Optional[str]:
    """
    Map any accepted spelling to the canonical status.

    "Present", "present", "HalfDay", "half-day", "half_day", "Half Day" all
    resolve; anything else returns None.
    """
    if not isinstance(raw, str):
        return None
    key = re.sub(r"[\s_\-]+", "", raw).lower()
    return STATUS_ALIASES.get(key)


def attendance_rate(*, present: int, half_day: int, total: int) -> float:
    if not total:
        return 0.0
    return round((present + half_day * 0.5) / total * 100, 1)


def _present_delta(old_status: Optional[str], new_status: Optional[str]) -> int:
    was_present = old_status == Attendance.Status.PRESENT
    is_present = new_status == Attendance.Status.PRESENT
    return int(is_present) - int(was_present)


@dataclass(frozen=True)
class UpsertResult:
    record: Attendance
    created: bool
    changed_fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class BulkRowResult:
    worker_id: object
    success: bool
    attendance_id: Optional[int] = None
    created: Optional[bool] = None
    message: str = ""

    def as_dict(self) -> dict:
        payload = {"worker_id": self.worker_id, "success": self.success}
        if self.success:
            payload["attendance_id"] = self.attendance_id
            payload["created"] = self.created
        else:
            payload["message"] = self.message
        return payload


class AttendanceService:
    @staticmethod
    @transaction.atomic
    def upsert(*, worker: Worker, day: date, status: str, **details) -> UpsertResult:
        """
        Create the (worker, day) record or update the existing one.
        Keeps worker.total_working_days in step with `present` transitions.
        """
        values = {"status": status}
        for name in DETAIL_FIELDS:
            if name in details:
                values[name] = details[name]
        if values.get("notes", "") is None:
            values["notes"] = ""

        record = Attendance.objects.select_for_update().filter(worker=worker, date=day).first()
        if record is None:
            try:
                with transaction.atomic():
                    record = Attendance.objects.create(worker=worker, date=day, **values)
            except IntegrityError:
                record = Attendance.objects.select_for_update().get(worker=worker, date=day)
            else:
                WorkerService.adjust_working_days(worker_id=worker.id, delta=_present_delta(None, status))
                return UpsertResult(record=record, created=True)

        previous_status = record.status
        changed = [name for name, value in values.items() if getattr(record, name) != value]
        for name in changed:
            setattr(record, name, values[name])
        if changed:
            record.save(update_fields=[*changed, "updated_at"])
        WorkerService.adjust_working_days(worker_id=worker.id, delta=_present_delta(previous_status, status))
        return UpsertResult(record=record, created=False, changed_fields=tuple(changed))

    @staticmethod
    @transaction.atomic
    def update(*, record: Attendance, **values) -> list[str]:
        previous_status = record.status
        changed = [name for name, value in values.items() if getattr(record, name) != value]
        for name in changed:
            setattr(record, name, values[name])
        if changed:
            record.save(update_fields=[*changed, "updated_at"])
        WorkerService.adjust_working_days(
            worker_id=record.worker_id,
            delta=_present_delta(previous_status, record.status),
        )
        return changed

    @staticmethod
    @transaction.atomic
    def delete(*, record: Attendance) -> None:
        WorkerService.adjust_working_days(
            worker_id=record.worker_id,
            delta=_present_delta(record.status, None),
        )
        record.delete()

    @classmethod
    def bulk_upsert(cls, *, day: date, rows: list[dict]) -> list[BulkRowResult]:
        from .serializers import AttendanceBulkRowSerializer

        results = []
        for row in rows:
            worker_id = row.get("worker_id") if isinstance(row, dict) else None
            serializer = AttendanceBulkRowSerializer(data=row if isinstance(row, dict) else {})
            if not serializer.is_valid():
                first_field, messages = next(iter(serializer.errors.items()))
                results.append(BulkRowResult(worker_id=worker_id, success=False, message=f"{first_field}: {messages[0]}"))
                continue

            data = dict(serializer.validated_data)
            worker = Worker.objects.filter(id=data.pop("worker_id")).first()
            if not worker:
                results.append(BulkRowResult(worker_id=worker_id, success=False, message="Worker not found."))
                continue

            result = cls.upsert(worker=worker, day=day, status=data.pop("status"), **data)
            results.append(
                BulkRowResult(
                    worker_id=worker.id,
                    success=True,
                    attendance_id=result.record.id,
                    created=result.created,
                )
            )
        return results

    @staticmethod
    def summarize(records) -> dict:
        counts = {status: 0 for status in Attendance.Status.values}
        hours = ZERO
        total = 0
        for record in records:
            total += 1
            counts[record.status] = counts.get(record.status, 0) + 1
            hours += record.working_hours or ZERO

        return {
            "total_days": total,
            "present": counts[Attendance.Status.PRESENT],
            "absent": counts[Attendance.Status.ABSENT],
            "half_day": counts[Attendance.Status.HALF_DAY],
            "leave": counts[Attendance.Status.LEAVE],
            "total_working_hours": hours,
            "attendance_rate": attendance_rate(
                present=counts[Attendance.Status.PRESENT],
                half_day=counts[Attendance.Status.HALF_DAY],
                total=total,
            ),
        }

    @staticmethod
    def overview(*, start_date: Optional[date] = None, end_date: Optional[date] = None) -> list[dict]:
        """Per-worker attendance counts for the attendance list page."""
        record_filter = Q()
        if start_date and end_date:
            record_filter = Q(attendance_records__date__range=(start_date, end_date))

        def _count(status=None):
            condition = record_filter
            if status:
                condition &= Q(attendance_records__status=status)
            return Count("attendance_records", filter=condition)

        rows = (
            Worker.objects.annotate(
                total_days=_count(),
                present=_count(Attendance.Status.PRESENT),
                absent=_count(Attendance.Status.ABSENT),
                half_day=_count(Attendance.Status.HALF_DAY),
                leave=_count(Attendance.Status.LEAVE),
                total_working_hours=Coalesce(
                    Sum("attendance_records__working_hours", filter=record_filter),
                    ZERO,
                ),
            )
            .order_by("name", "id")
            .values(
                "id",
                "name",
                "is_active",
                "total_days",
                "present",
                "absent",
                "half_day",
                "leave",
                "total_working_hours",
            )
        )

        payload = []
        for row in rows:
            worker_id = row.pop("id")
            payload.append(
                {
                    "worker_id": worker_id,
                    **row,
                    "attendance_rate": attendance_rate(
                        present=row["present"],
                        half_day=row["half_day"],
                        total=row["total_days"],
                    ),
                }
            )
        return payload
