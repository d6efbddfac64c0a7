from __future__ import annotations

from typing import Optional

from apps.audit import AuditEvents, log_event


class AttendanceAuditService:
    @staticmethod
    def _ip(request) -> Optional[str]:
        xff = request.META.get("HTTP_X_FORWARDED_FOR")
        if xff:
            return xff.split(",")[0].strip()
        return request.META.get("REMOTE_ADDR")

    @classmethod
    def log_attendance_created(cls, request, record) -> None:
        log_event(
            action=AuditEvents.ATTENDANCE_CREATED,
            actor=request.user,
            object_type="attendance",
            object_id=str(record.id),
            category="workforce",
            ip_address=cls._ip(request),
            metadata={
                "worker_id": record.worker_id,
                "date": record.date.isoformat(),
                "status": record.status,
            },
        )

    @classmethod
    def log_attendance_updated(cls, request, record, changed_fields: list[str]) -> None:
        log_event(
            action=AuditEvents.ATTENDANCE_UPDATED,
            actor=request.user,
            object_type="attendance",
            object_id=str(record.id),
            category="workforce",
            ip_address=cls._ip(request),
            metadata={
                "worker_id": record.worker_id,
                "date": record.date.isoformat(),
                "changed_fields": changed_fields,
            },
        )

    @classmethod
    def log_attendance_deleted(cls, request, attendance_id: int, worker_id: int, day) -> None:
        log_event(
            action=AuditEvents.ATTENDANCE_DELETED,
            actor=request.user,
            object_type="attendance",
            object_id=str(attendance_id),
            level="warning",
            category="workforce",
            ip_address=cls._ip(request),
            metadata={"worker_id": worker_id, "date": day.isoformat()},
        )

    @classmethod
    def log_bulk_created(cls, request, day, succeeded: int, failed: int) -> None:
        log_event(
            action=AuditEvents.ATTENDANCE_BULK_CREATED,
            actor=request.user,
            object_type="attendance",
            category="workforce",
            ip_address=cls._ip(request),
            metadata={"date": day.isoformat(), "succeeded": succeeded, "failed": failed},
        )
