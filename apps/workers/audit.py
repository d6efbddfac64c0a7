from __future__ import annotations

from typing import Optional

from apps.audit import AuditEvents, log_event


class WorkersAuditService:
    @staticmethod
    def _ip(request) -> Optional[str]:
        xff = request.META.get("HTTP_X_FORWARDED_FOR")
        if xff:
            return xff.split(",")[0].strip()
        return request.META.get("REMOTE_ADDR")

    @classmethod
    def log_worker_created(cls, request, worker) -> None:
        log_event(
            action=AuditEvents.WORKER_CREATED,
            actor=request.user,
            object_type="worker",
            object_id=str(worker.id),
            category="workforce",
            ip_address=cls._ip(request),
            metadata={"name": worker.name, "salary": str(worker.salary)},
        )

    @classmethod
    def log_worker_updated(cls, request, worker, changed_fields: list[str]) -> None:
        log_event(
            action=AuditEvents.WORKER_UPDATED,
            actor=request.user,
            object_type="worker",
            object_id=str(worker.id),
            category="workforce",
            ip_address=cls._ip(request),
            metadata={"changed_fields": changed_fields},
        )

    @classmethod
    def log_worker_deleted(cls, request, worker_id: int, name: str) -> None:
        log_event(
            action=AuditEvents.WORKER_DELETED,
            actor=request.user,
            object_type="worker",
            object_id=str(worker_id),
            level="warning",
            category="workforce",
            ip_address=cls._ip(request),
            metadata={"name": name},
        )
