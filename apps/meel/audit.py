from __future__ import annotations

from typing import Optional

from apps.audit import AuditEvents, log_event


class MeelAuditService:
    @staticmethod
    def _ip(request) -> Optional[str]:
        xff = request.META.get("HTTP_X_FORWARDED_FOR")
        if xff:
            return xff.split(",")[0].strip()
        return request.META.get("REMOTE_ADDR")

    @classmethod
    def log_meel_created(cls, request, meel) -> None:
        log_event(
            action=AuditEvents.MEEL_CREATED,
            actor=request.user,
            object_type="meel",
            object_id=str(meel.id),
            category="finance",
            ip_address=cls._ip(request),
            metadata={
                "transaction_type": meel.transaction_type,
                "transaction_mode": meel.transaction_mode,
                "total_cost": str(meel.total_cost),
            },
        )

    @classmethod
    def log_meel_updated(cls, request, meel, changed_fields: list[str]) -> None:
        log_event(
            action=AuditEvents.MEEL_UPDATED,
            actor=request.user,
            object_type="meel",
            object_id=str(meel.id),
            category="finance",
            ip_address=cls._ip(request),
            metadata={"changed_fields": changed_fields},
        )

    @classmethod
    def log_meel_deleted(cls, request, meel_id: int) -> None:
        log_event(
            action=AuditEvents.MEEL_DELETED,
            actor=request.user,
            object_type="meel",
            object_id=str(meel_id),
            level="warning",
            category="finance",
            ip_address=cls._ip(request),
        )
