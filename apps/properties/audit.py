from __future__ import annotations

from typing import Optional

from apps.audit import AuditEvents, log_event


class PropertiesAuditService:
    @staticmethod
    def _ip(request) -> Optional[str]:
        xff = request.META.get("HTTP_X_FORWARDED_FOR")
        if xff:
            return xff.split(",")[0].strip()
        return request.META.get("REMOTE_ADDR")

    @classmethod
    def log_property_created(cls, request, prop) -> None:
        log_event(
            action=AuditEvents.PROPERTY_CREATED,
            actor=request.user,
            object_type="property",
            object_id=str(prop.id),
            category="finance",
            ip_address=cls._ip(request),
            metadata={"property_type": prop.property_type, "total_cost": str(prop.total_cost)},
        )

    @classmethod
    def log_property_updated(cls, request, prop, changed_fields: list[str]) -> None:
        log_event(
            action=AuditEvents.PROPERTY_UPDATED,
            actor=request.user,
            object_type="property",
            object_id=str(prop.id),
            category="finance",
            ip_address=cls._ip(request),
            metadata={"changed_fields": changed_fields},
        )

    @classmethod
    def log_property_deleted(cls, request, property_id: int) -> None:
        log_event(
            action=AuditEvents.PROPERTY_DELETED,
            actor=request.user,
            object_type="property",
            object_id=str(property_id),
            level="warning",
            category="finance",
            ip_address=cls._ip(request),
        )
