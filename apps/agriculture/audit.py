from __future__ import annotations

from typing import Optional

from apps.audit import AuditEvents, log_event


class AgricultureAuditService:
    @staticmethod
    def _ip(request) -> Optional[str]:
        xff = request.META.get("HTTP_X_FORWARDED_FOR")
        if xff:
            return xff.split(",")[0].strip()
        return request.META.get("REMOTE_ADDR")

    @classmethod
    def log_person_created(cls, request, person) -> None:
        log_event(
            action=AuditEvents.PERSON_CREATED,
            actor=request.user,
            object_type="person",
            object_id=str(person.id),
            category="finance",
            ip_address=cls._ip(request),
            metadata={"name": person.name},
        )

    @classmethod
    def log_person_updated(cls, request, person, changed_fields: list[str]) -> None:
        log_event(
            action=AuditEvents.PERSON_UPDATED,
            actor=request.user,
            object_type="person",
            object_id=str(person.id),
            category="finance",
            ip_address=cls._ip(request),
            metadata={"changed_fields": changed_fields},
        )

    @classmethod
    def log_person_deleted(cls, request, person_id: int, name: str) -> None:
        log_event(
            action=AuditEvents.PERSON_DELETED,
            actor=request.user,
            object_type="person",
            object_id=str(person_id),
            level="warning",
            category="finance",
            ip_address=cls._ip(request),
            metadata={"name": name},
        )

    @classmethod
    def log_cultivation_created(cls, request, cultivation) -> None:
        log_event(
            action=AuditEvents.CULTIVATION_CREATED,
            actor=request.user,
            object_type="cultivation",
            object_id=str(cultivation.id),
            category="finance",
            ip_address=cls._ip(request),
            metadata={
                "person_id": cultivation.person_id,
                "crop_name": cultivation.crop_name,
                "total_cost": str(cultivation.total_cost),
            },
        )

    @classmethod
    def log_cultivation_updated(cls, request, cultivation, changed_fields: list[str]) -> None:
        log_event(
            action=AuditEvents.CULTIVATION_UPDATED,
            actor=request.user,
            object_type="cultivation",
            object_id=str(cultivation.id),
            category="finance",
            ip_address=cls._ip(request),
            metadata={"changed_fields": changed_fields},
        )

    @classmethod
    def log_cultivation_deleted(cls, request, cultivation_id: int, crop_name: str) -> None:
        log_event(
            action=AuditEvents.CULTIVATION_DELETED,
            actor=request.user,
            object_type="cultivation",
            object_id=str(cultivation_id),
            level="warning",
            category="finance",
            ip_address=cls._ip(request),
            metadata={"crop_name": crop_name},
        )
