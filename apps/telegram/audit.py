from __future__ import annotations

from typing import Optional

from apps.audit import AuditEvents, log_event


class TelegramAuditService:
    @staticmethod
    def _ip(request) -> Optional[str]:
        xff = request.META.get("HTTP_X_FORWARDED_FOR")
        if xff:
            return xff.split(",")[0].strip()
        return request.META.get("REMOTE_ADDR")

    @classmethod
    def log_username_updated(cls, request, previous: Optional[str], current: Optional[str]) -> None:
        log_event(
            action=AuditEvents.TELEGRAM_USERNAME_UPDATED,
            actor=request.user,
            object_type="user",
            object_id=str(request.user.id),
            category="user",
            ip_address=cls._ip(request),
            metadata={"previous": previous, "current": current},
        )

    @classmethod
    def log_username_conflict(cls, request, telegram_username: str) -> None:
        log_event(
            action=AuditEvents.TELEGRAM_USERNAME_CONFLICT,
            actor=request.user,
            object_type="user",
            object_id=str(request.user.id),
            level="warning",
            category="user",
            ip_address=cls._ip(request),
            metadata={"telegram_username": telegram_username},
        )

    @staticmethod
    def log_session_authenticated(user, chat_id: int) -> None:
        log_event(
            action=AuditEvents.TELEGRAM_SESSION_AUTHENTICATED,
            actor=user,
            object_type="user",
            object_id=str(user.id),
            category="bot",
            source="bot",
            metadata={"chat_id": chat_id},
        )

    @staticmethod
    def log_record_created(user, chat_id: int, object_type: str, object_id) -> None:
        log_event(
            action=AuditEvents.TELEGRAM_RECORD_CREATED,
            actor=user,
            object_type=object_type,
            object_id=str(object_id),
            category="bot",
            source="bot",
            metadata={"chat_id": chat_id},
        )

    @staticmethod
    def log_record_updated(user, chat_id: int, object_type: str, object_id, changed_fields) -> None:
        log_event(
            action=AuditEvents.TELEGRAM_RECORD_UPDATED,
            actor=user,
            object_type=object_type,
            object_id=str(object_id),
            category="bot",
            source="bot",
            metadata={"chat_id": chat_id, "changed_fields": list(changed_fields)},
        )
