from __future__ import annotations

from typing import Protocol

from .contracts import AuditEvent


class AuditBackend(Protocol):
    def write(self, event: AuditEvent) -> None:
        ...


class AccountsAuditBackend:
    """
    Primary backend.
    Writes to accounts.AuditLog.
    """

    def write(self, event: AuditEvent) -> None:
        from accounts.models import AuditLog

        AuditLog.log(
            action=event.action,
            user=event.actor,
            object_type=event.object_type,
            object_id=event.object_id,
            level=event.level,
            category=event.category,
            ip_address=event.ip_address,
            metadata=event.payload(),
        )


class NoopAuditBackend:
    def write(self, event: AuditEvent) -> None:  # pragma: no cover
        return None
