from __future__ import annotations

import logging
from typing import Optional

from django.conf import settings

from .backends import (
    AccountsAuditBackend,
    AuditBackend,
    NoopAuditBackend,
)
from .contracts import AuditEvent


logger = logging.getLogger(__name__)


class AuditService:
    """
    Unified entrypoint for audit logging.

    Backend is picked by AUDIT_PRIMARY_BACKEND:
    - accounts (default): accounts.AuditLog table
    - anything else: no-op
    """

    def __init__(self) -> None:
        self.backend = self._build_backend(
            getattr(settings, "AUDIT_PRIMARY_BACKEND", "accounts")
        )

    def _build_backend(self, name: str) -> AuditBackend:
        if name == "accounts":
            return AccountsAuditBackend()
        return NoopAuditBackend()

    def log(self, event: AuditEvent) -> None:
        try:
            self.backend.write(event)
        except Exception:
            # Audit must not break the main request flow.
            logger.warning("Audit write failed for action=%s", event.action, exc_info=True)


def log_event(
    *,
    action: str,
    actor=None,
    object_type: str = "",
    object_id: str = "",
    level: str = "info",
    category: str = "system",
    ip_address: Optional[str] = None,
    source: str = "api",
    metadata: Optional[dict] = None,
) -> None:
    if actor is not None and not getattr(actor, "is_authenticated", False):
        actor = None
    event = AuditEvent(
        action=action,
        actor=actor,
        object_type=object_type,
        object_id=object_id,
        level=level,
        category=category,
        ip_address=ip_address,
        source=source,
        metadata=metadata or {},
    )
    AuditService().log(event)
