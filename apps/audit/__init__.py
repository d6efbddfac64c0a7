"""Unified audit facade package."""

from .services import log_event
from .events import AuditEvents

__all__ = ["log_event", "AuditEvents"]
