from __future__ import annotations

from typing import Optional

from apps.audit import AuditEvents, log_event


class PaymentsAuditService:
    @staticmethod
    def _ip(request) -> Optional[str]:
        xff = request.META.get("HTTP_X_FORWARDED_FOR")
        if xff:
            return xff.split(",")[0].strip()
        return request.META.get("REMOTE_ADDR")

    @classmethod
    def _log(cls, request, action: str, payment_id: int, level: str = "info", metadata: Optional[dict] = None) -> None:
        log_event(
            action=action,
            actor=request.user,
            object_type="payment",
            object_id=str(payment_id),
            level=level,
            category="finance",
            ip_address=cls._ip(request),
            metadata=metadata or {},
        )

    @classmethod
    def log_worker_payment_created(cls, request, payment) -> None:
        cls._log(
            request,
            AuditEvents.WORKER_PAYMENT_CREATED,
            payment.id,
            metadata={"worker_id": payment.worker_id, "amount": str(payment.amount)},
        )

    @classmethod
    def log_worker_payment_updated(cls, request, payment, changed_fields: list[str]) -> None:
        cls._log(
            request,
            AuditEvents.WORKER_PAYMENT_UPDATED,
            payment.id,
            metadata={"worker_id": payment.worker_id, "changed_fields": changed_fields},
        )

    @classmethod
    def log_worker_payment_deleted(cls, request, payment_id: int, worker_id: int) -> None:
        cls._log(
            request,
            AuditEvents.WORKER_PAYMENT_DELETED,
            payment_id,
            level="warning",
            metadata={"worker_id": worker_id},
        )

    @classmethod
    def log_cultivation_payment_created(cls, request, payment) -> None:
        cls._log(
            request,
            AuditEvents.CULTIVATION_PAYMENT_CREATED,
            payment.id,
            metadata={"cultivation_id": payment.cultivation_id, "amount": str(payment.amount)},
        )

    @classmethod
    def log_cultivation_payment_updated(cls, request, payment, changed_fields: list[str]) -> None:
        cls._log(
            request,
            AuditEvents.CULTIVATION_PAYMENT_UPDATED,
            payment.id,
            metadata={"cultivation_id": payment.cultivation_id, "changed_fields": changed_fields},
        )

    @classmethod
    def log_cultivation_payment_deleted(cls, request, payment_id: int, cultivation_id: int) -> None:
        cls._log(
            request,
            AuditEvents.CULTIVATION_PAYMENT_DELETED,
            payment_id,
            level="warning",
            metadata={"cultivation_id": cultivation_id},
        )
