from __future__ import annotations

from decimal import Decimal

from django.db import transaction
from django.db.models import Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from apps.agriculture.models import Cultivation

from .models import Payment


ZERO = Decimal("0.00")


class PaymentService:
    @staticmethod
    def recompute_cultivation(*, cultivation_id: int) -> Cultivation | None:
        """
        amount_received becomes the sum of the cultivation's payments;
        Cultivation.save() derives the pending amount from it.
        """
        cultivation = Cultivation.objects.select_for_update().filter(id=cultivation_id).first()
        if not cultivation:
            return None
        cultivation.amount_received = Payment.objects.filter(
            kind=Payment.Kind.CULTIVATION,
            cultivation_id=cultivation_id,
        ).aggregate(total=Coalesce(Sum("amount"), ZERO))["total"]
        cultivation.save(update_fields=["amount_received", "updated_at"])
        return cultivation

    @classmethod
    @transaction.atomic
    def create_cultivation_payment(cls, *, cultivation: Cultivation, amount, paid_to: str, payment_mode: str, date=None) -> Payment:
        payment = Payment.objects.create(
            kind=Payment.Kind.CULTIVATION,
            cultivation=cultivation,
            amount=amount,
            paid_to=paid_to,
            payment_mode=payment_mode,
            date=date or timezone.localdate(),
        )
        cls.recompute_cultivation(cultivation_id=cultivation.id)
        return payment

    @classmethod
    @transaction.atomic
    def update_cultivation_payment(cls, *, payment: Payment, **values) -> list[str]:
        if not values.get("date"):
            values["date"] = timezone.localdate()
        changed = cls._apply(payment, values)
        cls.recompute_cultivation(cultivation_id=payment.cultivation_id)
        return changed

    @classmethod
    @transaction.atomic
    def delete_cultivation_payment(cls, *, payment: Payment) -> None:
        cultivation_id = payment.cultivation_id
        payment.delete()
        cls.recompute_cultivation(cultivation_id=cultivation_id)

    @staticmethod
    def create_worker_payment(*, worker, amount, date, payment_mode: str, description: str = "") -> Payment:
        return Payment.objects.create(
            kind=Payment.Kind.WORKER,
            worker=worker,
            amount=amount,
            date=date,
            payment_mode=payment_mode,
            description=description,
        )

    @classmethod
    def update_worker_payment(cls, *, payment: Payment, **values) -> list[str]:
        return cls._apply(payment, values)

    @staticmethod
    def _apply(payment: Payment, values: dict) -> list[str]:
        changed = [name for name, value in values.items() if getattr(payment, name) != value]
        for name in changed:
            setattr(payment, name, values[name])
        if changed:
            payment.save(update_fields=[*changed, "updated_at"])
        return changed
