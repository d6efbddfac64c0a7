from __future__ import annotations

from decimal import Decimal

from django.db.models import F, Sum
from django.db.models.functions import Coalesce, Greatest

from .models import Worker


ZERO = Decimal("0.00")
MONTHS_PER_YEAR = 12


class WorkerService:
    @staticmethod
    def create(**values) -> Worker:
        values.setdefault("is_active", True)
        return Worker.objects.create(**values)

    @staticmethod
    def adjust_working_days(*, worker_id: int, delta: int) -> None:
        if not delta:
            return
        Worker.objects.filter(id=worker_id).update(
            total_working_days=Greatest(F("total_working_days") + delta, 0)
        )

    @staticmethod
    def payment_summary(*, worker: Worker, payments) -> dict:
        total_salary = worker.salary * MONTHS_PER_YEAR
        paid = payments.aggregate(total=Coalesce(Sum("amount"), ZERO))["total"]
        return {
            "total_salary": total_salary,
            "paid": paid,
            "pending": max(ZERO, total_salary - paid),
        }

    @staticmethod
    def find_by_name(name: str) -> list[Worker]:
        """
        Case-insensitive lookup used by the chat bot.
        An exact name match wins over substring matches.
        """
        name = (name or "").strip()
        if not name:
            return []
        exact = list(Worker.objects.filter(name__iexact=name)[:2])
        if exact:
            return exact
        return list(Worker.objects.filter(name__icontains=name)[:2])
