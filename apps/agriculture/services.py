from __future__ import annotations

from decimal import Decimal

from django.db import transaction

from apps.payments.models import Payment
from apps.payments.serializers import CultivationPaymentSerializer

from .models import Cultivation, Person
from .serializers import CultivationSerializer


ZERO = Decimal("0.00")


def filter_by_date_range(queryset, field: str, start_date=None, end_date=None):
    """Both bounds or nothing: a half-open range leaves the queryset untouched."""
    if start_date and end_date:
        return queryset.filter(**{f"{field}__range": (start_date, end_date)})
    return queryset


class PersonService:
    @staticmethod
    def totals(person: Person) -> tuple[list[dict], dict]:
        """
        Per-cultivation money view for one person.

        Received amounts come from the recorded payments, pending is clamped at
        zero and profit is received minus cost.
        """
        cultivations = person.cultivations.all().order_by("-cultivation_date", "-id")
        payments_by_cultivation: dict[int, list[Payment]] = {}
        for payment in Payment.objects.filter(
            kind=Payment.Kind.CULTIVATION,
            cultivation__person=person,
        ).order_by("-date", "-id"):
            payments_by_cultivation.setdefault(payment.cultivation_id, []).append(payment)

        rows = []
        investment = revenue = pending = ZERO
        for cultivation in cultivations:
            payments = payments_by_cultivation.get(cultivation.id, [])
            received = sum((payment.amount for payment in payments), ZERO)
            amount_pending = max(ZERO, cultivation.total_cost - received)

            row = CultivationSerializer(cultivation).data
            row["payments"] = CultivationPaymentSerializer(payments, many=True).data
            row["total_received"] = received
            row["amount_pending"] = amount_pending
            row["profit"] = received - cultivation.total_cost
            rows.append(row)

            investment += cultivation.total_cost
            revenue += received
            pending += amount_pending

        return rows, {
            "investment": investment,
            "revenue": revenue,
            "pending": pending,
            "profit": revenue - investment,
        }

    @staticmethod
    @transaction.atomic
    def delete(person: Person) -> None:
        cultivation_ids = list(person.cultivations.values_list("id", flat=True))
        Payment.objects.filter(cultivation_id__in=cultivation_ids).delete()
        Cultivation.objects.filter(id__in=cultivation_ids).delete()
        person.delete()


class CultivationService:
    @staticmethod
    def crop_summary(cultivations) -> dict:
        summary: dict[str, dict] = {}
        for cultivation in cultivations.order_by("crop_name", "id"):
            crop = summary.setdefault(
                cultivation.crop_name,
                {
                    "total_area": ZERO,
                    "total_cost": ZERO,
                    "total_received": ZERO,
                    "total_pending": ZERO,
                    "count": 0,
                },
            )
            crop["total_area"] += cultivation.area
            crop["total_cost"] += cultivation.total_cost
            crop["total_received"] += cultivation.amount_received
            crop["total_pending"] += cultivation.amount_pending
            crop["count"] += 1

        for crop in summary.values():
            crop["profit"] = crop["total_received"] - crop["total_cost"]
        return summary

    @staticmethod
    def create(**values) -> Cultivation:
        return Cultivation.objects.create(**values)
