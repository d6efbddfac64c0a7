from __future__ import annotations

import math
from decimal import Decimal

from django.db import transaction
from django.db.models import Count, Q, Sum
from django.db.models.functions import Coalesce

from .models import Meel, MeelPartner


ZERO = Decimal("0.00")


class MeelService:
    @staticmethod
    def owned_by(user):
        return Meel.objects.filter(created_by=user).select_related("created_by").prefetch_related("partners")

    @staticmethod
    def _replace_partners(meel: Meel, partners: list[dict]) -> None:
        meel.partners.all().delete()
        MeelPartner.objects.bulk_create([MeelPartner(meel=meel, **partner) for partner in partners])

    @classmethod
    @transaction.atomic
    def create(cls, *, user, partners: list[dict] | None = None, **values) -> Meel:
        meel = Meel.objects.create(created_by=user, **values)
        cls._replace_partners(meel, partners or [])
        return meel

    @classmethod
    @transaction.atomic
    def update(cls, *, meel: Meel, **values) -> list[str]:
        """
        Partial update. Partners are replaced only when given, and always
        dropped when the record is Individual.
        """
        partners = values.pop("partners", None)
        changed = [name for name, value in values.items() if getattr(meel, name) != value]
        for name in changed:
            setattr(meel, name, values[name])
        if changed:
            meel.save(update_fields=[*changed, "updated_at"])

        if partners is not None and (partners or meel.partners.exists()):
            cls._replace_partners(meel, partners)
            changed.append("partners")
        return changed

    @staticmethod
    def paginate(queryset, *, page: int, limit: int) -> tuple[list[Meel], dict]:
        total = queryset.count()
        offset = (page - 1) * limit
        records = list(queryset[offset:offset + limit])
        return records, {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": math.ceil(total / limit),
        }

    @staticmethod
    def stats(queryset) -> dict:
        buy = Q(transaction_type=Meel.TransactionType.BUY)
        sell = Q(transaction_type=Meel.TransactionType.SELL)
        totals = queryset.aggregate(
            total_meel_records=Count("id"),
            buy_records=Count("id", filter=buy),
            sell_records=Count("id", filter=sell),
            individual_records=Count("id", filter=Q(transaction_mode=Meel.TransactionMode.INDIVIDUAL)),
            partner_records=Count("id", filter=Q(transaction_mode=Meel.TransactionMode.WITH_PARTNER)),
            total_buy_cost=Coalesce(Sum("total_cost", filter=buy), ZERO),
            total_sell_revenue=Coalesce(Sum("total_cost", filter=sell), ZERO),
        )
        top_tags = (
            queryset.order_by()
            .values("tag")
            .annotate(count=Count("id"))
            .order_by("-count", "tag")[:5]
        )

        return {
            "overview": {
                "total_meel_records": totals["total_meel_records"],
                "buy_records": totals["buy_records"],
                "sell_records": totals["sell_records"],
                "individual_records": totals["individual_records"],
                "partner_records": totals["partner_records"],
            },
            "financials": {
                "total_buy_cost": totals["total_buy_cost"],
                "total_sell_revenue": totals["total_sell_revenue"],
                "net_profit": totals["total_sell_revenue"] - totals["total_buy_cost"],
            },
            "top_tags": [{"tag": row["tag"], "count": row["count"]} for row in top_tags],
        }
