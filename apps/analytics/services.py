"""
Rollups behind the analytics endpoints.

Every function here is a pure fold over already-fetched rows; the loader at
the bottom is the only part that touches the database.
"""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional

from apps.agriculture.models import Cultivation
from apps.attendance.models import Attendance
from apps.attendance.services import attendance_rate
from apps.payments.models import Payment
from apps.properties.models import Property
from apps.workers.models import Worker


ZERO = Decimal("0.00")


@dataclass(frozen=True)
class DateRange:
    start: Optional[date] = None
    end: Optional[date] = None

    @property
    def is_bounded(self) -> bool:
        return bool(self.start and self.end)

    def apply(self, queryset, field: str):
        if not self.is_bounded:
            return queryset
        return queryset.filter(**{f"{field}__range": (self.start, self.end)})

    def days(self) -> list[date]:
        if not self.is_bounded:
            return []
        span = (self.end - self.start).days
        return [self.start + timedelta(days=offset) for offset in range(span + 1)]


def _sum(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)


def _income(cultivations, properties) -> Decimal:
    return _sum(c.amount_received for c in cultivations) + _sum(
        p.amount_paid for p in properties if p.property_type == Property.Type.SELL
    )


def category_totals(*, payments, cultivations, properties, attendance) -> dict:
    worker_payments = [p for p in payments if p.kind == Payment.Kind.WORKER]
    buys = [p for p in properties if p.property_type == Property.Type.BUY]
    sells = [p for p in properties if p.property_type == Property.Type.SELL]

    return {
        "workers": {
            "total_payments": len(worker_payments),
            "total_amount": _sum(p.amount for p in worker_payments),
            "total_workers": len({a.worker_id for a in attendance}),
            "total_working_days": sum(1 for a in attendance if a.status == Attendance.Status.PRESENT),
            "total_absent_days": sum(1 for a in attendance if a.status == Attendance.Status.ABSENT),
            "total_half_days": sum(1 for a in attendance if a.status == Attendance.Status.HALF_DAY),
            "total_leave_days": sum(1 for a in attendance if a.status == Attendance.Status.LEAVE),
        },
        "agriculture": {
            "total_cultivations": len(cultivations),
            "total_cost": _sum(c.total_cost for c in cultivations),
            "total_received": _sum(c.amount_received for c in cultivations),
            "pending_amount": _sum(c.amount_pending for c in cultivations),
            "profit": _sum(c.amount_received - c.total_cost for c in cultivations),
        },
        "real_estate": {
            "total_properties": len(properties),
            "total_investment": _sum(p.total_cost for p in buys),
            "total_revenue": _sum(p.amount_paid for p in sells),
            "pending_amount": _sum(p.amount_pending for p in properties),
            "profit": _sum(p.amount_paid - p.total_cost for p in sells),
        },
    }


def time_series(*, days: list[date], payments, cultivations, properties, attendance) -> list[dict]:
    buckets = {
        day: {"payments": [], "cultivations": [], "properties": [], "attendance": []}
        for day in days
    }
    for key, rows, field in (
        ("payments", payments, "date"),
        ("cultivations", cultivations, "cultivation_date"),
        ("properties", properties, "transaction_date"),
        ("attendance", attendance, "date"),
    ):
        for row in rows:
            bucket = buckets.get(getattr(row, field))
            if bucket is not None:
                bucket[key].append(row)

    series = []
    for day in days:
        bucket = buckets[day]
        series.append(
            {
                "date": day,
                "expenses": _sum(p.amount for p in bucket["payments"]),
                "income": _income(bucket["cultivations"], bucket["properties"]),
                "present_workers": sum(1 for a in bucket["attendance"] if a.status == Attendance.Status.PRESENT),
                "absent_workers": sum(1 for a in bucket["attendance"] if a.status == Attendance.Status.ABSENT),
            }
        )
    return series


def dashboard(*, payments, cultivations, properties, attendance, period: DateRange, category: str = "all") -> dict:
    totals = category_totals(
        payments=payments,
        cultivations=cultivations,
        properties=properties,
        attendance=attendance,
    )
    total_expenses = _sum(p.amount for p in payments)
    total_income = _income(cultivations, properties)

    return {
        "summary": {
            "total_expenses": total_expenses,
            "total_income": total_income,
            "net_profit": total_income - total_expenses,
            "total_pending": totals["agriculture"]["pending_amount"] + totals["real_estate"]["pending_amount"],
            "total_workers": totals["workers"]["total_workers"],
            "total_working_days": totals["workers"]["total_working_days"],
            "total_absent_days": totals["workers"]["total_absent_days"],
        },
        "payment_modes": {
            mode: sum(1 for p in payments if p.payment_mode == mode)
            for mode in Payment.Mode.values
        },
        "category_totals": totals,
        "time_series": time_series(
            days=period.days(),
            payments=payments,
            cultivations=cultivations,
            properties=properties,
            attendance=attendance,
        ),
        "filters": {
            "start_date": period.start,
            "end_date": period.end,
            "category": category,
        },
    }


def worker_rollup(*, workers, payments, attendance) -> list[dict]:
    paid: dict[int, Decimal] = defaultdict(lambda: ZERO)
    payment_counts: dict[int, int] = defaultdict(int)
    for payment in payments:
        if payment.kind == Payment.Kind.WORKER:
            paid[payment.worker_id] += payment.amount
            payment_counts[payment.worker_id] += 1

    statuses: dict[int, dict[str, int]] = defaultdict(lambda: dict.fromkeys(Attendance.Status.values, 0))
    for record in attendance:
        statuses[record.worker_id][record.status] += 1

    rows = []
    for worker in workers:
        counts = statuses[worker.id]
        total_days = sum(counts.values())
        rows.append(
            {
                "worker_id": worker.id,
                "name": worker.name,
                "is_active": worker.is_active,
                "salary": worker.salary,
                "total_paid": paid[worker.id],
                "payment_count": payment_counts[worker.id],
                "total_days": total_days,
                "present": counts[Attendance.Status.PRESENT],
                "absent": counts[Attendance.Status.ABSENT],
                "half_day": counts[Attendance.Status.HALF_DAY],
                "leave": counts[Attendance.Status.LEAVE],
                "attendance_rate": attendance_rate(
                    present=counts[Attendance.Status.PRESENT],
                    half_day=counts[Attendance.Status.HALF_DAY],
                    total=total_days,
                ),
            }
        )
    return rows


def crop_rollup(cultivations) -> dict:
    crops: dict[str, dict] = {}
    for cultivation in cultivations:
        crop = crops.setdefault(
            cultivation.crop_name,
            {"total_area": ZERO, "total_cost": ZERO, "total_received": ZERO, "total_pending": ZERO, "count": 0},
        )
        crop["total_area"] += cultivation.area
        crop["total_cost"] += cultivation.total_cost
        crop["total_received"] += cultivation.amount_received
        crop["total_pending"] += cultivation.amount_pending
        crop["count"] += 1

    for crop in crops.values():
        crop["profit"] = crop["total_received"] - crop["total_cost"]
        crop["profit_margin"] = (
            round(float(crop["profit"] / crop["total_cost"] * 100), 2) if crop["total_cost"] > 0 else 0.0
        )
    return crops


def partner_rollup(properties) -> dict:
    partners: dict[str, dict] = {}
    for prop in properties:
        partner = partners.setdefault(
            prop.partner_name,
            {
                "total_transactions": 0,
                "buy_transactions": 0,
                "sell_transactions": 0,
                "total_investment": ZERO,
                "total_revenue": ZERO,
                "total_pending": ZERO,
            },
        )
        partner["total_transactions"] += 1
        partner["total_pending"] += prop.amount_pending
        if prop.property_type == Property.Type.BUY:
            partner["buy_transactions"] += 1
            partner["total_investment"] += prop.total_cost
        else:
            partner["sell_transactions"] += 1
            partner["total_revenue"] += prop.amount_paid

    for partner in partners.values():
        partner["profit"] = partner["total_revenue"] - partner["total_investment"]
    return partners


class AnalyticsService:
    """Fetches the rows the rollups fold over, re-read on every call."""

    @staticmethod
    def payments(period: DateRange) -> list[Payment]:
        return list(period.apply(Payment.objects.all(), "date"))

    @staticmethod
    def cultivations(period: DateRange) -> list[Cultivation]:
        return list(period.apply(Cultivation.objects.order_by("crop_name", "id"), "cultivation_date"))

    @staticmethod
    def properties(period: DateRange) -> list[Property]:
        return list(period.apply(Property.objects.order_by("partner_name", "id"), "transaction_date"))

    @staticmethod
    def attendance(period: DateRange) -> list[Attendance]:
        return list(period.apply(Attendance.objects.all(), "date"))

    @staticmethod
    def workers() -> list[Worker]:
        return list(Worker.objects.order_by("name", "id"))
