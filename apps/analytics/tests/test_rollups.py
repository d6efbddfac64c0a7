from datetime import date
from decimal import Decimal
from types import SimpleNamespace

from apps.analytics.services import DateRange, crop_rollup, dashboard, partner_rollup, worker_rollup


def _payment(kind, amount, day, mode="cash", worker_id=None):
    return SimpleNamespace(kind=kind, amount=Decimal(amount), date=day, payment_mode=mode, worker_id=worker_id)


def _cultivation(crop, area, cost, received, pending, day=date(2024, 1, 1)):
    return SimpleNamespace(
        crop_name=crop,
        area=Decimal(area),
        total_cost=Decimal(cost),
        amount_received=Decimal(received),
        amount_pending=Decimal(pending),
        cultivation_date=day,
    )


def _property(kind, partner, cost, paid, pending, day=date(2024, 1, 1)):
    return SimpleNamespace(
        property_type=kind,
        partner_name=partner,
        total_cost=Decimal(cost),
        amount_paid=Decimal(paid),
        amount_pending=Decimal(pending),
        transaction_date=day,
    )


def _attendance(worker_id, status, day=date(2024, 1, 1)):
    return SimpleNamespace(worker_id=worker_id, status=status, date=day)


def test_date_range_days_are_inclusive():
    period = DateRange(start=date(2024, 1, 30), end=date(2024, 2, 2))
    assert period.days() == [date(2024, 1, 30), date(2024, 1, 31), date(2024, 2, 1), date(2024, 2, 2)]
    assert DateRange(start=date(2024, 1, 1)).days() == []


def test_dashboard_summary_and_time_series():
    day_one, day_two = date(2024, 1, 1), date(2024, 1, 2)
    payments = [
        _payment("worker", "1000", day_one, "UPI", worker_id=1),
        _payment("cultivation", "500", day_two, "bank"),
    ]
    cultivations = [_cultivation("Wheat", "2", "2000", "1500", "500", day_two)]
    properties = [
        _property("sell", "Gopal", "3000", "2500", "500", day_one),
        _property("buy", "Hari", "4000", "1000", "3000", day_two),
    ]
    attendance = [
        _attendance(1, "present", day_one),
        _attendance(2, "absent", day_one),
        _attendance(1, "half_day", day_two),
    ]

    result = dashboard(
        payments=payments,
        cultivations=cultivations,
        properties=properties,
        attendance=attendance,
        period=DateRange(start=day_one, end=day_two),
    )

    summary = result["summary"]
    assert summary["total_expenses"] == Decimal("1500")
    assert summary["total_income"] == Decimal("4000")
    assert summary["net_profit"] == Decimal("2500")
    assert summary["total_pending"] == Decimal("4000")
    assert summary["total_workers"] == 2
    assert summary["total_working_days"] == 1
    assert result["payment_modes"] == {"cash": 0, "UPI": 1, "bank": 1}
    assert result["category_totals"]["real_estate"]["profit"] == Decimal("-500")
    assert result["category_totals"]["workers"]["total_amount"] == Decimal("1000")

    series = result["time_series"]
    assert [point["date"] for point in series] == [day_one, day_two]
    assert series[0]["income"] == Decimal("2500")
    assert series[0]["present_workers"] == 1
    assert series[0]["absent_workers"] == 1
    assert series[1]["expenses"] == Decimal("500")
    assert series[1]["income"] == Decimal("1500")


def test_dashboard_without_range_has_no_series():
    result = dashboard(payments=[], cultivations=[], properties=[], attendance=[], period=DateRange())
    assert result["time_series"] == []
    assert result["filters"] == {"start_date": None, "end_date": None, "category": "all"}


def test_worker_rollup_rate_counts_half_days():
    workers = [
        SimpleNamespace(id=1, name="Ramesh", is_active=True, salary=Decimal("5000")),
        SimpleNamespace(id=2, name="Suresh", is_active=False, salary=Decimal("4000")),
    ]
    payments = [_payment("worker", "700", date(2024, 1, 1), worker_id=1), _payment("cultivation", "50", date(2024, 1, 1))]
    attendance = [_attendance(1, "present"), _attendance(1, "half_day"), _attendance(1, "absent"), _attendance(1, "present")]

    rows = worker_rollup(workers=workers, payments=payments, attendance=attendance)

    assert rows[0]["total_paid"] == Decimal("700")
    assert rows[0]["payment_count"] == 1
    assert rows[0]["total_days"] == 4
    assert rows[0]["attendance_rate"] == 62.5
    assert rows[1]["total_paid"] == Decimal("0")
    assert rows[1]["attendance_rate"] == 0.0


def test_crop_rollup_profit_margin():
    crops = crop_rollup(
        [
            _cultivation("Wheat", "2", "2000", "2500", "0"),
            _cultivation("Wheat", "1", "1000", "500", "500"),
            _cultivation("Rice", "1", "0", "0", "0"),
        ]
    )
    assert crops["Wheat"]["count"] == 2
    assert crops["Wheat"]["profit"] == Decimal("0")
    assert crops["Wheat"]["profit_margin"] == 0.0
    assert crops["Rice"]["profit_margin"] == 0.0

    crops = crop_rollup([_cultivation("Mustard", "1", "800", "1000", "0")])
    assert crops["Mustard"]["profit_margin"] == 25.0


def test_partner_rollup_groups_by_partner():
    partners = partner_rollup(
        [
            _property("buy", "Gopal", "1000", "400", "600"),
            _property("sell", "Gopal", "1500", "1500", "0"),
            _property("sell", "Hari", "200", "100", "100"),
        ]
    )
    assert partners["Gopal"]["total_transactions"] == 2
    assert partners["Gopal"]["buy_transactions"] == 1
    assert partners["Gopal"]["profit"] == Decimal("500")
    assert partners["Hari"]["total_pending"] == Decimal("100")
