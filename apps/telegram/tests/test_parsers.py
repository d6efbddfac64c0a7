from datetime import date
from decimal import Decimal

import pytest

from apps.telegram import parsers
from apps.telegram.parsers import InvalidAnswer


TODAY = date(2024, 6, 1)


def test_optional_text_none_in_any_case_is_blank():
    assert parsers.parse_optional_text("none") == ""
    assert parsers.parse_optional_text("NONE") == ""
    assert parsers.parse_optional_text(" None ") == ""
    assert parsers.parse_optional_text("near the well") == "near the well"


def test_required_text_rejects_blank():
    with pytest.raises(InvalidAnswer):
        parsers.parse_required_text("   ")
    assert parsers.parse_required_text(" Ramesh ") == "Ramesh"


@pytest.mark.parametrize("raw", ["abc", "", "0", "-5", "NaN", "Infinity"])
def test_positive_number_rejects_non_numeric_and_non_positive(raw):
    with pytest.raises(InvalidAnswer):
        parsers.parse_positive_number(raw)


def test_positive_number_returns_decimal():
    assert parsers.parse_positive_number("5000") == Decimal("5000")
    assert parsers.parse_positive_number(" 2.5 ") == Decimal("2.5")


def test_non_negative_number_accepts_zero():
    assert parsers.parse_non_negative_number("0") == Decimal("0")
    with pytest.raises(InvalidAnswer):
        parsers.parse_non_negative_number("-1")
    with pytest.raises(InvalidAnswer):
        parsers.parse_non_negative_number("lots")


@pytest.mark.parametrize("raw", ["0.004", "1.999", "1e-3"])
def test_numbers_allow_two_decimal_places_only(raw):
    with pytest.raises(InvalidAnswer):
        parsers.parse_positive_number(raw)


def test_numbers_are_rounded_to_cents():
    assert str(parsers.parse_positive_number("1.5")) == "1.50"
    assert str(parsers.parse_positive_number("2.500")) == "2.50"


def test_numbers_must_fit_the_column():
    assert parsers.parse_positive_number("9999999999.99") == Decimal("9999999999.99")
    for raw in ("10000000000", "1e15", "1e40"):
        with pytest.raises(InvalidAnswer):
            parsers.parse_positive_number(raw)
    assert parsers.parse_positive_number("99999999.99", max_digits=10) == Decimal("99999999.99")
    with pytest.raises(InvalidAnswer):
        parsers.parse_non_negative_number("100000000", max_digits=10)


def test_today_word_gives_current_date():
    assert parsers.parse_defaulted_date("today", today=TODAY) == TODAY
    assert parsers.parse_defaulted_date("TODAY", today=TODAY) == TODAY


def test_day_month_year_parses_exactly():
    assert parsers.parse_defaulted_date("15/12/2024", today=TODAY) == date(2024, 12, 15)
    assert parsers.parse_optional_date("1/2/2024", today=TODAY) == date(2024, 2, 1)


def test_unparsable_defaulted_date_falls_back_to_today():
    assert parsers.parse_defaulted_date("next week", today=TODAY) == TODAY
    assert parsers.parse_defaulted_date("2024-12-15", today=TODAY) == TODAY
    assert parsers.parse_defaulted_date("31/02/2024", today=TODAY) == TODAY


def test_optional_date_stays_unset():
    assert parsers.parse_optional_date("none", today=TODAY) is None
    assert parsers.parse_optional_date("someday", today=TODAY) is None
    assert parsers.parse_optional_date("today", today=TODAY) == TODAY


def test_payment_mode_is_case_insensitive():
    assert parsers.parse_payment_mode("Cash") == "cash"
    assert parsers.parse_payment_mode("upi") == "UPI"
    with pytest.raises(InvalidAnswer):
        parsers.parse_payment_mode("cheque")


def test_property_type():
    assert parsers.parse_property_type("Buy") == "buy"
    assert parsers.parse_property_type("SELL") == "sell"
    with pytest.raises(InvalidAnswer):
        parsers.parse_property_type("rent")


def test_attendance_status_accepts_bot_statuses_only():
    assert parsers.parse_attendance_status("Present") == "present"
    assert parsers.parse_attendance_status("absent") == "absent"
    assert parsers.parse_attendance_status("HalfDay") == "half_day"
    with pytest.raises(InvalidAnswer):
        parsers.parse_attendance_status("leave")
    with pytest.raises(InvalidAnswer):
        parsers.parse_attendance_status("late")
