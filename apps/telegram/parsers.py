"""
Answer parsers for the chat intake steps.

Each parser takes the raw message text and returns the stored value or raises
InvalidAnswer, in which case the step is asked again.
"""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from django.utils import timezone

from apps.attendance.models import Attendance
from apps.attendance.services import normalize_status
from apps.workers.models import Worker
from apps.workers.services import WorkerService


DATE_FORMAT = "%d/%m/%Y"
SKIP_WORD = "none"
TODAY_WORD = "today"
MONEY_DIGITS = 12
DECIMAL_PLACES = 2
CENT = Decimal("0.01")

BOT_ATTENDANCE_STATUSES = {
    Attendance.Status.PRESENT,
    Attendance.Status.ABSENT,
    Attendance.Status.HALF_DAY,
}
PAYMENT_MODES = {"cash": "cash", "upi": "UPI"}
PROPERTY_TYPES = {"buy", "sell"}


class InvalidAnswer(ValueError):
    pass


class AnswerTooLong(InvalidAnswer):
    pass


def _clean(raw) -> str:
    return (raw or "").strip()


def parse_required_text(raw) -> str:
    text = _clean(raw)
    if not text:
        raise InvalidAnswer("empty")
    return text


def parse_optional_text(raw) -> str:
    text = _clean(raw)
    if text.lower() == SKIP_WORD:
        return ""
    return text


def _parse_number(raw, max_digits: int) -> Decimal:
    """Amounts must fit a DecimalField(max_digits, decimal_places=2) column."""
    try:
        value = Decimal(_clean(raw))
    except InvalidOperation:
        raise InvalidAnswer("not a number")
    if not value.is_finite():
        raise InvalidAnswer("not a number")
    if value and value.adjusted() >= max_digits - DECIMAL_PLACES:
        raise InvalidAnswer("too large")
    rounded = value.quantize(CENT)
    if rounded != value:
        raise InvalidAnswer(f"more than {DECIMAL_PLACES} decimal places")
    return rounded


def parse_positive_number(raw, max_digits: int = MONEY_DIGITS) -> Decimal:
    value = _parse_number(raw, max_digits)
    if value <= 0:
        raise InvalidAnswer("must be greater than 0")
    return value


def parse_non_negative_number(raw, max_digits: int = MONEY_DIGITS) -> Decimal:
    value = _parse_number(raw, max_digits)
    if value < 0:
        raise InvalidAnswer("must be 0 or greater")
    return value


def parse_date(raw, today: Optional[date] = None) -> Optional[date]:
    """`today` or DD/MM/YYYY; anything else gives None."""
    text = _clean(raw)
    if text.lower() == TODAY_WORD:
        return today or timezone.localdate()
    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError:
        return None


def parse_defaulted_date(raw, today: Optional[date] = None) -> date:
    return parse_date(raw, today=today) or today or timezone.localdate()


def parse_optional_date(raw, today: Optional[date] = None) -> Optional[date]:
    if _clean(raw).lower() == SKIP_WORD:
        return None
    return parse_date(raw, today=today)


def parse_payment_mode(raw) -> str:
    mode = PAYMENT_MODES.get(_clean(raw).lower())
    if mode is None:
        raise InvalidAnswer("unknown payment mode")
    return mode


def parse_property_type(raw) -> str:
    value = _clean(raw).lower()
    if value not in PROPERTY_TYPES:
        raise InvalidAnswer("unknown property type")
    return value


def parse_attendance_status(raw) -> str:
    status = normalize_status(_clean(raw))
    if status not in BOT_ATTENDANCE_STATUSES:
        raise InvalidAnswer("unknown status")
    return status


def parse_worker(raw) -> Worker:
    """Exactly one worker must match; none or several ask again."""
    matches = WorkerService.find_by_name(_clean(raw))
    if len(matches) != 1:
        raise InvalidAnswer("worker not found")
    return matches[0]
