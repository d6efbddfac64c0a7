"""
Step table for the chat intake dialogues.

Every Step names the data key it fills, the prompt that asks for it, the
error prompt sent when the answer does not parse, the parser and the step that
follows. A step without a successor is terminal: its answer completes the
flow and the flow's commit function runs.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Any, Callable, Optional

from django.utils import timezone

from apps.agriculture.models import Cultivation
from apps.agriculture.services import CultivationService
from apps.attendance.models import Attendance
from apps.attendance.services import AttendanceService
from apps.properties.models import Property
from apps.properties.services import PropertyService
from apps.workers.models import Worker
from apps.workers.services import WorkerService

from . import parsers
from .audit import TelegramAuditService


BOT_NOTE = "Added via Telegram Bot"
HISTORY_LIMIT = 20
STATUS_EMOJI = {
    Attendance.Status.PRESENT: "✅",
    Attendance.Status.ABSENT: "❌",
    Attendance.Status.HALF_DAY: "⏰",
    Attendance.Status.LEAVE: "🏖",
}


class Flow(Enum):
    WORKER = "worker"
    CROP = "crop"
    PROPERTY = "property"
    ATTENDANCE = "attendance"
    ATTENDANCE_HISTORY = "attendance_history"


class Step(Enum):
    WORKER_NAME = "worker_name"
    WORKER_PHONE = "worker_phone"
    WORKER_SALARY = "worker_salary"
    WORKER_ADDRESS = "worker_address"
    WORKER_JOINING_DATE = "worker_joining_date"
    WORKER_NOTES = "worker_notes"

    CROP_NAME = "crop_name"
    CROP_AREA = "crop_area"
    CROP_RATE = "crop_rate"
    CROP_PAYMENT_MODE = "crop_payment_mode"
    CROP_BUYER = "crop_buyer"
    CROP_AMOUNT_RECEIVED = "crop_amount_received"
    CROP_HARVEST_DATE = "crop_harvest_date"
    CROP_NOTES = "crop_notes"

    PROPERTY_TYPE = "property_type"
    PROPERTY_VALUE = "property_value"

    ATTENDANCE_WORKER = "attendance_worker"
    ATTENDANCE_DATE = "attendance_date"
    ATTENDANCE_STATUS = "attendance_status"
    ATTENDANCE_NOTES = "attendance_notes"

    VIEW_ATTENDANCE_WORKER = "view_attendance_worker"


@dataclass(frozen=True)
class StepSpec:
    flow: Flow
    key: str
    prompt: str
    error: str
    parse: Callable[[str], Any]
    next: Optional[Step] = None
    max_length: Optional[int] = None

    def render_prompt(self, data: dict) -> str:
        return self.prompt.format_map(data)

    def read(self, text: str) -> Any:
        value = self.parse(text)
        if self.max_length is not None and len(value) > self.max_length:
            raise parsers.AnswerTooLong(self.max_length)
        return value

    def error_for(self, exc: parsers.InvalidAnswer) -> str:
        if isinstance(exc, parsers.AnswerTooLong):
            return TOO_LONG_TEXT.format(max_length=self.max_length)
        return self.error


@dataclass(frozen=True)
class FlowSpec:
    first: Step
    intro: str
    commit: Callable[[dict, Any, int], str]
    failure: str


TRY_AGAIN_TEXT = "❌ Please enter a valid value. Try again:"
TOO_LONG_TEXT = "❌ Please use at most {max_length} characters. Try again:"
WORKER_NOT_FOUND = "❌ Worker not found. Please enter a valid worker name:"


def _max_length(model, field: str) -> int:
    return model._meta.get_field(field).max_length


def _amount(parse, model, field: str):
    return partial(parse, max_digits=model._meta.get_field(field).max_digits)


STEPS: dict[Step, StepSpec] = {
    # Worker
    Step.WORKER_NAME: StepSpec(
        flow=Flow.WORKER,
        key="name",
        prompt="👤 Enter worker name (required):",
        error=TRY_AGAIN_TEXT,
        parse=parsers.parse_required_text,
        max_length=_max_length(Worker, "name"),
        next=Step.WORKER_PHONE,
    ),
    Step.WORKER_PHONE: StepSpec(
        flow=Flow.WORKER,
        key="phone",
        prompt="📱 Enter worker phone number (required):",
        error=TRY_AGAIN_TEXT,
        parse=parsers.parse_required_text,
        max_length=_max_length(Worker, "phone"),
        next=Step.WORKER_SALARY,
    ),
    Step.WORKER_SALARY: StepSpec(
        flow=Flow.WORKER,
        key="salary",
        prompt="💰 Enter monthly salary in rupees (required):",
        error="❌ Please enter a valid salary amount (greater than 0). Try again:",
        parse=_amount(parsers.parse_positive_number, Worker, "salary"),
        next=Step.WORKER_ADDRESS,
    ),
    Step.WORKER_ADDRESS: StepSpec(
        flow=Flow.WORKER,
        key="address",
        prompt='🏠 Enter worker address (optional - type "none" to skip):',
        error=TRY_AGAIN_TEXT,
        parse=parsers.parse_optional_text,
        max_length=_max_length(Worker, "address"),
        next=Step.WORKER_JOINING_DATE,
    ),
    Step.WORKER_JOINING_DATE: StepSpec(
        flow=Flow.WORKER,
        key="joining_date",
        prompt='📅 Enter joining date (optional - type "today" for current date, or enter date like "15/12/2024"):',
        error=TRY_AGAIN_TEXT,
        parse=parsers.parse_defaulted_date,
        next=Step.WORKER_NOTES,
    ),
    Step.WORKER_NOTES: StepSpec(
        flow=Flow.WORKER,
        key="notes",
        prompt='📝 Enter additional notes (optional - type "none" to skip):',
        error=TRY_AGAIN_TEXT,
        parse=parsers.parse_optional_text,
    ),
    # Cultivation
    Step.CROP_NAME: StepSpec(
        flow=Flow.CROP,
        key="crop_name",
        prompt="🌾 Enter crop name (required):",
        error=TRY_AGAIN_TEXT,
        parse=parsers.parse_required_text,
        max_length=_max_length(Cultivation, "crop_name"),
        next=Step.CROP_AREA,
    ),
    Step.CROP_AREA: StepSpec(
        flow=Flow.CROP,
        key="area",
        prompt="📏 Enter crop area in Bigha (required):",
        error="❌ Please enter a valid area (greater than 0). Try again:",
        parse=_amount(parsers.parse_positive_number, Cultivation, "area"),
        next=Step.CROP_RATE,
    ),
    Step.CROP_RATE: StepSpec(
        flow=Flow.CROP,
        key="rate_per_bigha",
        prompt="💰 Enter rate per Bigha in rupees (required):",
        error="❌ Please enter a valid rate (greater than 0). Try again:",
        parse=_amount(parsers.parse_positive_number, Cultivation, "rate_per_bigha"),
        next=Step.CROP_PAYMENT_MODE,
    ),
    Step.CROP_PAYMENT_MODE: StepSpec(
        flow=Flow.CROP,
        key="payment_mode",
        prompt='💳 Enter payment mode (required: type "cash" or "UPI"):',
        error='❌ Please enter either "cash" or "UPI". Try again:',
        parse=parsers.parse_payment_mode,
        next=Step.CROP_BUYER,
    ),
    Step.CROP_BUYER: StepSpec(
        flow=Flow.CROP,
        key="buyer_name",
        prompt='👤 Enter buyer name (optional - type "none" to skip):',
        error=TRY_AGAIN_TEXT,
        parse=parsers.parse_optional_text,
        max_length=_max_length(Cultivation, "buyer_name"),
        next=Step.CROP_AMOUNT_RECEIVED,
    ),
    Step.CROP_AMOUNT_RECEIVED: StepSpec(
        flow=Flow.CROP,
        key="amount_received",
        prompt='💰 Enter amount received (optional - type "0" if none):',
        error="❌ Please enter a valid amount (0 or greater). Try again:",
        parse=_amount(parsers.parse_non_negative_number, Cultivation, "amount_received"),
        next=Step.CROP_HARVEST_DATE,
    ),
    Step.CROP_HARVEST_DATE: StepSpec(
        flow=Flow.CROP,
        key="harvest_date",
        prompt='📅 Enter harvest date (optional - type "none" to skip, or enter date like "15/12/2024"):',
        error=TRY_AGAIN_TEXT,
        parse=parsers.parse_optional_date,
        next=Step.CROP_NOTES,
    ),
    Step.CROP_NOTES: StepSpec(
        flow=Flow.CROP,
        key="notes",
        prompt='📝 Enter additional notes (optional - type "none" to skip):',
        error=TRY_AGAIN_TEXT,
        parse=parsers.parse_optional_text,
    ),
    # Property
    Step.PROPERTY_TYPE: StepSpec(
        flow=Flow.PROPERTY,
        key="property_type",
        prompt="🏠 Enter property type (buy/sell):",
        error='❌ Please enter either "buy" or "sell". Try again:',
        parse=parsers.parse_property_type,
        next=Step.PROPERTY_VALUE,
    ),
    Step.PROPERTY_VALUE: StepSpec(
        flow=Flow.PROPERTY,
        key="value",
        prompt="💰 Enter property total cost:",
        error="❌ Please enter a valid amount (greater than 0). Try again:",
        parse=_amount(parsers.parse_positive_number, Property, "total_cost"),
    ),
    # Attendance
    Step.ATTENDANCE_WORKER: StepSpec(
        flow=Flow.ATTENDANCE,
        key="worker",
        prompt="👤 Enter worker name (required):",
        error=WORKER_NOT_FOUND,
        parse=parsers.parse_worker,
        next=Step.ATTENDANCE_DATE,
    ),
    Step.ATTENDANCE_DATE: StepSpec(
        flow=Flow.ATTENDANCE,
        key="date",
        prompt='📅 Enter date for {worker.name} (type "today" for current date, or enter date like "15/12/2024"):',
        error=TRY_AGAIN_TEXT,
        parse=parsers.parse_defaulted_date,
        next=Step.ATTENDANCE_STATUS,
    ),
    Step.ATTENDANCE_STATUS: StepSpec(
        flow=Flow.ATTENDANCE,
        key="status",
        prompt='📊 Enter attendance status (required: type "Present", "Absent", or "HalfDay"):',
        error='❌ Please enter either "Present", "Absent", or "HalfDay". Try again:',
        parse=parsers.parse_attendance_status,
        next=Step.ATTENDANCE_NOTES,
    ),
    Step.ATTENDANCE_NOTES: StepSpec(
        flow=Flow.ATTENDANCE,
        key="notes",
        prompt='📝 Enter notes (optional - type "none" to skip):',
        error=TRY_AGAIN_TEXT,
        parse=parsers.parse_optional_text,
        max_length=_max_length(Attendance, "notes"),
    ),
    # Attendance history
    Step.VIEW_ATTENDANCE_WORKER: StepSpec(
        flow=Flow.ATTENDANCE_HISTORY,
        key="worker",
        prompt="👤 Enter worker name to view attendance history:",
        error=WORKER_NOT_FOUND,
        parse=parsers.parse_worker,
    ),
}


def _money(value) -> str:
    return f"₹{value}"


def _day(value) -> str:
    return value.strftime("%d/%m/%Y") if value else "Not specified"


def commit_worker(data: dict, user, chat_id: int) -> str:
    worker = WorkerService.create(
        name=data["name"],
        phone=data["phone"],
        salary=data["salary"],
        address=data["address"],
        joining_date=data["joining_date"],
        notes=data["notes"],
    )
    TelegramAuditService.log_record_created(user, chat_id, "worker", worker.id)
    return "\n".join(
        [
            "✅ Worker Added Successfully!",
            "",
            f"👤 Name: {worker.name}",
            f"📱 Phone: {worker.phone}",
            f"💰 Salary: {_money(worker.salary)}/month",
            f"🏠 Address: {worker.address or 'Not specified'}",
            f"📅 Joining Date: {_day(worker.joining_date)}",
            f"📝 Notes: {worker.notes or 'None'}",
            f"🆔 ID: {worker.id}",
        ]
    )


def commit_crop(data: dict, user, chat_id: int) -> str:
    cultivation = CultivationService.create(
        crop_name=data["crop_name"],
        area=data["area"],
        rate_per_bigha=data["rate_per_bigha"],
        payment_mode=data["payment_mode"],
        buyer_name=data["buyer_name"],
        amount_received=data["amount_received"],
        harvest_date=data["harvest_date"],
        notes=data["notes"],
        cultivation_date=timezone.localdate(),
    )
    TelegramAuditService.log_record_created(user, chat_id, "cultivation", cultivation.id)
    return "\n".join(
        [
            "✅ Crop Added Successfully!",
            "",
            f"🌾 Crop: {cultivation.crop_name}",
            f"📏 Area: {cultivation.area} Bigha",
            f"💰 Rate per Bigha: {_money(cultivation.rate_per_bigha)}",
            f"💰 Total Cost: {_money(cultivation.total_cost)}",
            f"💳 Payment Mode: {cultivation.payment_mode.upper()}",
            f"👤 Buyer: {cultivation.buyer_name or 'Not specified'}",
            f"💰 Amount Received: {_money(cultivation.amount_received)}",
            f"💰 Amount Pending: {_money(cultivation.amount_pending)}",
            f"📅 Harvest Date: {_day(cultivation.harvest_date)}",
            f"📝 Notes: {cultivation.notes or 'None'}",
            f"🆔 ID: {cultivation.id}",
        ]
    )


def commit_property(data: dict, user, chat_id: int) -> str:
    value = data["value"]
    prop = PropertyService.create(
        property_type=data["property_type"],
        area=1,
        area_unit=Property.AreaUnit.BIGHA,
        partner_name=BOT_NOTE,
        rate_per_unit=value,
        total_cost=value,
        amount_paid=0,
        transaction_date=timezone.localdate(),
        notes=BOT_NOTE,
    )
    TelegramAuditService.log_record_created(user, chat_id, "property", prop.id)
    return "\n".join(
        [
            "✅ Property Added Successfully!",
            "",
            f"🏠 Type: {prop.property_type}",
            f"💰 Total Cost: {_money(prop.total_cost)}",
            f"📍 Partner: {prop.partner_name}",
            f"🆔 ID: {prop.id}",
        ]
    )


def commit_attendance(data: dict, user, chat_id: int) -> str:
    worker = data["worker"]
    result = AttendanceService.upsert(
        worker=worker,
        day=data["date"],
        status=data["status"],
        notes=data["notes"],
    )
    record = result.record
    if result.created:
        TelegramAuditService.log_record_created(user, chat_id, "attendance", record.id)
    elif result.changed_fields:
        TelegramAuditService.log_record_updated(user, chat_id, "attendance", record.id, result.changed_fields)
    headline = "✅ Attendance Added Successfully!" if result.created else "✅ Attendance Updated Successfully!"
    return "\n".join(
        [
            headline,
            "",
            f"👤 Worker: {worker.name}",
            f"📅 Date: {_day(record.date)}",
            f"📊 Status: {record.get_status_display()}",
            f"📝 Notes: {record.notes or 'None'}",
            f"🆔 ID: {record.id}",
        ]
    )


def render_attendance_history(data: dict, user, chat_id: int) -> str:
    worker = data["worker"]
    records = list(worker.attendance_records.order_by("-date", "-id")[:HISTORY_LIMIT])
    if not records:
        return f"📝 No attendance records found for {worker.name}."

    lines = [f"📋 Attendance History for {worker.name}", ""]
    for index, record in enumerate(records, start=1):
        lines.append(f"{index}. {STATUS_EMOJI[record.status]} {record.get_status_display()} - {_day(record.date)}")
        if record.notes:
            lines.append(f"   📝 {record.notes}")

    summary = AttendanceService.summarize(records)
    lines += [
        "",
        "📊 Summary:",
        (
            f"✅ Present: {summary['present']} | ❌ Absent: {summary['absent']} | "
            f"⏰ Half Day: {summary['half_day']} | 🏖 Leave: {summary['leave']}"
        ),
        f"📈 Attendance Rate: {summary['attendance_rate']:.1f}%",
    ]
    return "\n".join(lines)


FLOWS: dict[Flow, FlowSpec] = {
    Flow.WORKER: FlowSpec(
        first=Step.WORKER_NAME,
        intro="\n".join(
            [
                "👤 Adding New Worker",
                "",
                "Let's collect the worker information step by step:",
                "",
                "Required Fields:",
                "• Name",
                "• Phone",
                "• Monthly Salary",
                "",
                "Optional Fields:",
                '• Address (enter "none" to skip)',
                '• Joining Date (enter "today" for current date)',
                '• Additional Notes (enter "none" to skip)',
                "",
                "Let's start with the worker name (required):",
            ]
        ),
        commit=commit_worker,
        failure="❌ Error adding worker. Please try again.",
    ),
    Flow.CROP: FlowSpec(
        first=Step.CROP_NAME,
        intro="\n".join(
            [
                "🌾 Adding New Crop",
                "",
                "Let's collect the crop information step by step:",
                "",
                "Required Fields:",
                "• Crop Name",
                "• Area in Bigha",
                "• Rate per Bigha",
                "• Payment Mode (cash or UPI)",
                "",
                "Optional Fields:",
                '• Buyer Name (enter "none" to skip)',
                '• Amount Received (enter "0" if none)',
                '• Harvest Date (enter "none" to skip)',
                '• Notes (enter "none" to skip)',
                "",
                "Let's start with the crop name (required):",
            ]
        ),
        commit=commit_crop,
        failure="❌ Error adding crop. Please try again.",
    ),
    Flow.PROPERTY: FlowSpec(
        first=Step.PROPERTY_TYPE,
        intro=STEPS[Step.PROPERTY_TYPE].prompt,
        commit=commit_property,
        failure="❌ Error adding property. Please try again.",
    ),
    Flow.ATTENDANCE: FlowSpec(
        first=Step.ATTENDANCE_WORKER,
        intro="\n".join(
            [
                "📅 Adding Attendance Record",
                "",
                "Let's collect the attendance information step by step:",
                "",
                "Required Fields:",
                "• Worker Name",
                "• Date",
                "• Status (Present, Absent, or HalfDay)",
                "",
                "Optional Fields:",
                '• Notes (type "none" to skip)',
                "",
                "Let's start with the worker name (required):",
            ]
        ),
        commit=commit_attendance,
        failure="❌ Error managing attendance. Please try again.",
    ),
    Flow.ATTENDANCE_HISTORY: FlowSpec(
        first=Step.VIEW_ATTENDANCE_WORKER,
        intro=STEPS[Step.VIEW_ATTENDANCE_WORKER].prompt,
        commit=render_attendance_history,
        failure="❌ Error fetching attendance data.",
    ),
}
