from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from django.core.exceptions import ObjectDoesNotExist
from django.db import DatabaseError, transaction

from accounts.models import User
from apps.agriculture.models import Cultivation
from apps.attendance.services import AttendanceService
from apps.payments.models import Payment
from apps.properties.models import Property
from apps.workers.models import Worker

from .audit import TelegramAuditService
from .intake import FLOWS, STEPS, Flow
from .parsers import InvalidAnswer
from .sessions import Session, SessionStore


logger = logging.getLogger(__name__)

# Keyboard buttons carry an emoji before the command, e.g. "📊 /summary".
COMMAND_RE = re.compile(r"^(?:\S+\s+)?/(?P<name>[A-Za-z]+)(?:@\w+)?(?:\s|$)")
LIST_LIMIT = 10

AUTH_REQUIRED = "❌ Please authenticate first using /start"
START_FIRST = "Please use /start to begin authentication."
USE_MENU = "Please use the available commands from the menu."

MENU_KEYBOARD = [
    ["📊 /summary", "👥 /workers"],
    ["➕ /addworker", "💰 /payworker"],
    ["🌾 /crops", "🌱 /addcrop"],
    ["🏠 /properties", "🏗️ /addproperty"],
    ["📅 /addattendance", "📋 /attendance"],
    ["📊 /attendancesummary"],
]


@dataclass
class Reply:
    text: str
    keyboard: Optional[list[list[str]]] = None

    def reply_markup(self) -> Optional[dict]:
        if not self.keyboard:
            return None
        return {
            "keyboard": [[{"text": label} for label in row] for row in self.keyboard],
            "resize_keyboard": True,
        }


def parse_command(text: str) -> Optional[str]:
    match = COMMAND_RE.match(text or "")
    if not match:
        return None
    return match.group("name").lower()


class PayTrackBot:
    """
    Transport-independent chat handler.

    handle_message() takes one incoming text message and returns the replies
    to send back. Slash commands always win over a pending intake step.
    """

    def __init__(self, sessions: Optional[SessionStore] = None):
        self.sessions = sessions if sessions is not None else SessionStore()
        self.commands = {
            "workers": self.list_workers,
            "addworker": self.start_flow(Flow.WORKER),
            "payworker": self.list_payable_workers,
            "crops": self.list_crops,
            "addcrop": self.start_flow(Flow.CROP),
            "properties": self.list_properties,
            "addproperty": self.start_flow(Flow.PROPERTY),
            "summary": self.summary,
            "addattendance": self.start_flow(Flow.ATTENDANCE),
            "attendance": self.start_flow(Flow.ATTENDANCE_HISTORY),
            "attendancesummary": self.attendance_summary,
        }

    def handle_message(self, chat_id: int, username: Optional[str], text: Optional[str]) -> list[Reply]:
        text = (text or "").strip()
        session = self.sessions.get(chat_id)
        command = parse_command(text)

        if command == "start":
            return self.authenticate(session, username)

        if command is not None:
            if not session.is_authenticated:
                return [Reply(AUTH_REQUIRED)]
            session.reset()
            handler = self.commands.get(command)
            if handler is None:
                return [Reply(USE_MENU)]
            return handler(session)

        if not session.is_authenticated:
            return [Reply(START_FIRST)]
        if session.is_idle:
            return [Reply(USE_MENU)]
        return self.answer(session, text)

    # ---------- authentication ----------

    def authenticate(self, session: Session, username: Optional[str]) -> list[Reply]:
        if not username:
            return [
                Reply(
                    "❌ You need a Telegram username to use this bot. "
                    "Please set a username in your Telegram settings first."
                )
            ]

        user = User.objects.filter(telegram_username__iexact=username).first()
        if user is None:
            return [
                Reply(
                    "\n".join(
                        [
                            "❌ Authentication failed!",
                            "",
                            "You are not registered. Please add your Telegram username in your website profile first.",
                            "",
                            f"Your Telegram username: @{username}",
                            "",
                            "Steps to register:",
                            "1. Go to your PayTrack profile page",
                            f"2. Add your Telegram username: {username}",
                            "3. Try /start again",
                        ]
                    )
                )
            ]

        session.is_authenticated = True
        session.user_id = user.id
        session.reset()
        TelegramAuditService.log_session_authenticated(user, session.chat_id)
        return [
            Reply(
                "\n".join(
                    [
                        "✅ Authentication successful!",
                        "",
                        f"Welcome back, {user.username}!",
                        "",
                        "Available commands:",
                        "📊 /summary - View analytics summary",
                        "👥 /workers - List all workers",
                        "➕ /addworker - Add new worker",
                        "💰 /payworker - List workers and salaries",
                        "🌾 /crops - List agriculture records",
                        "🌱 /addcrop - Add new cultivation",
                        "🏠 /properties - List real estate records",
                        "🏗️ /addproperty - Add new property",
                        "📅 /addattendance - Mark attendance",
                        "📋 /attendance - Attendance history of a worker",
                        "📊 /attendancesummary - Attendance of all workers",
                    ]
                ),
                keyboard=MENU_KEYBOARD,
            )
        ]

    # ---------- intake ----------

    def start_flow(self, flow: Flow):
        flow_spec = FLOWS[flow]

        def handler(session: Session) -> list[Reply]:
            session.step = flow_spec.first
            session.data = {}
            return [Reply(flow_spec.intro)]

        return handler

    def answer(self, session: Session, text: str) -> list[Reply]:
        step = STEPS[session.step]
        try:
            value = step.read(text)
        except InvalidAnswer as exc:
            return [Reply(step.error_for(exc))]

        session.data[step.key] = value
        if step.next is not None:
            session.step = step.next
            return [Reply(STEPS[step.next].render_prompt(session.data))]
        return self.commit(session, step.flow)

    def commit(self, session: Session, flow: Flow) -> list[Reply]:
        flow_spec = FLOWS[flow]
        user = User.objects.filter(id=session.user_id).first()
        try:
            with transaction.atomic():
                text = flow_spec.commit(session.data, user, session.chat_id)
        except (DatabaseError, ObjectDoesNotExist):
            logger.exception("Telegram %s commit failed for chat_id=%s", flow.value, session.chat_id)
            text = flow_spec.failure
        session.reset()
        return [Reply(text)]

    # ---------- read-only commands ----------

    def list_workers(self, session: Session) -> list[Reply]:
        workers = list(Worker.objects.order_by("-created_at", "-id")[:LIST_LIMIT])
        if not workers:
            return [Reply("📝 No workers found.")]

        lines = ["👥 Workers List", ""]
        for index, worker in enumerate(workers, start=1):
            lines += [
                f"{index}. {worker.name}",
                f"   📱 {worker.phone}",
                f"   💰 Salary: ₹{worker.salary}",
                f"   📅 Added: {worker.created_at:%d/%m/%Y}",
                "",
            ]
        return [Reply("\n".join(lines).rstrip())]

    def list_payable_workers(self, session: Session) -> list[Reply]:
        workers = list(Worker.objects.filter(is_active=True).order_by("name", "id"))
        if not workers:
            return [Reply("📝 No active workers found.")]

        lines = ["💰 Active Workers", ""]
        for index, worker in enumerate(workers, start=1):
            lines.append(f"{index}. {worker.name} - ₹{worker.salary}/month")
        lines += ["", "Record salary payments from the PayTrack dashboard."]
        return [Reply("\n".join(lines))]

    def list_crops(self, session: Session) -> list[Reply]:
        crops = list(Cultivation.objects.order_by("-created_at", "-id")[:LIST_LIMIT])
        if not crops:
            return [Reply("🌾 No cultivation records found.")]

        lines = ["🌾 Agriculture Records", ""]
        for index, crop in enumerate(crops, start=1):
            lines += [
                f"{index}. {crop.crop_name}",
                f"   📏 Area: {crop.area} Bigha",
                f"   💰 Total Cost: ₹{crop.total_cost}",
                f"   📅 Date: {crop.cultivation_date:%d/%m/%Y}",
                "",
            ]
        return [Reply("\n".join(lines).rstrip())]

    def list_properties(self, session: Session) -> list[Reply]:
        properties = list(Property.objects.order_by("-created_at", "-id")[:LIST_LIMIT])
        if not properties:
            return [Reply("🏠 No property records found.")]

        lines = ["🏠 Real Estate Records", ""]
        for index, prop in enumerate(properties, start=1):
            lines += [
                f"{index}. {prop.get_property_type_display()}",
                f"   💰 Total Cost: ₹{prop.total_cost}",
                f"   📍 Partner: {prop.partner_name}",
                f"   📅 Date: {prop.transaction_date:%d/%m/%Y}",
                "",
            ]
        return [Reply("\n".join(lines).rstrip())]

    def summary(self, session: Session) -> list[Reply]:
        lines = [
            "📊 PayTrack Summary",
            "",
            f"👥 Workers: {Worker.objects.count()}",
            f"🌾 Crops: {Cultivation.objects.count()}",
            f"🏠 Properties: {Property.objects.count()}",
            f"💰 Payments: {Payment.objects.count()}",
            "",
            "Use the commands below to view detailed information:",
            "• /workers - View all workers",
            "• /crops - View agriculture records",
            "• /properties - View real estate records",
        ]
        return [Reply("\n".join(lines))]

    def attendance_summary(self, session: Session) -> list[Reply]:
        workers = list(Worker.objects.filter(is_active=True).order_by("name", "id"))
        if not workers:
            return [Reply("📝 No active workers found.")]

        lines = ["📊 Attendance Summary for All Workers", ""]
        for worker in workers:
            summary = AttendanceService.summarize(worker.attendance_records.all())
            lines += [
                f"👤 {worker.name}",
                (
                    f"   ✅ Present: {summary['present']} | ❌ Absent: {summary['absent']} | "
                    f"⏰ Half Day: {summary['half_day']} | 🏖 Leave: {summary['leave']}"
                ),
                f"   📊 Total Days: {summary['total_days']} | 📈 Rate: {summary['attendance_rate']:.1f}%",
                "",
            ]
        return [Reply("\n".join(lines).rstrip())]
