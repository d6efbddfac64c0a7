from datetime import date
from decimal import Decimal
from unittest.mock import patch

from django.db import DatabaseError
from django.test import TestCase
from django.utils import timezone

from accounts.models import User
from apps.agriculture.models import Cultivation
from apps.attendance.models import Attendance
from apps.properties.models import Property
from apps.telegram.bot import AUTH_REQUIRED, START_FIRST, USE_MENU, PayTrackBot
from apps.telegram.intake import BOT_NOTE, STEPS, TOO_LONG_TEXT, WORKER_NOT_FOUND, Step
from apps.telegram.sessions import SessionStore
from apps.workers.models import Worker
from apps.workers.services import WorkerService


CHAT_ID = 5001
USERNAME = "farm_owner"


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class BotTestCase(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            username="owner",
            email="owner@example.com",
            password="StrongPass123!",
            telegram_username=USERNAME,
        )
        self.clock = FakeClock()
        self.bot = PayTrackBot(SessionStore(idle_seconds=1800, clock=self.clock))

    def say(self, text, username=USERNAME):
        replies = self.bot.handle_message(CHAT_ID, username, text)
        self.assertTrue(replies)
        return replies[-1].text

    def conversation(self, *messages):
        return [self.say(text) for text in messages]

    def login(self):
        self.say("/start")

    @property
    def session(self):
        return self.bot.sessions.get(CHAT_ID)


class AuthenticationTests(BotTestCase):
    def test_plain_text_without_session_asks_for_start(self):
        self.assertEqual(self.say("hello"), START_FIRST)

    def test_command_without_authentication_is_refused(self):
        self.assertEqual(self.say("/workers"), AUTH_REQUIRED)

    def test_start_requires_telegram_username(self):
        self.assertIn("You need a Telegram username", self.say("/start", username=None))
        self.assertFalse(self.session.is_authenticated)

    def test_start_with_unknown_username_fails(self):
        text = self.say("/start", username="stranger")
        self.assertIn("Authentication failed", text)
        self.assertIn("@stranger", text)
        self.assertFalse(self.session.is_authenticated)

    @patch("apps.telegram.bot.TelegramAuditService.log_session_authenticated")
    def test_start_authenticates_and_sends_menu(self, log_authenticated):
        replies = self.bot.handle_message(CHAT_ID, USERNAME, "/start")

        self.assertIn("Authentication successful", replies[0].text)
        self.assertIn("Welcome back, owner!", replies[0].text)
        markup = replies[0].reply_markup()
        self.assertTrue(markup["resize_keyboard"])
        self.assertEqual(markup["keyboard"][0][0], {"text": "📊 /summary"})
        self.assertTrue(self.session.is_authenticated)
        self.assertEqual(self.session.user_id, self.user.id)
        log_authenticated.assert_called_once()

    def test_idle_session_is_evicted_and_must_start_again(self):
        self.login()
        self.clock.now += 1801
        self.bot.sessions.evict_idle()

        self.assertEqual(self.say("/workers"), AUTH_REQUIRED)


class WorkerIntakeTests(BotTestCase):
    def setUp(self):
        super().setUp()
        self.login()

    def test_add_worker_with_skipped_optionals(self):
        replies = self.conversation("/addworker", "Ramesh", "9999999999", "5000", "none", "today", "none")

        self.assertIn("Worker Added Successfully", replies[-1])
        worker = Worker.objects.get()
        self.assertEqual(worker.name, "Ramesh")
        self.assertEqual(worker.phone, "9999999999")
        self.assertEqual(worker.salary, Decimal("5000"))
        self.assertEqual(worker.address, "")
        self.assertEqual(worker.joining_date, timezone.localdate())
        self.assertEqual(worker.notes, "")
        self.assertTrue(worker.is_active)
        self.assertTrue(self.session.is_idle)

    def test_prompts_follow_step_table(self):
        replies = self.conversation("/addworker", "Ramesh", "9999999999")

        self.assertIn("worker name", replies[0])
        self.assertEqual(replies[1], STEPS[Step.WORKER_PHONE].prompt)
        self.assertEqual(replies[2], STEPS[Step.WORKER_SALARY].prompt)
        self.assertEqual(self.session.step, Step.WORKER_SALARY)

    def test_invalid_salary_reprompts_without_advancing(self):
        self.conversation("/addworker", "Ramesh", "9999999999")

        for answer in ("abc", "0", "-10"):
            self.assertEqual(self.say(answer), STEPS[Step.WORKER_SALARY].error)
            self.assertEqual(self.session.step, Step.WORKER_SALARY)

        self.assertFalse(Worker.objects.exists())

    def test_salary_too_large_for_the_column_reprompts(self):
        self.conversation("/addworker", "Ramesh", "9999999999")

        for answer in ("1e15", "12345678901", "100.005"):
            self.assertEqual(self.say(answer), STEPS[Step.WORKER_SALARY].error)
            self.assertEqual(self.session.step, Step.WORKER_SALARY)

        self.conversation("5000.50", "none", "today", "none")
        self.assertEqual(Worker.objects.get().salary, Decimal("5000.50"))

    def test_over_long_name_and_phone_reprompt(self):
        self.say("/addworker")

        self.assertEqual(self.say("R" * 101), TOO_LONG_TEXT.format(max_length=100))
        self.assertEqual(self.session.step, Step.WORKER_NAME)
        self.say("R" * 100)
        self.assertEqual(self.say("9" * 21), TOO_LONG_TEXT.format(max_length=20))
        self.assertEqual(self.session.step, Step.WORKER_PHONE)
        self.assertFalse(Worker.objects.exists())

    @patch("apps.telegram.intake.TelegramAuditService.log_record_created")
    def test_worker_is_created_through_service(self, log_created):
        with patch("apps.telegram.intake.WorkerService.create", wraps=WorkerService.create) as create:
            self.conversation("/addworker", "Ramesh", "9999999999", "5000", "none", "today", "none")

        create.assert_called_once()
        worker = Worker.objects.get()
        self.assertTrue(worker.is_active)
        log_created.assert_called_once_with(self.user, CHAT_ID, "worker", worker.id)

    def test_joining_date_parses_day_month_year(self):
        self.conversation("/addworker", "Suresh", "8888888888", "4000", "Village road", "15/12/2024", "Tractor driver")

        worker = Worker.objects.get()
        self.assertEqual(worker.joining_date, date(2024, 12, 15))
        self.assertEqual(worker.address, "Village road")
        self.assertEqual(worker.notes, "Tractor driver")

    def test_unparsable_joining_date_falls_back_to_today(self):
        self.conversation("/addworker", "Suresh", "8888888888", "4000", "none", "someday", "none")

        self.assertEqual(Worker.objects.get().joining_date, timezone.localdate())

    def test_command_mid_flow_abandons_the_flow(self):
        self.conversation("/addworker", "Ramesh")

        text = self.say("/workers")

        self.assertEqual(text, "📝 No workers found.")
        self.assertTrue(self.session.is_idle)
        self.assertEqual(self.say("9999999999"), USE_MENU)
        self.assertFalse(Worker.objects.exists())

    def test_unknown_command_resets_session(self):
        self.conversation("/addworker", "Ramesh")

        self.assertEqual(self.say("/dance"), USE_MENU)
        self.assertTrue(self.session.is_idle)


class CropIntakeTests(BotTestCase):
    def setUp(self):
        super().setUp()
        self.login()

    def test_add_crop_computes_totals(self):
        replies = self.conversation("/addcrop", "Wheat", "2", "1000", "cash", "none", "1500", "none", "none")

        self.assertIn("Crop Added Successfully", replies[-1])
        crop = Cultivation.objects.get()
        self.assertEqual(crop.crop_name, "Wheat")
        self.assertEqual(crop.total_cost, Decimal("2000.00"))
        self.assertEqual(crop.amount_received, Decimal("1500"))
        self.assertEqual(crop.amount_pending, Decimal("500.00"))
        self.assertEqual(crop.payment_mode, "cash")
        self.assertEqual(crop.buyer_name, "")
        self.assertIsNone(crop.harvest_date)
        self.assertIsNone(crop.person)
        self.assertEqual(crop.cultivation_date, timezone.localdate())

    def test_payment_mode_and_harvest_date(self):
        self.conversation("/addcrop", "Mustard", "1.5", "2000")
        self.assertEqual(self.say("cheque"), STEPS[Step.CROP_PAYMENT_MODE].error)
        self.conversation("UPI", "Mohan", "0", "15/03/2025", "first sowing")

        crop = Cultivation.objects.get()
        self.assertEqual(crop.payment_mode, "UPI")
        self.assertEqual(crop.buyer_name, "Mohan")
        self.assertEqual(crop.harvest_date, date(2025, 3, 15))
        self.assertEqual(crop.amount_pending, Decimal("3000.00"))
        self.assertEqual(crop.notes, "first sowing")

    def test_area_with_more_than_two_decimals_reprompts(self):
        self.conversation("/addcrop", "Wheat")

        self.assertEqual(self.say("0.004"), STEPS[Step.CROP_AREA].error)
        self.assertEqual(self.session.step, Step.CROP_AREA)
        self.assertEqual(self.say("100000000"), STEPS[Step.CROP_AREA].error)
        self.assertEqual(self.session.step, Step.CROP_AREA)

        self.conversation("0.25", "1000", "cash", "none", "0", "none", "none")

        crop = Cultivation.objects.get()
        self.assertEqual(crop.area, Decimal("0.25"))
        self.assertEqual(crop.total_cost, Decimal("250.00"))
        self.assertEqual(crop.total_cost, crop.area * crop.rate_per_bigha)

    def test_negative_amount_received_reprompts(self):
        self.conversation("/addcrop", "Wheat", "2", "1000", "cash", "none")

        self.assertEqual(self.say("-1"), STEPS[Step.CROP_AMOUNT_RECEIVED].error)
        self.assertEqual(self.session.step, Step.CROP_AMOUNT_RECEIVED)

    def test_persistence_failure_resets_session(self):
        self.conversation("/addcrop", "Wheat", "2", "1000", "cash", "none", "0", "none")

        with patch("apps.telegram.intake.CultivationService.create", side_effect=DatabaseError("down")):
            with self.assertLogs("apps.telegram.bot", level="ERROR"):
                text = self.say("none")

        self.assertEqual(text, "❌ Error adding crop. Please try again.")
        self.assertTrue(self.session.is_idle)
        self.assertEqual(self.session.data, {})
        self.assertFalse(Cultivation.objects.exists())


class PropertyIntakeTests(BotTestCase):
    def setUp(self):
        super().setUp()
        self.login()

    def test_add_property_uses_bot_defaults(self):
        replies = self.conversation("/addproperty", "Buy", "250000")

        self.assertIn("Property Added Successfully", replies[-1])
        prop = Property.objects.get()
        self.assertEqual(prop.property_type, "buy")
        self.assertEqual(prop.area, Decimal("1"))
        self.assertEqual(prop.area_unit, "Bigha")
        self.assertEqual(prop.partner_name, BOT_NOTE)
        self.assertEqual(prop.notes, BOT_NOTE)
        self.assertEqual(prop.rate_per_unit, Decimal("250000"))
        self.assertEqual(prop.total_cost, Decimal("250000"))
        self.assertEqual(prop.amount_paid, Decimal("0"))
        self.assertEqual(prop.amount_pending, Decimal("250000"))

    def test_invalid_type_and_value_reprompt(self):
        self.say("/addproperty")
        self.assertEqual(self.say("rent"), STEPS[Step.PROPERTY_TYPE].error)
        self.say("sell")
        self.assertEqual(self.say("free"), STEPS[Step.PROPERTY_VALUE].error)
        self.assertEqual(self.say("0"), STEPS[Step.PROPERTY_VALUE].error)
        self.assertFalse(Property.objects.exists())


class AttendanceIntakeTests(BotTestCase):
    def setUp(self):
        super().setUp()
        self.login()
        self.worker = Worker.objects.create(name="Ramesh", phone="9999999999", salary=Decimal("5000"))

    def test_same_day_twice_updates_single_record(self):
        first = self.conversation("/addattendance", "Ramesh", "today", "Present", "none")
        second = self.conversation("/addattendance", "ramesh", "today", "Present", "none")

        self.assertIn("Attendance Added", first[-1])
        self.assertIn("Attendance Updated", second[-1])
        self.assertEqual(Attendance.objects.filter(worker=self.worker).count(), 1)
        record = Attendance.objects.get(worker=self.worker)
        self.assertEqual(record.date, timezone.localdate())
        self.assertEqual(record.status, "present")
        self.assertEqual(record.notes, "")
        self.worker.refresh_from_db()
        self.assertEqual(self.worker.total_working_days, 1)

    @patch("apps.telegram.intake.TelegramAuditService.log_record_updated")
    @patch("apps.telegram.intake.TelegramAuditService.log_record_created")
    def test_update_is_audited_with_changed_fields(self, log_created, log_updated):
        self.conversation("/addattendance", "Ramesh", "today", "Present", "none")
        self.conversation("/addattendance", "Ramesh", "today", "Absent", "none")
        self.conversation("/addattendance", "Ramesh", "today", "Absent", "none")

        record = Attendance.objects.get()
        log_created.assert_called_once_with(self.user, CHAT_ID, "attendance", record.id)
        log_updated.assert_called_once_with(self.user, CHAT_ID, "attendance", record.id, ("status",))

    def test_over_long_notes_reprompt(self):
        self.conversation("/addattendance", "Ramesh", "today", "Present")

        self.assertEqual(self.say("n" * 501), TOO_LONG_TEXT.format(max_length=500))
        self.assertEqual(self.session.step, Step.ATTENDANCE_NOTES)
        self.assertFalse(Attendance.objects.exists())

    def test_date_prompt_names_worker_and_date_is_not_a_command(self):
        replies = self.conversation("/addattendance", "Ram")
        self.assertIn("Enter date for Ramesh", replies[-1])

        self.say("15/12/2024")
        self.assertEqual(self.session.step, Step.ATTENDANCE_STATUS)
        self.conversation("HalfDay", "came late")

        record = Attendance.objects.get()
        self.assertEqual(record.date, date(2024, 12, 15))
        self.assertEqual(record.status, "half_day")
        self.assertEqual(record.notes, "came late")

    def test_unknown_worker_reprompts(self):
        self.say("/addattendance")

        self.assertEqual(self.say("Mahesh"), WORKER_NOT_FOUND)
        self.assertEqual(self.session.step, Step.ATTENDANCE_WORKER)

    def test_ambiguous_worker_reprompts(self):
        Worker.objects.create(name="Ramlal", phone="7777777777", salary=Decimal("3000"))
        self.say("/addattendance")

        self.assertEqual(self.say("Ram"), WORKER_NOT_FOUND)
        self.assertEqual(self.session.step, Step.ATTENDANCE_WORKER)

    def test_invalid_status_reprompts(self):
        self.conversation("/addattendance", "Ramesh", "today")

        self.assertEqual(self.say("Late"), STEPS[Step.ATTENDANCE_STATUS].error)
        self.assertEqual(self.session.step, Step.ATTENDANCE_STATUS)

    def test_attendance_history(self):
        Attendance.objects.create(worker=self.worker, date=date(2024, 3, 1), status="present", notes="harvest")
        Attendance.objects.create(worker=self.worker, date=date(2024, 3, 2), status="absent")

        text = self.conversation("/attendance", "Ramesh")[-1]

        self.assertIn("Attendance History for Ramesh", text)
        self.assertIn("1. ❌ Absent - 02/03/2024", text)
        self.assertIn("📝 harvest", text)
        self.assertIn("Attendance Rate: 50.0%", text)
        self.assertTrue(self.session.is_idle)

    def test_attendance_history_without_records(self):
        text = self.conversation("/attendance", "Ramesh")[-1]
        self.assertEqual(text, "📝 No attendance records found for Ramesh.")

    def test_attendance_summary_lists_active_workers(self):
        Worker.objects.create(name="Gone", phone="6666666666", salary=Decimal("1000"), is_active=False)
        Attendance.objects.create(worker=self.worker, date=date(2024, 3, 1), status="half_day")

        text = self.say("/attendancesummary")

        self.assertIn("👤 Ramesh", text)
        self.assertIn("Half Day: 1", text)
        self.assertIn("Rate: 50.0%", text)
        self.assertNotIn("Gone", text)


class ListingCommandTests(BotTestCase):
    def setUp(self):
        super().setUp()
        self.login()

    def test_keyboard_label_runs_command(self):
        Worker.objects.create(name="Ramesh", phone="9999999999", salary=Decimal("5000"))

        text = self.say("📊 /summary")

        self.assertIn("PayTrack Summary", text)
        self.assertIn("Workers: 1", text)
        self.assertIn("Crops: 0", text)

    def test_workers_and_payworker(self):
        Worker.objects.create(name="Ramesh", phone="9999999999", salary=Decimal("5000"))
        Worker.objects.create(name="Old hand", phone="8888888888", salary=Decimal("3000"), is_active=False)

        workers_text = self.say("/workers")
        self.assertIn("Ramesh", workers_text)
        self.assertIn("Old hand", workers_text)

        pay_text = self.say("/payworker")
        self.assertIn("Ramesh - ₹5000.00/month", pay_text)
        self.assertNotIn("Old hand", pay_text)

    def test_crops_and_properties(self):
        self.assertEqual(self.say("/crops"), "🌾 No cultivation records found.")
        self.assertEqual(self.say("/properties"), "🏠 No property records found.")

        Cultivation.objects.create(crop_name="Wheat", area=Decimal("2"), rate_per_bigha=Decimal("1000"), payment_mode="cash")
        self.assertIn("Total Cost: ₹2000.00", self.say("/crops"))
