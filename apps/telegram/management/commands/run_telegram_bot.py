import logging
import time

import requests
from django.core.management.base import BaseCommand, CommandError
from django.db import close_old_connections

from apps.telegram.bot import PayTrackBot
from apps.telegram.client import TelegramAPIError, TelegramClient


logger = logging.getLogger(__name__)

RETRY_DELAY_SECONDS = 5


class Command(BaseCommand):
    help = "Run the PayTrack Telegram bot with long polling."

    def add_arguments(self, parser):
        parser.add_argument(
            "--once",
            action="store_true",
            help="Process a single batch of updates and exit.",
        )

    def handle(self, *args, **options):
        try:
            client = TelegramClient()
        except TelegramAPIError as exc:
            raise CommandError(str(exc))
        bot = PayTrackBot()
        offset = None

        self.stdout.write(self.style.SUCCESS("PayTrack Telegram bot started."))
        while True:
            try:
                updates = client.get_updates(offset=offset)
            except (requests.RequestException, TelegramAPIError):
                logger.warning("Telegram getUpdates failed", exc_info=True)
                if options["once"]:
                    break
                time.sleep(RETRY_DELAY_SECONDS)
                continue

            for update in updates:
                offset = update["update_id"] + 1
                self.process_update(client, bot, update)

            evicted = bot.sessions.evict_idle()
            if evicted:
                logger.info("Evicted %s idle Telegram sessions", evicted)
            if options["once"]:
                break

    def process_update(self, client, bot, update):
        message = update.get("message") or {}
        text = message.get("text")
        if not text:
            return
        chat_id = message["chat"]["id"]
        username = (message.get("from") or {}).get("username")

        close_old_connections()
        try:
            replies = bot.handle_message(chat_id, username, text)
        except Exception:
            logger.exception("Telegram update %s failed", update.get("update_id"))
            return
        finally:
            close_old_connections()

        for reply in replies:
            try:
                client.send_message(chat_id, reply.text, reply_markup=reply.reply_markup())
            except (requests.RequestException, TelegramAPIError):
                logger.warning("Telegram sendMessage failed for chat_id=%s", chat_id, exc_info=True)
