from __future__ import annotations

import logging
from typing import Optional

import requests
from django.conf import settings


logger = logging.getLogger(__name__)


class TelegramAPIError(Exception):
    pass


class TelegramClient:
    """Minimal Bot API client: long-poll getUpdates and sendMessage."""

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: Optional[str] = None,
        poll_timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        self.token = token or settings.TELEGRAM_BOT_TOKEN
        if not self.token:
            raise TelegramAPIError("TELEGRAM_BOT_TOKEN is not configured.")
        self.api_url = (api_url or settings.TELEGRAM_API_URL).rstrip("/")
        self.poll_timeout = settings.TELEGRAM_POLL_TIMEOUT if poll_timeout is None else poll_timeout
        self.http = session or requests.Session()

    def _url(self, method: str) -> str:
        return f"{self.api_url}/bot{self.token}/{method}"

    def _call(self, method: str, payload: dict, timeout: float):
        response = self.http.post(self._url(method), json=payload, timeout=timeout)
        try:
            body = response.json()
        except ValueError:
            raise TelegramAPIError(f"{method}: non-JSON response, status={response.status_code}")
        if not body.get("ok"):
            raise TelegramAPIError(f"{method}: {body.get('description', response.status_code)}")
        return body["result"]

    def get_updates(self, offset: Optional[int] = None) -> list[dict]:
        payload = {"timeout": self.poll_timeout, "allowed_updates": ["message"]}
        if offset is not None:
            payload["offset"] = offset
        # Network timeout must outlast the long-poll window.
        return self._call("getUpdates", payload, timeout=self.poll_timeout + 10)

    def send_message(self, chat_id: int, text: str, reply_markup: Optional[dict] = None) -> dict:
        payload = {"chat_id": chat_id, "text": text}
        if reply_markup:
            payload["reply_markup"] = reply_markup
        return self._call("sendMessage", payload, timeout=10)
