from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from django.conf import settings


@dataclass
class Session:
    chat_id: int
    is_authenticated: bool = False
    user_id: Optional[int] = None
    step: Any = None
    data: dict = field(default_factory=dict)
    last_seen: float = 0.0

    @property
    def is_idle(self) -> bool:
        return self.step is None

    def reset(self) -> None:
        self.step = None
        self.data = {}


class SessionStore:
    """
    In-memory intake sessions keyed by chat id.

    Owned by the single bot process; sessions idle longer than
    TELEGRAM_SESSION_IDLE_SECONDS are dropped by evict_idle().
    """

    def __init__(self, idle_seconds: Optional[int] = None, clock: Callable[[], float] = time.monotonic):
        if idle_seconds is None:
            idle_seconds = getattr(settings, "TELEGRAM_SESSION_IDLE_SECONDS", 1800)
        self.idle_seconds = idle_seconds
        self.clock = clock
        self._sessions: dict[int, Session] = {}

    def get(self, chat_id: int) -> Session:
        session = self._sessions.get(chat_id)
        if session is None:
            session = Session(chat_id=chat_id)
            self._sessions[chat_id] = session
        session.last_seen = self.clock()
        return session

    def peek(self, chat_id: int) -> Optional[Session]:
        return self._sessions.get(chat_id)

    def evict_idle(self) -> int:
        cutoff = self.clock() - self.idle_seconds
        stale = [chat_id for chat_id, session in self._sessions.items() if session.last_seen < cutoff]
        for chat_id in stale:
            del self._sessions[chat_id]
        return len(stale)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, chat_id) -> bool:
        return chat_id in self._sessions
