from apps.telegram.bot import parse_command
from apps.telegram.sessions import SessionStore


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_session_created_on_first_message():
    store = SessionStore(idle_seconds=60, clock=FakeClock())
    assert store.peek(42) is None

    session = store.get(42)

    assert session.chat_id == 42
    assert not session.is_authenticated
    assert session.is_idle
    assert store.get(42) is session
    assert len(store) == 1


def test_evict_idle_drops_only_stale_sessions():
    clock = FakeClock()
    store = SessionStore(idle_seconds=60, clock=clock)
    store.get(1)
    clock.now += 50
    store.get(2)
    clock.now += 20

    assert store.evict_idle() == 1
    assert 1 not in store
    assert 2 in store


def test_reset_clears_step_and_scratch_data():
    store = SessionStore(idle_seconds=60, clock=FakeClock())
    session = store.get(7)
    session.step = "anything"
    session.data = {"name": "Ramesh"}

    session.reset()

    assert session.is_idle
    assert session.data == {}


def test_parse_command():
    assert parse_command("/start") == "start"
    assert parse_command("/Workers") == "workers"
    assert parse_command("📊 /summary") == "summary"
    assert parse_command("/addworker@paytrack_bot") == "addworker"
    assert parse_command("15/12/2024") is None
    assert parse_command("Ramesh") is None
    assert parse_command("") is None
