"""
Shared fixtures for the meeting scheduler tests.

All tests run against a fixed clock (Monday 2 June 2025, 06:00 UTC) and a
fresh in-memory store so results are deterministic.
"""

import uuid
from datetime import datetime, timedelta

import pytest

from src.api.flask_server import SchedulerAPI
from src.scheduler.models import Participant, Meeting
from src.scheduler.scheduling_engine import SchedulingEngine
from src.store.memory_store import InMemoryStore


FIXED_NOW = datetime(2025, 6, 2, 6, 0)


# ─────────────────────────────────────────────────────────────────────────────
# Core fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def now() -> datetime:
    """The fixed 'current time' used by the engine."""
    return FIXED_NOW


@pytest.fixture
def tomorrow() -> datetime:
    """Midnight UTC of the day after the fixed clock."""
    return datetime(2025, 6, 3)


@pytest.fixture
def store() -> InMemoryStore:
    """An empty in-memory store."""
    return InMemoryStore()


@pytest.fixture
def engine(store, now) -> SchedulingEngine:
    """Scheduling engine wired to the store and the fixed clock."""
    return SchedulingEngine(store, clock=lambda: now)


@pytest.fixture
def add_participant(store):
    """Factory adding a participant to the store."""
    def _add(name: str, timezone: str = "UTC") -> Participant:
        return store.add_participant(Participant(str(uuid.uuid4()), name, timezone))
    return _add


@pytest.fixture
def add_meeting(store):
    """Factory inserting a meeting directly, bypassing scheduling checks."""
    def _add(title: str, start: datetime, end: datetime, participants) -> Meeting:
        return store.insert_meeting(Meeting(str(uuid.uuid4()), title, start, end, participants))
    return _add


# ─────────────────────────────────────────────────────────────────────────────
# Sample participants
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def ana(add_participant) -> Participant:
    """Working hours 11:00-21:00 UTC."""
    return add_participant("Ana", "UTC-3:00")


@pytest.fixture
def ben(add_participant) -> Participant:
    """Working hours 08:00-18:00 UTC."""
    return add_participant("Ben", "UTC")


@pytest.fixture
def chandra(add_participant) -> Participant:
    """Working hours 02:30-12:30 UTC."""
    return add_participant("Chandra", "UTC+5:30")


@pytest.fixture
def hiro(add_participant) -> Participant:
    """Working hours 23:00 (previous day)-09:00 UTC."""
    return add_participant("Hiro", "UTC+9:00")


# ─────────────────────────────────────────────────────────────────────────────
# API fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def api(store, engine) -> SchedulerAPI:
    """API instance sharing the test store and engine."""
    api = SchedulerAPI(store, engine=engine, install_signal_handlers=False)
    api.app.config["TESTING"] = True
    return api


@pytest.fixture
def client(api):
    """Flask test client."""
    return api.app.test_client()


def at(day: datetime, hour: int, minute: int = 0) -> datetime:
    """Helper: a time on the given day."""
    return day + timedelta(hours=hour, minutes=minute)
