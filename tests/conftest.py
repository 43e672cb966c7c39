import asyncio
from datetime import date, datetime, timezone

import httpx
import pytest

from ehub.schemas.projects import Project
from ehub.schemas.users import User
from ehub.storage.memory_provider import MemoryTokenStorage


def run(coro):
    return asyncio.run(coro)


class RecordingSleep:
    """Stands in for asyncio.sleep; records requested delays without waiting."""

    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


class FakeServer:
    """
    httpx.MockTransport handler that replays queued outcomes in order.

    An outcome is an httpx.Response or an exception instance to raise; the last
    outcome repeats once the queue is exhausted.
    """

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.requests = []

    def __call__(self, request: httpx.Request):
        self.requests.append(request)
        index = min(len(self.requests), len(self.outcomes)) - 1
        outcome = self.outcomes[index]
        if isinstance(outcome, Exception):
            raise outcome
        return httpx.Response(outcome.status_code, headers=outcome.headers, content=outcome.content)

    @property
    def transport(self):
        return httpx.MockTransport(self)


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def storage():
    return MemoryTokenStorage()


@pytest.fixture
def today():
    return date(2026, 3, 14)


@pytest.fixture
def make_user():
    def _make(user_id, role="fabricator", name=None, email=None):
        return User(
            id=user_id,
            name=name or f"User {user_id}",
            email=email or f"{user_id}@ehub.test",
            role=role,
            school="North Campus",
        )

    return _make


@pytest.fixture
def project():
    return Project(
        id="p-1",
        name="Steel Gate",
        description="Fabricate and install the front gate",
        status="1_Assigned_to_FAB",
        priority="high",
        start_date="2026-03-01",
        end_date="2026-04-15",
        progress=40,
        supervisor_id="sup-1",
        fabricator_ids=["fab-1", "fab-2"],
        budget=1200,
        client_name="Acme Corp",
        created_by="admin-1",
        created_at="2026-02-20",
    )


class TickingClock:
    """Returns increasing timestamps, one second apart."""

    def __init__(self, start=None):
        self.current = start or datetime(2026, 3, 14, 9, 0, tzinfo=timezone.utc)

    def __call__(self):
        value = self.current
        self.current = datetime.fromtimestamp(value.timestamp() + 1, tz=timezone.utc)
        return value
