"""Pytest configuration and fixtures."""
from datetime import datetime, timedelta, timezone
from typing import Optional

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from plansync.config import Settings
from plansync.container import build_container, build_memory_container
from plansync.main import create_app
from plansync.persistence import MemoryPersistence
from plansync.models.objective import Objective, TimeFrame
from plansync.models.task import Task
from plansync.models.user import AuthResponse, User

NOW = datetime(2024, 3, 5, 9, 0, tzinfo=timezone.utc)


def _wire(payload) -> dict:
    return payload.model_dump(mode="json", by_alias=True)


class FakeRemote:
    """
    In-memory stand-in for RemoteClient.

    Stores objectives and tasks as camelCase wire dicts and records every
    call. ``failures`` maps a method name to an exception raised on every
    call to it; ``reject_ids`` makes create/update calls for those ids fail.
    """

    def __init__(self):
        self.objectives: dict[str, dict] = {}
        self.tasks: dict[str, dict] = {}
        self.calls: list[tuple] = []
        self.failures: dict[str, Exception] = {}
        self.reject_ids: set[str] = set()
        self.token: Optional[str] = None
        self.closed = False

    def _record(self, name: str, *args):
        self.calls.append((name, *args))
        if name in self.failures:
            raise self.failures[name]

    def calls_to(self, name: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == name]

    def set_token(self, token):
        self.token = token

    async def close(self):
        self.closed = True

    async def get_objectives(self):
        self._record("get_objectives")
        return [dict(o) for o in self.objectives.values()]

    async def get_objective(self, objective_id):
        self._record("get_objective", objective_id)
        return dict(self.objectives[objective_id])

    async def create_objective(self, payload):
        self._record("create_objective", payload.id)
        if payload.id in self.reject_ids:
            raise httpx.HTTPStatusError(
                "rejected",
                request=httpx.Request("POST", "http://remote/objectives"),
                response=httpx.Response(422),
            )
        stamp = NOW.isoformat()
        self.objectives[payload.id] = {
            **_wire(payload),
            "startDate": stamp,
            "createdAt": stamp,
            "updatedAt": stamp,
            "status": "active",
        }
        return self.objectives[payload.id]

    async def get_tasks(self, date_iso):
        self._record("get_tasks", date_iso)
        return [dict(t) for t in self.tasks.values() if t["scheduledAt"][:10] == date_iso]

    async def create_task(self, payload):
        self._record("create_task", payload.id)
        if payload.id in self.reject_ids:
            raise httpx.ConnectError("connection refused")
        self.tasks[payload.id] = {**_wire(payload), "status": "pending"}
        return self.tasks[payload.id]

    async def update_task(self, task_id, payload):
        self._record("update_task", task_id)
        if task_id in self.reject_ids:
            raise httpx.ConnectError("connection refused")
        self.tasks[task_id].update(_wire(payload))
        return self.tasks[task_id]

    async def sign_in(self, email, password):
        self._record("sign_in", email)
        return AuthResponse(token="remote-token", user=User(id="user-1", email=email))

    async def sign_up(self, email, password, name):
        self._record("sign_up", email)
        return AuthResponse(token="remote-token", user=User(id="user-1", email=email, name=name))

    async def sign_out(self):
        self._record("sign_out")

    # Seeding helpers

    def add_objective(self, objective_id: str, name: str = "Remote objective", **fields) -> dict:
        stamp = NOW.isoformat()
        self.objectives[objective_id] = {
            "id": objective_id,
            "name": name,
            "category": "fitness",
            "startDate": stamp,
            "createdAt": stamp,
            "updatedAt": stamp,
            **fields,
        }
        return self.objectives[objective_id]

    def add_task(
        self,
        task_id: str,
        objective_id: str,
        scheduled_at: datetime = NOW,
        **fields,
    ) -> dict:
        self.tasks[task_id] = {
            "id": task_id,
            "objectiveId": objective_id,
            "title": f"Task {task_id}",
            "scheduledAt": scheduled_at.isoformat(),
            "durationMinutes": 30,
            "status": "pending",
            **fields,
        }
        return self.tasks[task_id]


class FailingSaves(MemoryPersistence):
    """MemoryPersistence whose saves raise OSError for the keys in ``failing_keys``."""

    def __init__(self):
        super().__init__()
        self.failing_keys: set[str] = set()

    def save(self, key: str, blob: str) -> None:
        if key in self.failing_keys:
            raise OSError("disk full")
        super().save(key, blob)


def make_objective(objective_id: str = "obj-1", name: str = "Run a marathon", **fields) -> Objective:
    return Objective(
        id=objective_id,
        name=name,
        category="fitness",
        timeframe=TimeFrame(start_date=NOW),
        created_at=NOW,
        updated_at=NOW,
        **fields,
    )


def make_task(
    task_id: str = "task-1",
    objective_id: str = "obj-1",
    scheduled_at: datetime = NOW,
    **fields,
) -> Task:
    fields.setdefault("title", f"Task {task_id}")
    fields.setdefault("duration_minutes", 30)
    return Task(
        id=task_id,
        objective_id=objective_id,
        scheduled_at=scheduled_at,
        **fields,
    )


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    """Mutable test clock; call ``clock.advance(...)`` to move time forward."""

    class Clock:
        def __init__(self):
            self.current = NOW

        def __call__(self):
            return self.current

        def advance(self, **kwargs):
            self.current += timedelta(**kwargs)

    return Clock()


@pytest.fixture
def objective_factory():
    return make_objective


@pytest.fixture
def task_factory():
    return make_task


@pytest.fixture
def test_settings():
    return Settings(
        remote_api_url="http://remote.test",
        remote_max_retries=0,
        remote_retry_base_delay=0.0,
        remote_timeout_seconds=5.0,
        auth_token=None,
    )


@pytest.fixture
def fake_remote():
    return FakeRemote()


@pytest.fixture
def container(test_settings, fake_remote, clock):
    """Memory-backed container wired to the fake remote."""
    return build_memory_container(test_settings, remote=fake_remote, clock=clock)


@pytest.fixture
def signed_in(container):
    """Container with an active session."""
    container.session.start("opaque-session-token")
    return container


@pytest.fixture
def failing_saves():
    return FailingSaves()


@pytest.fixture
def fragile_container(test_settings, fake_remote, clock, failing_saves):
    """Signed-in container whose persistence can be made to fail per key."""
    container = build_container(
        test_settings, persistence=failing_saves, remote=fake_remote, clock=clock
    )
    container.session.start("opaque-session-token")
    return container


@pytest_asyncio.fixture
async def app_client(container):
    """
    Create a test client for the local API.

    The app is built around the memory container, so every test starts
    with empty stores and the fake remote.
    """
    app = create_app(container=container)
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client
