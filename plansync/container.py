"""Composition root - builds one owned instance of every component."""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import httpx

from plansync.clients.remote_client import RemoteClient
from plansync.config import Settings
from plansync.persistence import JsonFilePersistence, MemoryPersistence, PersistenceAdapter
from plansync.services.auth_service import AuthService, AuthSession
from plansync.services.objective_service import ObjectiveService
from plansync.services.schedule_service import ScheduleService
from plansync.services.status_engine import StatusEngine
from plansync.services.sync_service import SyncEngine
from plansync.services.task_service import TaskService
from plansync.store.objectives import ObjectiveStore
from plansync.store.schedule import ScheduleStore
from plansync.store.settings import SettingsStore
from plansync.store.status import StatusStore
from plansync.store.tasks import TaskStore
from plansync.utils.dates import utc_now
from plansync.utils.retry import RetryPolicy

logger = logging.getLogger(__name__)


@dataclass
class Container:
    """Everything the local API and the CLI need, wired together."""

    persistence: PersistenceAdapter
    objective_store: ObjectiveStore
    task_store: TaskStore
    schedule_store: ScheduleStore
    status_store: StatusStore
    settings_store: SettingsStore
    remote: RemoteClient
    session: AuthSession
    auth_service: AuthService
    status_engine: StatusEngine
    objective_service: ObjectiveService
    task_service: TaskService
    schedule_service: ScheduleService
    sync_engine: SyncEngine

    async def close(self) -> None:
        await self.remote.close()


def build_container(
    settings: Settings,
    persistence: Optional[PersistenceAdapter] = None,
    remote: Optional[RemoteClient] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    clock: Callable = utc_now,
) -> Container:
    """
    Build the component graph.

    Args:
        settings: Application settings
        persistence: Storage adapter; defaults to JSON files in ``settings.data_dir``
        remote: Remote client; defaults to an httpx client for ``settings.remote_api_url``
        transport: Optional httpx transport for the default remote client
        clock: Time source shared by every component

    Returns:
        Wired Container
    """
    if persistence is None:
        persistence = JsonFilePersistence(Path(settings.data_dir))

    session = AuthSession(token=settings.auth_token, clock=clock)
    if remote is None:
        remote = RemoteClient(
            settings.remote_api_url,
            token=settings.auth_token,
            timeout=settings.remote_timeout_seconds,
            transport=transport,
        )

    objective_store = ObjectiveStore(persistence, clock=clock)
    task_store = TaskStore(persistence)
    schedule_store = ScheduleStore(persistence)
    status_store = StatusStore(persistence)
    settings_store = SettingsStore(persistence)

    status_engine = StatusEngine(status_store, clock=clock)
    retry_policy = RetryPolicy(
        max_retries=settings.remote_max_retries,
        base_delay=settings.remote_retry_base_delay,
        timeout=settings.remote_timeout_seconds,
    )

    logger.debug("Container built (data: %s)", type(persistence).__name__)

    return Container(
        persistence=persistence,
        objective_store=objective_store,
        task_store=task_store,
        schedule_store=schedule_store,
        status_store=status_store,
        settings_store=settings_store,
        remote=remote,
        session=session,
        auth_service=AuthService(remote, session),
        status_engine=status_engine,
        objective_service=ObjectiveService(objective_store, clock=clock),
        task_service=TaskService(task_store, objective_store, status_engine, clock=clock),
        schedule_service=ScheduleService(schedule_store),
        sync_engine=SyncEngine(
            objective_store,
            task_store,
            remote,
            session,
            retry_policy=retry_policy,
            clock=clock,
        ),
    )


def build_memory_container(settings: Settings, **kwargs) -> Container:
    """Container backed by in-memory persistence."""
    return build_container(settings, persistence=MemoryPersistence(), **kwargs)
