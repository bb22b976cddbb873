"""Sync service - two-way reconciliation between local stores and the remote store.

One ``sync_all`` run reconciles objectives, then tasks. For each entity type:

1. Fetch the remote snapshot. Failure aborts the whole run.
2. Upload local entities missing remotely.
3. (Tasks only) Push local status fields that differ from the remote.
4. Download remote entities missing locally.

Tasks are reconciled for one day. Afterwards, local tasks on other days that
the remote has never confirmed are uploaded too.

Malformed remote items and steps 2-4 are isolated per item: one failure is
logged and skipped and the entity is picked up again on the next run.
"""
import asyncio
import logging
from collections.abc import Iterable
from datetime import date
from typing import Callable, Optional

import httpx

from plansync.clients.remote_client import RemoteClient
from plansync.exceptions import AuthError, ItemError, ListFetchError, MappingError
from plansync.models.objective import Objective
from plansync.models.sync import SyncResult, SyncState, SyncStatus
from plansync.models.task import Task, TaskSummary
from plansync.services.auth_service import AuthSession
from plansync.services.mapping import (
    objective_from_detail,
    objective_summary_from_wire,
    objective_to_create,
    status_differs,
    task_from_summary,
    task_status_payload,
    task_summary_from_wire,
    task_to_create,
    wire_id,
)
from plansync.store.objectives import ObjectiveStore
from plansync.store.tasks import TaskStore
from plansync.utils.dates import utc_date, utc_now
from plansync.utils.retry import RetryPolicy, call_with_retry

logger = logging.getLogger(__name__)

SyncListener = Callable[[SyncState], None]


class SyncEngine:
    """
    Reconciles the local objective and task stores with the remote store.

    Runs are serialized: overlapping ``sync_all`` calls wait for the one in
    progress and then run in turn.
    """

    def __init__(
        self,
        objective_store: ObjectiveStore,
        task_store: TaskStore,
        remote: RemoteClient,
        session: AuthSession,
        retry_policy: Optional[RetryPolicy] = None,
        clock: Callable = utc_now,
    ):
        self.objectives = objective_store
        self.tasks = task_store
        self.remote = remote
        self.session = session
        self.retry_policy = retry_policy or RetryPolicy()
        self._clock = clock
        self._state = SyncState()
        self._listeners: list[SyncListener] = []
        self._lock = asyncio.Lock()

    # State observation

    def get_state(self) -> SyncState:
        return self._state

    def subscribe(self, listener: SyncListener) -> Callable[[], None]:
        """
        Register a listener called synchronously on every state transition.

        Returns:
            Callable that unsubscribes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, **changes) -> None:
        self._state = self._state.model_copy(update=changes)
        for listener in list(self._listeners):
            listener(self._state)

    async def _call(self, func, *args):
        return await call_with_retry(func, *args, policy=self.retry_policy)

    # Full sync

    async def sync_all(self, task_date: Optional[date] = None) -> SyncResult:
        """
        Run one full reconciliation.

        Args:
            task_date: Day whose tasks are reconciled (defaults to today, UTC)

        Returns:
            SyncResult with success flag and, on failure, the error message
        """
        if not self.session.is_authenticated:
            return SyncResult(success=False, error=AuthError().message)

        async with self._lock:
            self._set_state(status=SyncStatus.SYNCING, error=None)
            day = task_date or utc_date(self._clock())
            try:
                await self.sync_objectives()
                await self.sync_tasks(day)
                await self.upload_pending_tasks(day)
            except ListFetchError as e:
                logger.error("Sync failed: %s", e.message)
                return self._fail(e.message)
            except Exception as e:
                logger.exception("Sync failed unexpectedly")
                return self._fail(str(e) or e.__class__.__name__)

            self._set_state(status=SyncStatus.SUCCESS, last_sync_at=self._clock(), error=None)
            logger.info("Sync completed successfully")
            return SyncResult(success=True)

    def _fail(self, message: str) -> SyncResult:
        self._set_state(status=SyncStatus.ERROR, error=message)
        return SyncResult(success=False, error=message)

    # Objectives

    async def sync_objectives(self) -> None:
        """
        Reconcile objectives: upload missing remote, download missing local.

        Raises:
            ListFetchError: If the remote objective list cannot be fetched
        """
        try:
            raw_objectives = await self._call(self.remote.get_objectives)
        except Exception as e:
            raise ListFetchError("objectives", e) from e

        # Malformed items still count as present so they are not uploaded again
        remote_ids = {wire_id(raw) for raw in raw_objectives}
        local_ids = self.objectives.ids()

        for objective in self.objectives.list():
            if objective.id not in remote_ids:
                logger.info("Uploading new objective: %s", objective.name)
                await self._upload_objective(objective)

        for raw in raw_objectives:
            try:
                summary = objective_summary_from_wire(raw)
            except MappingError as e:
                logger.error("Skipping malformed objective %s: %s", e.entity_id, e.cause)
                continue
            if summary.id not in local_ids:
                logger.info("Downloading objective: %s", summary.name)
                await self._download_objective(summary.id)

    async def _upload_objective(self, objective: Objective) -> bool:
        try:
            await self._call(self.remote.create_objective, objective_to_create(objective))
            return True
        except Exception as e:
            logger.error("%s", ItemError("objective", objective.id, e).message)
            return False

    async def _download_objective(self, objective_id: str) -> Optional[Objective]:
        try:
            raw = await self._call(self.remote.get_objective, objective_id)
            objective = objective_from_detail(raw)
            return self.objectives.add(objective)
        except MappingError as e:
            logger.error("Skipping malformed objective %s: %s", objective_id, e.cause)
        except Exception as e:
            logger.error("%s", ItemError("objective", objective_id, e).message)
        return None

    # Tasks

    async def sync_tasks(self, day: date) -> None:
        """
        Reconcile tasks scheduled on ``day``.

        Raises:
            ListFetchError: If the remote task list cannot be fetched
        """
        try:
            raw_tasks = await self._call(self.remote.get_tasks, day.isoformat())
        except Exception as e:
            raise ListFetchError("tasks", e) from e

        remote_ids = {wire_id(raw) for raw in raw_tasks}
        remote_by_id: dict[str, TaskSummary] = {}
        for raw in raw_tasks:
            try:
                summary = task_summary_from_wire(raw)
            except MappingError as e:
                logger.error("Skipping malformed task %s: %s", e.entity_id, e.cause)
                continue
            remote_by_id[summary.id] = summary

        local_tasks = self.tasks.by_date(day)
        local_ids = self.tasks.ids()
        objective_ids = self.objectives.ids()
        confirmed = local_ids & remote_ids

        for task in local_tasks:
            if task.id in remote_ids:
                continue
            if task.objective_id not in objective_ids:
                logger.warning(
                    "Not uploading task %s: objective %s is unknown", task.title, task.objective_id
                )
                continue
            logger.info("Uploading new task: %s", task.title)
            if await self._upload_task(task):
                confirmed.add(task.id)

        # Local always wins for status fields
        for task in local_tasks:
            remote = remote_by_id.get(task.id)
            if remote is not None and status_differs(task, remote):
                logger.info("Syncing task status: %s -> %s", task.title, task.status.value)
                try:
                    await self._call(self.remote.update_task, task.id, task_status_payload(task))
                except Exception as e:
                    logger.error("%s", ItemError("task", task.id, e).message)

        for summary in remote_by_id.values():
            if summary.id in local_ids:
                continue
            if summary.objective_id not in objective_ids:
                logger.warning(
                    "Not downloading task %s: objective %s is not available locally",
                    summary.title,
                    summary.objective_id,
                )
                continue
            logger.info("Downloading task: %s", summary.title)
            try:
                self.tasks.add(task_from_summary(summary))
                confirmed.add(summary.id)
            except MappingError as e:
                logger.error("Skipping malformed task %s: %s", summary.id, e.cause)
            except Exception as e:
                logger.error("%s", ItemError("task", summary.id, e).message)

        self.tasks.confirm_remote(confirmed)

    async def upload_pending_tasks(self, day: date) -> int:
        """
        Upload local tasks on other days that the remote has never confirmed.

        Covers tasks created offline for a day other than the one being
        reconciled. Status changes on those days are only pushed when their
        day is synced.

        Returns:
            Number of tasks uploaded
        """
        objective_ids = self.objectives.ids()
        pending = [
            task
            for task in self.tasks.unconfirmed()
            if utc_date(task.scheduled_at) != day and task.objective_id in objective_ids
        ]
        if not pending:
            return 0

        logger.info("Uploading %d task(s) scheduled on other days", len(pending))
        uploaded = []
        for task in pending:
            if await self._upload_task(task):
                uploaded.append(task.id)
        self.tasks.confirm_remote(uploaded)
        return len(uploaded)

    async def _upload_task(self, task: Task) -> bool:
        try:
            await self._call(self.remote.create_task, task_to_create(task))
            return True
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 409:
                logger.debug("Task %s already exists remotely", task.id)
                return True
            logger.error("%s", ItemError("task", task.id, e).message)
            return False
        except Exception as e:
            logger.error("%s", ItemError("task", task.id, e).message)
            return False

    # One-off uploads

    async def upload_objective(self, objective: Objective) -> None:
        """
        Push a single objective right away. No-op without a session.

        Raises:
            ItemError: If the remote create fails
        """
        if not self.session.is_authenticated:
            return
        try:
            await self._call(self.remote.create_objective, objective_to_create(objective))
        except Exception as e:
            raise ItemError("objective", objective.id, e) from e
        logger.info("Uploaded objective: %s", objective.name)

    async def upload_tasks(self, tasks: Iterable[Task]) -> int:
        """
        Push tasks right away, each isolated from the others. No-op without a session.

        Returns:
            Number of tasks uploaded
        """
        if not self.session.is_authenticated:
            return 0
        uploaded = []
        for task in tasks:
            if await self._upload_task(task):
                uploaded.append(task.id)
        self.tasks.confirm_remote(uploaded)
        return len(uploaded)
