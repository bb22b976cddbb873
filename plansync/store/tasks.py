"""Task store."""
from collections.abc import Iterable
from datetime import date, datetime, timedelta
from typing import Optional

from pydantic import BaseModel

from plansync.models.task import Task, TaskStatus
from plansync.store.base import EntityRepository
from plansync.utils.dates import to_utc, utc_date, utc_now

# Tasks that can still turn overdue
OPEN_STATUSES = (TaskStatus.PENDING, TaskStatus.IN_PROGRESS)


class TaskState(BaseModel):
    """
    Snapshot persisted under the ``tasks`` key.

    ``remote_ids`` holds the ids the remote store has confirmed, either by
    listing them or by accepting an upload.
    """

    model_config = {"frozen": True}

    tasks: tuple[Task, ...] = ()
    remote_ids: frozenset[str] = frozenset()


class TaskStore(EntityRepository[TaskState, Task]):
    """Scheduled tasks across all objectives."""

    key = "tasks"
    state_model = TaskState
    collection = "tasks"
    entity_name = "Task"

    def _after_remove(self, state: TaskState, removed: Task) -> TaskState:
        if removed.id not in state.remote_ids:
            return state
        return state.model_copy(update={"remote_ids": state.remote_ids - {removed.id}})

    def by_date(self, day: date) -> list[Task]:
        """Tasks scheduled on ``day`` (UTC calendar date)."""
        return [task for task in self._items() if utc_date(task.scheduled_at) == day]

    def by_objective(self, objective_id: str) -> list[Task]:
        return [task for task in self._items() if task.objective_id == objective_id]

    def unconfirmed(self) -> list[Task]:
        """Tasks the remote store has never confirmed."""
        confirmed = self._state.remote_ids
        return [task for task in self._items() if task.id not in confirmed]

    def confirm_remote(self, task_ids: Iterable[str]) -> None:
        """Record that the remote store holds these tasks. Unknown ids are ignored."""
        task_ids = set(task_ids)

        def apply(state: TaskState) -> TaskState:
            known = {task.id for task in state.tasks} & task_ids
            if known <= state.remote_ids:
                return state
            return state.model_copy(update={"remote_ids": state.remote_ids | known})

        self.transact(apply)

    def complete(self, task_id: str, completed_at: Optional[datetime] = None) -> Optional[Task]:
        return self.update(
            task_id,
            {
                "status": TaskStatus.COMPLETED,
                "completed_at": completed_at or utc_now(),
            },
        )

    def skip(self, task_id: str, reason: Optional[str] = None) -> Optional[Task]:
        return self.update(
            task_id,
            {"status": TaskStatus.SKIPPED, "skipped_reason": reason},
        )

    def start(self, task_id: str) -> Optional[Task]:
        return self.update(task_id, {"status": TaskStatus.IN_PROGRESS})

    def mark_overdue(self, now: Optional[datetime] = None) -> list[Task]:
        """
        Flag open tasks whose scheduled window has ended as overdue.

        Args:
            now: Reference time (defaults to the current UTC time)

        Returns:
            Tasks that changed to overdue in this call
        """
        now = to_utc(now or utc_now())
        overdue_ids: set[str] = set()

        def apply(state: TaskState) -> TaskState:
            overdue_ids.clear()
            items = []
            for task in state.tasks:
                window_end = to_utc(task.scheduled_at) + timedelta(minutes=task.duration_minutes)
                if task.status in OPEN_STATUSES and window_end < now:
                    task = task.model_copy(update={"status": TaskStatus.OVERDUE})
                    overdue_ids.add(task.id)
                items.append(task)
            if not overdue_ids:
                return state
            return self._with_items(state, items)

        state = self.transact(apply)
        return [task for task in state.tasks if task.id in overdue_ids]
