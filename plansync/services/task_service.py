"""Task service - business logic for task management."""
import logging
from datetime import date, datetime
from typing import Callable, Optional

from plansync.models.status import Deviation
from plansync.models.task import Task, TaskDraft, TaskStatus
from plansync.services.status_engine import StatusEngine
from plansync.store.objectives import ObjectiveStore
from plansync.store.tasks import TaskStore
from plansync.utils.dates import utc_now
from plansync.utils.ids import generate_id

logger = logging.getLogger(__name__)


class TaskService:
    """Service for handling task operations."""

    def __init__(
        self,
        tasks: TaskStore,
        objectives: ObjectiveStore,
        status_engine: StatusEngine,
        clock: Callable = utc_now,
    ):
        """Initialize service with the stores it reads and writes."""
        self.tasks = tasks
        self.objectives = objectives
        self.status_engine = status_engine
        self._clock = clock

    def create_task(self, draft: TaskDraft) -> Task:
        """
        Create a new pending task.

        Args:
            draft: Task creation data

        Returns:
            Created task object

        Raises:
            ValueError: If the objective doesn't exist
        """
        if self.objectives.get(draft.objective_id) is None:
            raise ValueError("Objective not found")

        task = Task(id=generate_id(), status=TaskStatus.PENDING, **draft.model_dump())
        return self.tasks.add(task)

    def list_tasks(
        self,
        day: Optional[date] = None,
        objective_id: Optional[str] = None,
    ) -> list[Task]:
        """
        List tasks with optional filtering.

        Args:
            day: Optional scheduled date filter
            objective_id: Optional objective filter

        Returns:
            Tasks ordered by scheduled time
        """
        tasks = self.tasks.by_date(day) if day else self.tasks.list()
        if objective_id:
            tasks = [t for t in tasks if t.objective_id == objective_id]
        return sorted(tasks, key=lambda t: t.scheduled_at)

    def get_task(self, task_id: str) -> Task:
        """
        Get a single task by id.

        Raises:
            ValueError: If task not found
        """
        task = self.tasks.get(task_id)
        if task is None:
            raise ValueError("Task not found")
        return task

    def start_task(self, task_id: str) -> Task:
        """
        Mark a task in progress.

        Raises:
            ValueError: If task not found
        """
        task = self.tasks.start(task_id)
        if task is None:
            raise ValueError("Task not found")
        return task

    def complete_task(self, task_id: str) -> Task:
        """
        Mark a task completed now.

        Raises:
            ValueError: If task not found
        """
        task = self.tasks.complete(task_id, self._clock())
        if task is None:
            raise ValueError("Task not found")
        return task

    def skip_task(self, task_id: str, reason: Optional[str] = None) -> Task:
        """
        Skip a task, optionally recording why.

        Raises:
            ValueError: If task not found
        """
        task = self.tasks.skip(task_id, reason)
        if task is None:
            raise ValueError("Task not found")
        return task

    def check_overdue(self, now: Optional[datetime] = None) -> list[Deviation]:
        """
        Mark tasks whose window has passed as overdue and record them as missed.

        Returns:
            Deviations created by this check
        """
        overdue = self.tasks.mark_overdue(now or self._clock())
        if overdue:
            logger.info("%d task(s) became overdue", len(overdue))
        return self.status_engine.record_missed(overdue)
