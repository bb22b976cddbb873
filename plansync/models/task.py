"""Task model definitions."""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from plansync.models.base import CamelModel, Entity


class TaskStatus(str, Enum):
    """Task execution states."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    SKIPPED = "skipped"
    OVERDUE = "overdue"


class TaskBase(CamelModel):
    """Base task fields."""

    objective_id: str
    pillar_id: Optional[str] = None
    ritual_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    why_it_matters: Optional[str] = None
    scheduled_at: datetime
    duration_minutes: int = Field(gt=0)


class TaskDraft(TaskBase):
    """Task creation model."""

    pass


class Task(TaskBase, Entity):
    """Actionable task derived from an objective."""

    status: TaskStatus = TaskStatus.PENDING
    completed_at: Optional[datetime] = None
    skipped_reason: Optional[str] = None


class TaskUpdate(CamelModel):
    """Task update model - all fields optional."""

    title: Optional[str] = None
    description: Optional[str] = None
    why_it_matters: Optional[str] = None
    scheduled_at: Optional[datetime] = None
    duration_minutes: Optional[int] = Field(default=None, gt=0)
    status: Optional[TaskStatus] = None
    completed_at: Optional[datetime] = None
    skipped_reason: Optional[str] = None


class SkipRequest(CamelModel):
    """Reason given when skipping a task."""

    reason: Optional[str] = None


# Remote wire shapes


class TaskSummary(TaskBase):
    """Task as returned by the remote list endpoint."""

    id: str
    status: TaskStatus = TaskStatus.PENDING
    completed_at: Optional[datetime] = None
    skipped_reason: Optional[str] = None


class TaskCreate(TaskBase):
    """Payload for the remote create operation. Carries the local id."""

    id: str


class TaskStatusUpdate(CamelModel):
    """Payload pushing local status fields to the remote store."""

    status: TaskStatus
    completed_at: Optional[datetime] = None
    skipped_reason: Optional[str] = None
