"""Execution status, deviation and daily snapshot models."""
import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import Field

from plansync.models.base import CamelModel, Entity


class ObjectiveStatus(str, Enum):
    """Execution health of the plan."""

    ON_TRACK = "on_track"
    DEVIATION_DETECTED = "deviation_detected"
    RECALIBRATING = "recalibrating"
    PAUSED = "paused"


class DeviationType(str, Enum):
    """Ways a task outcome can depart from the plan."""

    MISSED = "missed"
    DELAYED = "delayed"
    PARTIAL = "partial"
    CANCELLED = "cancelled"


class Deviation(Entity):
    """A recorded departure from planned execution, tied to one task."""

    task_id: str
    type: DeviationType
    detected_at: dt.datetime
    resolved_at: Optional[dt.datetime] = None
    ai_suggestion: Optional[str] = None

    @property
    def is_resolved(self) -> bool:
        return self.resolved_at is not None


class DeviationDraft(CamelModel):
    """Deviation creation model."""

    task_id: str
    type: DeviationType
    ai_suggestion: Optional[str] = None


class DailyStatus(CamelModel):
    """Daily execution summary for one objective. Append-only."""

    model_config = {"frozen": True}

    date: dt.date
    objective_id: str
    status: ObjectiveStatus
    completed_tasks: int = 0
    total_tasks: int = 0
    deviations: list[Deviation] = Field(default_factory=list)
    notes: Optional[str] = None


class StatusOverride(CamelModel):
    """Manual status change request."""

    status: ObjectiveStatus


class StatusReport(CamelModel):
    """Current status with the deviations that produced it."""

    status: ObjectiveStatus
    unresolved_deviations: list[Deviation]
    today: Optional[DailyStatus] = None


class DailySnapshotRequest(CamelModel):
    """Request to append a daily summary for an objective."""

    objective_id: str
    date: Optional[dt.date] = None
    notes: Optional[str] = None
