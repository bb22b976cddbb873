"""Mapping between local entities and the remote store's wire shapes."""
from typing import Any

from pydantic import ValidationError

from plansync.exceptions import MappingError
from plansync.models.objective import (
    Objective,
    ObjectiveCreate,
    ObjectiveDetail,
    ObjectiveSummary,
    TimeFrame,
)
from plansync.models.task import Task, TaskCreate, TaskStatusUpdate, TaskSummary
from plansync.utils.dates import same_instant

DEFAULT_DAILY_COMMITMENT_MINUTES = 60


def wire_id(raw: Any) -> str:
    """Id of a raw remote payload, or a placeholder when it has none."""
    if isinstance(raw, dict) and isinstance(raw.get("id"), str):
        return raw["id"]
    return "<unknown>"


def objective_summary_from_wire(raw: Any) -> ObjectiveSummary:
    """
    Validate one item of the remote objective list.

    Raises:
        MappingError: If the item is malformed
    """
    try:
        return ObjectiveSummary.model_validate(raw)
    except ValidationError as e:
        raise MappingError("objective", wire_id(raw), e) from e


def task_summary_from_wire(raw: Any) -> TaskSummary:
    """
    Validate one item of the remote task list.

    Raises:
        MappingError: If the item is malformed
    """
    try:
        return TaskSummary.model_validate(raw)
    except ValidationError as e:
        raise MappingError("task", wire_id(raw), e) from e


def objective_to_create(objective: Objective) -> ObjectiveCreate:
    """Build the remote create payload for a local objective."""
    return ObjectiveCreate(
        id=objective.id,
        name=objective.name,
        category=objective.category,
        description=objective.description,
        target_outcome=objective.target_outcome,
        end_date=objective.timeframe.end_date,
        daily_commitment_minutes=objective.timeframe.daily_commitment_minutes,
        pillars=objective.pillars,
        metrics=[metric.model_copy(update={"history": []}) for metric in objective.metrics],
        rituals=objective.rituals,
    )


def objective_from_detail(raw: Any) -> Objective:
    """
    Map a remote objective detail payload into a local Objective.

    Metric history and ritual completion tracking are device-local and
    start empty for downloaded objectives.

    Raises:
        MappingError: If the payload is malformed
    """
    try:
        detail = ObjectiveDetail.model_validate(raw)
        return Objective(
            id=detail.id,
            name=detail.name,
            category=detail.category,
            description=detail.description or "",
            target_outcome=detail.target_outcome or "",
            timeframe=TimeFrame(
                start_date=detail.start_date,
                end_date=detail.end_date,
                daily_commitment_minutes=(
                    detail.daily_commitment_minutes or DEFAULT_DAILY_COMMITMENT_MINUTES
                ),
            ),
            priority=detail.priority or 1,
            pillars=detail.pillars or [],
            metrics=[m.model_copy(update={"history": []}) for m in detail.metrics or []],
            rituals=[
                r.model_copy(update={"completions_this_period": 0, "completion_history": []})
                for r in detail.rituals or []
            ],
            status=detail.status or "active",
            is_paused=detail.is_paused or False,
            created_at=detail.created_at,
            updated_at=detail.updated_at,
        )
    except ValidationError as e:
        raise MappingError("objective", wire_id(raw), e) from e


def task_to_create(task: Task) -> TaskCreate:
    """Build the remote create payload for a local task."""
    return TaskCreate(
        id=task.id,
        objective_id=task.objective_id,
        pillar_id=task.pillar_id,
        ritual_id=task.ritual_id,
        title=task.title,
        description=task.description,
        why_it_matters=task.why_it_matters,
        scheduled_at=task.scheduled_at,
        duration_minutes=task.duration_minutes,
    )


def task_from_summary(summary: TaskSummary) -> Task:
    """
    Map a remote task into a local Task.

    Raises:
        MappingError: If the summary does not form a valid Task
    """
    try:
        return Task.model_validate(summary.model_dump())
    except ValidationError as e:
        raise MappingError("task", summary.id, e) from e


def task_status_payload(task: Task) -> TaskStatusUpdate:
    """Local status fields, as pushed to the remote."""
    return TaskStatusUpdate(
        status=task.status,
        completed_at=task.completed_at,
        skipped_reason=task.skipped_reason,
    )


def status_differs(local: Task, remote: TaskSummary) -> bool:
    """True when any mutable status field differs between the two sides."""
    return (
        local.status != remote.status
        or local.skipped_reason != remote.skipped_reason
        or not same_instant(local.completed_at, remote.completed_at)
    )
