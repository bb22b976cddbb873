"""Status router - execution status and deviations."""
from fastapi import APIRouter, Depends, HTTPException, status

from plansync.container import Container
from plansync.dependencies import get_container
from plansync.models.status import (
    DailySnapshotRequest,
    DailyStatus,
    Deviation,
    DeviationDraft,
    StatusOverride,
    StatusReport,
)


router = APIRouter(prefix="/status", tags=["status"])


@router.get("", response_model=StatusReport)
async def get_status(container: Container = Depends(get_container)):
    """Current status, unresolved deviations and today's snapshot if recorded."""
    engine = container.status_engine
    return StatusReport(
        status=engine.current_status,
        unresolved_deviations=engine.unresolved_deviations(),
        today=engine.today_status(),
    )


@router.put("", response_model=StatusReport)
async def set_status(override: StatusOverride, container: Container = Depends(get_container)):
    """
    Set the status by hand.

    - Holds until the next deviation is recorded or resolved
    """
    engine = container.status_engine
    engine.set_current_status(override.status)
    return StatusReport(
        status=engine.current_status,
        unresolved_deviations=engine.unresolved_deviations(),
        today=engine.today_status(),
    )


@router.get("/deviations", response_model=list[Deviation])
async def list_deviations(container: Container = Depends(get_container)):
    """List all deviations, resolved or not."""
    return container.status_store.deviations()


@router.post("/deviations", response_model=Deviation, status_code=status.HTTP_201_CREATED)
async def report_deviation(draft: DeviationDraft, container: Container = Depends(get_container)):
    """
    Record a deviation against a task.

    - Status becomes deviation_detected
    - Returns 404 if task not found
    """
    if container.task_store.get(draft.task_id) is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return container.status_engine.report_deviation(draft)


@router.post("/deviations/{deviation_id}/resolve", response_model=Deviation)
async def resolve_deviation(deviation_id: str, container: Container = Depends(get_container)):
    """
    Resolve a deviation.

    - Status returns to on_track once nothing is unresolved
    - Returns 404 if deviation not found
    """
    deviation = container.status_engine.resolve_deviation(deviation_id)
    if deviation is None:
        raise HTTPException(status_code=404, detail="Deviation not found")
    return deviation


@router.get("/daily", response_model=list[DailyStatus])
async def list_daily_statuses(container: Container = Depends(get_container)):
    """List recorded daily summaries, oldest first."""
    return container.status_store.daily_statuses()


@router.post("/daily", response_model=DailyStatus, status_code=status.HTTP_201_CREATED)
async def snapshot_day(request: DailySnapshotRequest, container: Container = Depends(get_container)):
    """
    Record a daily summary for an objective.

    - Counts the objective's tasks scheduled on the given date (default today)
    - Returns 404 if objective not found
    """
    if container.objective_store.get(request.objective_id) is None:
        raise HTTPException(status_code=404, detail="Objective not found")
    return container.status_engine.snapshot_day(
        request.objective_id,
        container.task_store.list(),
        day=request.date,
        notes=request.notes,
    )
