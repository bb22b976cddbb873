"""Task router - API endpoints for task management."""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from plansync.container import Container
from plansync.dependencies import get_container
from plansync.models.status import Deviation
from plansync.models.task import SkipRequest, Task, TaskDraft


router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.post("", response_model=Task, status_code=status.HTTP_201_CREATED)
async def create_task(task: TaskDraft, container: Container = Depends(get_container)):
    """
    Create a new task.

    - Starts as pending
    - Returns 404 if the objective doesn't exist
    """
    try:
        return container.task_service.create_task(task)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("", response_model=list[Task])
async def list_tasks(
    day: Optional[date] = Query(None, alias="date", description="Filter by scheduled date"),
    objective_id: Optional[str] = Query(None, alias="objectiveId", description="Filter by objective"),
    container: Container = Depends(get_container),
):
    """List tasks ordered by scheduled time."""
    return container.task_service.list_tasks(day=day, objective_id=objective_id)


@router.post("/check-overdue", response_model=list[Deviation])
async def check_overdue(container: Container = Depends(get_container)):
    """
    Flag tasks whose window has passed.

    - Open tasks past their end become overdue
    - Each newly overdue task is recorded as a missed deviation
    """
    return container.task_service.check_overdue()


@router.get("/{task_id}", response_model=Task)
async def get_task(task_id: str, container: Container = Depends(get_container)):
    """Get a single task by id."""
    try:
        return container.task_service.get_task(task_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{task_id}/start", response_model=Task)
async def start_task(task_id: str, container: Container = Depends(get_container)):
    """Mark a task in progress."""
    try:
        return container.task_service.start_task(task_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{task_id}/complete", response_model=Task)
async def complete_task(task_id: str, container: Container = Depends(get_container)):
    """
    Complete a task.

    - Sets completedAt to now
    - Returns 404 if task not found
    """
    try:
        return container.task_service.complete_task(task_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{task_id}/skip", response_model=Task)
async def skip_task(
    task_id: str,
    skip: Optional[SkipRequest] = None,
    container: Container = Depends(get_container),
):
    """
    Skip a task.

    - Optional body: {"reason": "..."}
    - Returns 404 if task not found
    """
    try:
        return container.task_service.skip_task(task_id, skip.reason if skip else None)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
