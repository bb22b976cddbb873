"""Sync router - trigger and observe reconciliation with the remote store."""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from plansync.container import Container
from plansync.dependencies import get_container
from plansync.models.sync import SyncResult, SyncState


router = APIRouter(prefix="/sync", tags=["sync"])


@router.post("", response_model=SyncResult)
async def sync_all(
    day: Optional[date] = Query(None, alias="date", description="Task date to reconcile (default today)"),
    container: Container = Depends(get_container),
):
    """
    Run a full sync: objectives first, then the day's tasks.

    - Returns success=false with an error when not signed in or a list fetch fails
    - Per-item failures are logged and do not fail the run
    """
    return await container.sync_engine.sync_all(task_date=day)


@router.get("/state", response_model=SyncState)
async def get_sync_state(container: Container = Depends(get_container)):
    """Last observed sync state."""
    return container.sync_engine.get_state()
