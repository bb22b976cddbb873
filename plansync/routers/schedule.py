"""Schedule router - API endpoints for time blocks."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from plansync.container import Container
from plansync.dependencies import get_container
from plansync.models.schedule import TimeBlock, TimeBlockDraft, TimeBlockUpdate


router = APIRouter(prefix="/schedule", tags=["schedule"])


@router.get("", response_model=list[TimeBlock])
async def list_blocks(
    weekday: Optional[int] = Query(None, ge=0, le=6, description="0 = Sunday"),
    container: Container = Depends(get_container),
):
    """List time blocks, optionally only those applying to one weekday."""
    if weekday is None:
        return container.schedule_store.list()
    return container.schedule_store.for_weekday(weekday)


@router.get("/available/{weekday}")
async def available_minutes(weekday: int, container: Container = Depends(get_container)):
    """Minutes marked available on a weekday."""
    if not 0 <= weekday <= 6:
        raise HTTPException(status_code=400, detail="Weekday must be between 0 and 6")
    return {"weekday": weekday, "minutes": container.schedule_service.available_minutes(weekday)}


@router.post("", response_model=TimeBlock, status_code=status.HTTP_201_CREATED)
async def add_block(block: TimeBlockDraft, container: Container = Depends(get_container)):
    """
    Add a time block.

    - Returns 400 if the block ends before it starts
    """
    try:
        return container.schedule_service.add_block(block)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/{block_id}", response_model=TimeBlock)
async def update_block(
    block_id: str,
    block_update: TimeBlockUpdate,
    container: Container = Depends(get_container),
):
    """Update a time block."""
    try:
        return container.schedule_service.update_block(block_id, block_update)
    except ValueError as e:
        if "not found" in str(e):
            raise HTTPException(status_code=404, detail=str(e))
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{block_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_block(block_id: str, container: Container = Depends(get_container)):
    """Remove a time block."""
    try:
        container.schedule_service.remove_block(block_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
