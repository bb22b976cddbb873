"""Objective router - API endpoints for objective management."""
from fastapi import APIRouter, Depends, HTTPException, status

from plansync.container import Container
from plansync.dependencies import get_container
from plansync.models.objective import Objective, ObjectiveDraft, ObjectiveUpdate


router = APIRouter(prefix="/objectives", tags=["objectives"])


@router.post("", response_model=Objective, status_code=status.HTTP_201_CREATED)
async def create_objective(
    objective: ObjectiveDraft,
    container: Container = Depends(get_container),
):
    """
    Create a new objective.

    - Assigns local ids to the objective and its pillars, metrics and rituals
    - Becomes the active objective if none is active
    - Reaches the remote store on the next sync
    """
    return container.objective_service.create_objective(objective)


@router.get("", response_model=list[Objective])
async def list_objectives(container: Container = Depends(get_container)):
    """List all local objectives."""
    return container.objective_service.list_objectives()


@router.get("/active", response_model=Objective)
async def get_active_objective(container: Container = Depends(get_container)):
    """
    Get the objective currently in focus.

    - Returns 404 if there are no objectives
    """
    try:
        return container.objective_service.get_active()
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{objective_id}", response_model=Objective)
async def get_objective(objective_id: str, container: Container = Depends(get_container)):
    """Get a single objective by id."""
    try:
        return container.objective_service.get_objective(objective_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/{objective_id}", response_model=Objective)
async def update_objective(
    objective_id: str,
    objective_update: ObjectiveUpdate,
    container: Container = Depends(get_container),
):
    """
    Update an objective.

    - Only fields present in the body change
    - Returns 404 if objective not found
    """
    try:
        return container.objective_service.update_objective(objective_id, objective_update)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{objective_id}/activate", response_model=Objective)
async def activate_objective(objective_id: str, container: Container = Depends(get_container)):
    """Make an objective the active one."""
    try:
        container.objective_store.set_active(objective_id)
        return container.objective_service.get_active()
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
