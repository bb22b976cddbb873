"""Settings router - user preferences."""
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from plansync.container import Container
from plansync.dependencies import get_container
from plansync.models.settings import NotificationPreferenceUpdate, UserSettings


router = APIRouter(prefix="/settings", tags=["settings"])


class TimezoneUpdate(BaseModel):
    timezone: str


@router.get("", response_model=UserSettings)
async def get_settings(container: Container = Depends(get_container)):
    return container.settings_store.state


@router.patch("/notifications", response_model=UserSettings)
async def update_notifications(
    update: NotificationPreferenceUpdate,
    container: Container = Depends(get_container),
):
    """Change only the notification fields present in the body."""
    return container.settings_store.update_notification_preference(update)


@router.put("/timezone", response_model=UserSettings)
async def set_timezone(update: TimezoneUpdate, container: Container = Depends(get_container)):
    return container.settings_store.set_timezone(update.timezone)


@router.post("/onboarding", response_model=UserSettings)
async def complete_onboarding(container: Container = Depends(get_container)):
    return container.settings_store.complete_onboarding()
