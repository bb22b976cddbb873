"""User preference models stored on the device."""
from typing import Optional

from pydantic import Field

from plansync.models.base import CamelModel


class NotificationPreference(CamelModel):
    """Push notification configuration."""

    model_config = {"frozen": True}

    enabled: bool = True
    advance_minutes: int = Field(default=5, ge=0)  # minutes before a task
    escalation: bool = True  # follow up when a task is missed
    quiet_hours_start: Optional[str] = None  # HH:mm
    quiet_hours_end: Optional[str] = None


class NotificationPreferenceUpdate(CamelModel):
    """Partial notification preference change."""

    enabled: Optional[bool] = None
    advance_minutes: Optional[int] = Field(default=None, ge=0)
    escalation: Optional[bool] = None
    quiet_hours_start: Optional[str] = None
    quiet_hours_end: Optional[str] = None


class UserSettings(CamelModel):
    """App-wide settings snapshot."""

    model_config = {"frozen": True}

    notification_preference: NotificationPreference = Field(
        default_factory=NotificationPreference
    )
    timezone: str = "UTC"
    onboarding_completed: bool = False
