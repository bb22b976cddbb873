"""Schedule (time block) model definitions."""
import re
from enum import Enum
from typing import Optional

from pydantic import field_validator

from plansync.models.base import CamelModel, Entity

_HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _validate_hhmm(value: Optional[str]) -> Optional[str]:
    if value is not None and not _HHMM.match(value):
        raise ValueError("time must be in HH:mm format")
    return value


def _validate_days(value: Optional[list[int]]) -> Optional[list[int]]:
    if value is not None and any(day < 0 or day > 6 for day in value):
        raise ValueError("recurring days must be between 0 (Sunday) and 6")
    return value


class TimeBlockType(str, Enum):
    """Kinds of daily schedule blocks."""

    AVAILABLE = "available"
    WORK = "work"
    SLEEP = "sleep"
    PERSONAL = "personal"
    BLOCKED = "blocked"


class TimeBlockBase(CamelModel):
    """Base time block fields."""

    start_time: str  # HH:mm
    end_time: str
    type: TimeBlockType = TimeBlockType.AVAILABLE
    is_recurring: bool = False
    recurring_days: Optional[list[int]] = None  # 0-6, Sunday = 0

    @field_validator("start_time", "end_time")
    @classmethod
    def check_times(cls, value):
        return _validate_hhmm(value)

    @field_validator("recurring_days")
    @classmethod
    def check_days(cls, value):
        return _validate_days(value)


class TimeBlockDraft(TimeBlockBase):
    """Time block creation model."""

    pass


class TimeBlock(TimeBlockBase, Entity):
    """A block in the user's daily schedule."""

    pass


class TimeBlockUpdate(CamelModel):
    """Time block update model - all fields optional."""

    start_time: Optional[str] = None
    end_time: Optional[str] = None
    type: Optional[TimeBlockType] = None
    is_recurring: Optional[bool] = None
    recurring_days: Optional[list[int]] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def check_times(cls, value):
        return _validate_hhmm(value)

    @field_validator("recurring_days")
    @classmethod
    def check_days(cls, value):
        return _validate_days(value)
