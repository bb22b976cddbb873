"""Objective model definitions."""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from plansync.models.base import CamelModel, Entity


class ObjectiveCategory(str, Enum):
    """Objective function categories."""

    FITNESS = "fitness"
    CAREER = "career"
    ACADEMIC = "academic"
    HEALTH = "health"
    FINANCIAL = "financial"
    CREATIVE = "creative"
    CUSTOM = "custom"


class TimeFrame(CamelModel):
    """When the objective runs and how much time it gets per day."""

    model_config = {"frozen": True}

    start_date: datetime
    end_date: Optional[datetime] = None
    daily_commitment_minutes: int = Field(default=60, gt=0)


class Pillar(Entity):
    """A focus area of an objective."""

    name: str
    description: str = ""
    weight: float = 1.0
    progress: float = 0.0


class MetricReading(CamelModel):
    """A single recorded metric value."""

    model_config = {"frozen": True}

    value: float
    recorded_at: datetime


class Metric(Entity):
    """Measurable signal tracked for an objective."""

    name: str
    unit: str = ""
    type: str = "number"
    target: Optional[float] = None
    target_direction: str = "increase"
    current: Optional[float] = None
    history: list[MetricReading] = Field(default_factory=list)
    source: str = "manual"
    pillar_id: Optional[str] = None


class Ritual(Entity):
    """Recurring practice that feeds an objective."""

    name: str
    description: str = ""
    frequency: str = "daily"
    days_of_week: Optional[list[int]] = None
    times_per_period: Optional[int] = None
    current_streak: int = 0
    longest_streak: int = 0
    completions_this_period: int = 0
    completion_history: list[datetime] = Field(default_factory=list)
    pillar_id: Optional[str] = None
    estimated_minutes: Optional[int] = None


class Objective(Entity):
    """Root aggregate of the plan."""

    name: str
    category: ObjectiveCategory = ObjectiveCategory.CUSTOM
    description: str = ""
    target_outcome: str = ""
    timeframe: TimeFrame
    priority: int = Field(default=1, ge=1, le=5)
    pillars: list[Pillar] = Field(default_factory=list)
    metrics: list[Metric] = Field(default_factory=list)
    rituals: list[Ritual] = Field(default_factory=list)
    status: str = "active"
    is_paused: bool = False
    created_at: datetime
    updated_at: datetime


class PillarDraft(CamelModel):
    """Pillar fields supplied by the user, before an id is assigned."""

    name: str
    description: str = ""
    weight: float = 1.0
    progress: float = 0.0


class MetricDraft(CamelModel):
    """Metric fields supplied by the user."""

    name: str
    unit: str = ""
    type: str = "number"
    target: Optional[float] = None
    target_direction: str = "increase"
    current: Optional[float] = None
    source: str = "manual"
    pillar_id: Optional[str] = None


class RitualDraft(CamelModel):
    """Ritual fields supplied by the user."""

    name: str
    description: str = ""
    frequency: str = "daily"
    days_of_week: Optional[list[int]] = None
    times_per_period: Optional[int] = None
    estimated_minutes: Optional[int] = None
    pillar_id: Optional[str] = None


class ObjectiveDraft(CamelModel):
    """Objective creation model."""

    name: str
    category: ObjectiveCategory = ObjectiveCategory.CUSTOM
    description: str = ""
    target_outcome: str = ""
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    daily_commitment_minutes: int = Field(default=60, gt=0)
    priority: int = Field(default=1, ge=1, le=5)
    pillars: list[PillarDraft] = Field(default_factory=list)
    metrics: list[MetricDraft] = Field(default_factory=list)
    rituals: list[RitualDraft] = Field(default_factory=list)


class ObjectiveUpdate(CamelModel):
    """Objective update model - all fields optional."""

    name: Optional[str] = None
    category: Optional[ObjectiveCategory] = None
    description: Optional[str] = None
    target_outcome: Optional[str] = None
    timeframe: Optional[TimeFrame] = None
    priority: Optional[int] = Field(default=None, ge=1, le=5)
    status: Optional[str] = None
    is_paused: Optional[bool] = None


# Remote wire shapes


class ObjectiveSummary(CamelModel):
    """Objective as returned by the remote list endpoint (no nested entities)."""

    id: str
    name: str
    category: Optional[str] = None
    status: Optional[str] = None


class ObjectiveDetail(CamelModel):
    """Objective as returned by the remote detail endpoint."""

    id: str
    name: str
    category: ObjectiveCategory = ObjectiveCategory.CUSTOM
    description: Optional[str] = None
    target_outcome: Optional[str] = None
    start_date: datetime
    end_date: Optional[datetime] = None
    daily_commitment_minutes: Optional[int] = None
    priority: Optional[int] = None
    status: Optional[str] = None
    is_paused: Optional[bool] = None
    pillars: Optional[list[Pillar]] = None
    metrics: Optional[list[Metric]] = None
    rituals: Optional[list[Ritual]] = None
    created_at: datetime
    updated_at: datetime


class ObjectiveCreate(CamelModel):
    """Payload for the remote create operation. Carries the local id."""

    id: str
    name: str
    category: ObjectiveCategory
    description: str
    target_outcome: str
    end_date: Optional[datetime] = None
    daily_commitment_minutes: int
    pillars: list[Pillar]
    metrics: list[Metric]
    rituals: list[Ritual]
