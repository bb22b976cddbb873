"""Schedule store."""
from pydantic import BaseModel

from plansync.models.schedule import TimeBlock
from plansync.store.base import EntityRepository


class ScheduleState(BaseModel):
    """Snapshot persisted under the ``schedule`` key."""

    model_config = {"frozen": True}

    time_blocks: tuple[TimeBlock, ...] = ()


class ScheduleStore(EntityRepository[ScheduleState, TimeBlock]):
    """The user's time blocks."""

    key = "schedule"
    state_model = ScheduleState
    collection = "time_blocks"
    entity_name = "Time block"

    def for_weekday(self, weekday: int) -> list[TimeBlock]:
        """
        Blocks that apply on ``weekday`` (0 = Sunday).

        Non-recurring blocks and recurring blocks without explicit days
        apply every day.
        """
        return sorted(
            (
                block
                for block in self._items()
                if not block.is_recurring
                or block.recurring_days is None
                or weekday in block.recurring_days
            ),
            key=lambda block: block.start_time,
        )
