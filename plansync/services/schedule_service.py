"""Schedule service - business logic for time blocks."""
from plansync.models.schedule import TimeBlock, TimeBlockDraft, TimeBlockType, TimeBlockUpdate
from plansync.store.schedule import ScheduleStore
from plansync.utils.ids import generate_id


def _minutes(hhmm: str) -> int:
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


class ScheduleService:
    """Service for handling time block operations."""

    def __init__(self, store: ScheduleStore):
        """Initialize service with the schedule store."""
        self.store = store

    def _check_range(self, start_time: str, end_time: str) -> None:
        if _minutes(end_time) <= _minutes(start_time):
            raise ValueError("End time must be after start time")

    def add_block(self, draft: TimeBlockDraft) -> TimeBlock:
        """
        Add a time block.

        Raises:
            ValueError: If the block ends before it starts
        """
        self._check_range(draft.start_time, draft.end_time)
        return self.store.add(TimeBlock(id=generate_id(), **draft.model_dump()))

    def update_block(self, block_id: str, update: TimeBlockUpdate) -> TimeBlock:
        """
        Update a time block.

        Raises:
            ValueError: If the block is not found or the new range is invalid
        """
        existing = self.store.get(block_id)
        if existing is None:
            raise ValueError("Time block not found")
        self._check_range(
            update.start_time or existing.start_time,
            update.end_time or existing.end_time,
        )
        return self.store.update(block_id, update)

    def remove_block(self, block_id: str) -> None:
        """
        Remove a time block.

        Raises:
            ValueError: If the block is not found
        """
        if not self.store.remove(block_id):
            raise ValueError("Time block not found")

    def available_minutes(self, weekday: int) -> int:
        """Total minutes of ``available`` blocks on ``weekday`` (0 = Sunday)."""
        return sum(
            _minutes(block.end_time) - _minutes(block.start_time)
            for block in self.store.for_weekday(weekday)
            if block.type == TimeBlockType.AVAILABLE
        )
