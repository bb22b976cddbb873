"""Status store: deviations, daily snapshots and the current status."""
from datetime import date
from typing import Optional

from pydantic import BaseModel

from plansync.models.status import DailyStatus, Deviation, ObjectiveStatus
from plansync.store.base import SnapshotStore


class StatusState(BaseModel):
    """Snapshot persisted under the ``status`` key."""

    model_config = {"frozen": True}

    daily_statuses: tuple[DailyStatus, ...] = ()
    deviations: tuple[Deviation, ...] = ()
    current_status: ObjectiveStatus = ObjectiveStatus.ON_TRACK
    manual_override: Optional[ObjectiveStatus] = None


class StatusStore(SnapshotStore[StatusState]):
    """
    Raw status data.

    Status transitions belong to the status engine, which mutates this store
    through ``transact`` so a deviation change and the recomputed status land
    in the same commit.
    """

    key = "status"
    state_model = StatusState

    @property
    def current_status(self) -> ObjectiveStatus:
        return self.state.current_status

    def deviations(self) -> list[Deviation]:
        return list(self.state.deviations)

    def unresolved_deviations(self) -> list[Deviation]:
        return [d for d in self.state.deviations if d.resolved_at is None]

    def get_deviation(self, deviation_id: str) -> Optional[Deviation]:
        for deviation in self.state.deviations:
            if deviation.id == deviation_id:
                return deviation
        return None

    def daily_statuses(self) -> list[DailyStatus]:
        return list(self.state.daily_statuses)

    def add_daily_status(self, status: DailyStatus) -> DailyStatus:
        self.transact(
            lambda state: state.model_copy(
                update={"daily_statuses": (*state.daily_statuses, status)}
            )
        )
        return status

    def status_for(self, day: date) -> Optional[DailyStatus]:
        """Most recent snapshot recorded for ``day``."""
        for status in reversed(self.state.daily_statuses):
            if status.date == day:
                return status
        return None
