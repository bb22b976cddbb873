"""Status engine - derives execution health from deviations.

Status is recomputed by ``derive_status`` after every deviation event. A
manual status set through ``set_current_status`` holds only until the next
deviation event, which recomputes without it.
"""
import logging
from collections.abc import Iterable
from datetime import date
from typing import Callable, Optional

from plansync.models.status import (
    DailyStatus,
    Deviation,
    DeviationDraft,
    DeviationType,
    ObjectiveStatus,
)
from plansync.models.task import Task, TaskStatus
from plansync.store.status import StatusState, StatusStore
from plansync.utils.dates import utc_date, utc_now
from plansync.utils.ids import generate_id

logger = logging.getLogger(__name__)


def derive_status(
    deviations: Iterable[Deviation],
    manual_override: Optional[ObjectiveStatus] = None,
) -> ObjectiveStatus:
    """
    Compute the execution status.

    Args:
        deviations: All recorded deviations
        manual_override: Status set by hand, returned as-is when given

    Returns:
        ``deviation_detected`` while any deviation is unresolved, otherwise
        ``on_track``

    Examples:
        >>> derive_status([])
        <ObjectiveStatus.ON_TRACK: 'on_track'>
        >>> derive_status([], ObjectiveStatus.PAUSED)
        <ObjectiveStatus.PAUSED: 'paused'>
    """
    if manual_override is not None:
        return manual_override
    if any(deviation.resolved_at is None for deviation in deviations):
        return ObjectiveStatus.DEVIATION_DETECTED
    return ObjectiveStatus.ON_TRACK


class StatusEngine:
    """Applies deviation events and status overrides to the status store."""

    def __init__(self, store: StatusStore, clock: Callable = utc_now):
        self.store = store
        self._clock = clock

    @property
    def current_status(self) -> ObjectiveStatus:
        return self.store.current_status

    def unresolved_deviations(self) -> list[Deviation]:
        return self.store.unresolved_deviations()

    def _recompute(self, state: StatusState, deviations: tuple[Deviation, ...]) -> StatusState:
        # Deviation events drop any manual override
        return state.model_copy(
            update={
                "deviations": deviations,
                "manual_override": None,
                "current_status": derive_status(deviations),
            }
        )

    def add_deviation(self, deviation: Deviation) -> Deviation:
        """
        Record a deviation. Status becomes ``deviation_detected`` whatever it was.

        Raises:
            ValueError: If a deviation with the same id exists
        """

        def apply(state: StatusState) -> StatusState:
            if any(d.id == deviation.id for d in state.deviations):
                raise ValueError(f"Deviation {deviation.id} already exists")
            return self._recompute(state, (*state.deviations, deviation))

        self.store.transact(apply)
        logger.info(
            "Deviation %s recorded for task %s (%s)",
            deviation.id,
            deviation.task_id,
            deviation.type.value,
        )
        return deviation

    def report_deviation(self, draft: DeviationDraft) -> Deviation:
        """Create a deviation with a fresh id and detection time, then record it."""
        deviation = Deviation(
            id=generate_id(),
            task_id=draft.task_id,
            type=draft.type,
            detected_at=self._clock(),
            ai_suggestion=draft.ai_suggestion,
        )
        return self.add_deviation(deviation)

    def resolve_deviation(self, deviation_id: str) -> Optional[Deviation]:
        """
        Mark a deviation resolved and recompute the status.

        Resolving an already resolved deviation refreshes ``resolved_at``.
        An unknown id changes no deviation but still triggers the recompute.

        Returns:
            The resolved deviation, or None if the id is unknown
        """
        resolved: Optional[Deviation] = None
        now = self._clock()

        def apply(state: StatusState) -> StatusState:
            nonlocal resolved
            deviations = []
            for deviation in state.deviations:
                if deviation.id == deviation_id:
                    deviation = deviation.model_copy(update={"resolved_at": now})
                    resolved = deviation
                deviations.append(deviation)
            return self._recompute(state, tuple(deviations))

        self.store.transact(apply)
        return resolved

    def set_current_status(self, status: ObjectiveStatus) -> ObjectiveStatus:
        """Manually set the status (e.g. ``paused`` or ``recalibrating``)."""
        self.store.transact(
            lambda state: state.model_copy(
                update={
                    "manual_override": status,
                    "current_status": derive_status(state.deviations, status),
                }
            )
        )
        return status

    def record_missed(self, tasks: Iterable[Task]) -> list[Deviation]:
        """
        Add a ``missed`` deviation for each task that has none yet.

        Typically fed with the result of ``TaskStore.mark_overdue``.
        """
        tracked = {d.task_id for d in self.store.deviations()}
        created = []
        for task in tasks:
            if task.id in tracked:
                continue
            created.append(
                self.add_deviation(
                    Deviation(
                        id=generate_id(),
                        task_id=task.id,
                        type=DeviationType.MISSED,
                        detected_at=self._clock(),
                    )
                )
            )
            tracked.add(task.id)
        return created

    def snapshot_day(
        self,
        objective_id: str,
        tasks: Iterable[Task],
        day: Optional[date] = None,
        notes: Optional[str] = None,
    ) -> DailyStatus:
        """
        Append a daily summary for one objective.

        Args:
            objective_id: Objective the summary is for
            tasks: Candidate tasks; only the objective's tasks scheduled on ``day`` count
            day: Summary date (defaults to today, UTC)
            notes: Optional free-form notes

        Returns:
            The appended DailyStatus
        """
        day = day or utc_date(self._clock())
        day_tasks = [
            t for t in tasks if t.objective_id == objective_id and utc_date(t.scheduled_at) == day
        ]
        task_ids = {t.id for t in day_tasks}
        status = DailyStatus(
            date=day,
            objective_id=objective_id,
            status=self.current_status,
            completed_tasks=sum(1 for t in day_tasks if t.status == TaskStatus.COMPLETED),
            total_tasks=len(day_tasks),
            deviations=[d for d in self.store.deviations() if d.task_id in task_ids],
            notes=notes,
        )
        return self.store.add_daily_status(status)

    def today_status(self) -> Optional[DailyStatus]:
        return self.store.status_for(utc_date(self._clock()))
