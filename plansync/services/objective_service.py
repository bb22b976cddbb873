"""Objective service - business logic for objective management."""
from typing import Callable, Optional

from plansync.models.objective import (
    Metric,
    Objective,
    ObjectiveDraft,
    ObjectiveUpdate,
    Pillar,
    Ritual,
    TimeFrame,
)
from plansync.store.objectives import ObjectiveStore
from plansync.utils.dates import utc_now
from plansync.utils.ids import generate_id


class ObjectiveService:
    """Service for handling objective operations."""

    def __init__(self, store: ObjectiveStore, clock: Callable = utc_now):
        """Initialize service with the objective store."""
        self.store = store
        self._clock = clock

    def create_objective(self, draft: ObjectiveDraft) -> Objective:
        """
        Create a new objective with locally generated ids.

        Pillars, metrics and rituals each get their own id. A metric or
        ritual may reference a pillar by its position in ``draft.pillars``
        (``pillar_id="0"``, ``"1"``...); such references are rewritten to the
        new pillar ids.

        Args:
            draft: Objective creation data

        Returns:
            Created objective object
        """
        now = self._clock()
        pillars = [Pillar(id=generate_id(), **p.model_dump()) for p in draft.pillars]

        def resolve_pillar(ref: Optional[str]) -> Optional[str]:
            if ref is not None and ref.isdigit() and int(ref) < len(pillars):
                return pillars[int(ref)].id
            return ref

        metrics = [
            Metric(
                id=generate_id(),
                **m.model_dump(exclude={"pillar_id"}),
                pillar_id=resolve_pillar(m.pillar_id),
            )
            for m in draft.metrics
        ]
        rituals = [
            Ritual(
                id=generate_id(),
                **r.model_dump(exclude={"pillar_id"}),
                pillar_id=resolve_pillar(r.pillar_id),
            )
            for r in draft.rituals
        ]

        objective = Objective(
            id=generate_id(),
            name=draft.name,
            category=draft.category,
            description=draft.description,
            target_outcome=draft.target_outcome,
            timeframe=TimeFrame(
                start_date=draft.start_date or now,
                end_date=draft.end_date,
                daily_commitment_minutes=draft.daily_commitment_minutes,
            ),
            priority=draft.priority,
            pillars=pillars,
            metrics=metrics,
            rituals=rituals,
            created_at=now,
            updated_at=now,
        )
        return self.store.add(objective)

    def list_objectives(self) -> list[Objective]:
        return self.store.list()

    def get_objective(self, objective_id: str) -> Objective:
        """
        Get a single objective by id.

        Raises:
            ValueError: If objective not found
        """
        objective = self.store.get(objective_id)
        if objective is None:
            raise ValueError("Objective not found")
        return objective

    def update_objective(self, objective_id: str, update: ObjectiveUpdate) -> Objective:
        """
        Update an objective.

        Raises:
            ValueError: If objective not found
        """
        updated = self.store.update(objective_id, update)
        if updated is None:
            raise ValueError("Objective not found")
        return updated

    def set_paused(self, objective_id: str, paused: bool) -> Objective:
        return self.update_objective(objective_id, ObjectiveUpdate(is_paused=paused))

    def get_active(self) -> Objective:
        """
        Get the objective currently in focus.

        Raises:
            ValueError: If there is no active objective
        """
        objective = self.store.get_active()
        if objective is None:
            raise ValueError("No active objective")
        return objective
