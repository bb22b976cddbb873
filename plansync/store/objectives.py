"""Objective store."""
from typing import Callable, Optional

from pydantic import BaseModel

from plansync.models.objective import Objective
from plansync.persistence import PersistenceAdapter
from plansync.store.base import Changes, EntityRepository, merge_changes
from plansync.utils.dates import utc_now


class ObjectiveState(BaseModel):
    """Snapshot persisted under the ``objectives`` key."""

    model_config = {"frozen": True}

    objectives: tuple[Objective, ...] = ()
    active_objective_id: Optional[str] = None


class ObjectiveStore(EntityRepository[ObjectiveState, Objective]):
    """Objectives plus the id of the one currently in focus."""

    key = "objectives"
    state_model = ObjectiveState
    collection = "objectives"
    entity_name = "Objective"

    def __init__(
        self,
        persistence: Optional[PersistenceAdapter] = None,
        clock: Callable = utc_now,
    ):
        self._clock = clock
        super().__init__(persistence)

    def _merge(self, entity: Objective, changes: Changes) -> Objective:
        merged = merge_changes(entity, changes)
        return merged.model_copy(update={"updated_at": self._clock()})

    def _after_add(self, state: ObjectiveState, added: list[Objective]) -> ObjectiveState:
        if state.active_objective_id is None:
            return state.model_copy(update={"active_objective_id": added[0].id})
        return state

    def _after_remove(self, state: ObjectiveState, removed: Objective) -> ObjectiveState:
        if state.active_objective_id != removed.id:
            return state
        next_id = state.objectives[0].id if state.objectives else None
        return state.model_copy(update={"active_objective_id": next_id})

    @property
    def active_objective_id(self) -> Optional[str]:
        return self.state.active_objective_id

    def set_active(self, objective_id: Optional[str]) -> None:
        """
        Point the active objective at ``objective_id`` (or clear it with None).

        Raises:
            ValueError: If objective_id is not in the store
        """

        def apply(state: ObjectiveState) -> ObjectiveState:
            if objective_id is not None and objective_id not in {o.id for o in state.objectives}:
                raise ValueError("Objective not found")
            return state.model_copy(update={"active_objective_id": objective_id})

        self.transact(apply)

    def get_active(self) -> Optional[Objective]:
        state = self.state
        for objective in state.objectives:
            if objective.id == state.active_objective_id:
                return objective
        return None
