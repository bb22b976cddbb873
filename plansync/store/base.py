"""Copy-on-write stores backing local state.

Every store owns one frozen snapshot model. A mutation builds a new
snapshot from the current one, persists it, and only then swaps it in, all
under the store's lock. Readers always see either the old or the new
snapshot, never a partially applied change.
"""
import logging
import threading
from collections.abc import Iterable, Mapping
from typing import Any, Callable, ClassVar, Generic, Optional, TypeVar, Union

from pydantic import BaseModel

from plansync.models.base import Entity
from plansync.persistence import PersistenceAdapter

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=BaseModel)
T = TypeVar("T", bound=Entity)

Changes = Union[BaseModel, Mapping[str, Any]]


def merge_changes(entity: T, changes: Changes) -> T:
    """
    Apply a field-level merge to an entity and re-validate the result.

    Args:
        entity: Current entity
        changes: Update model (only fields explicitly set are applied) or a
            mapping of snake_case field names to new values

    Returns:
        New entity instance with the changes applied

    Raises:
        ValueError: If the changes try to reassign the entity id
    """
    if isinstance(changes, BaseModel):
        changes = changes.model_dump(exclude_unset=True)
    changes = dict(changes)

    if "id" in changes and changes["id"] != entity.id:
        raise ValueError("Entity id cannot be changed")

    data = entity.model_dump()
    data.update(changes)
    return type(entity).model_validate(data)


class SnapshotStore(Generic[S]):
    """Holds one immutable snapshot and persists it under ``key``."""

    key: ClassVar[str]
    state_model: ClassVar[type[BaseModel]]

    def __init__(self, persistence: Optional[PersistenceAdapter] = None):
        self._persistence = persistence
        self._lock = threading.RLock()
        self._state: S = self._load()

    @property
    def state(self) -> S:
        """Current snapshot."""
        return self._state

    def _load(self) -> S:
        if self._persistence is None:
            return self.state_model()
        blob = self._persistence.load(self.key)
        if blob is None:
            return self.state_model()
        state = self.state_model.model_validate_json(blob)
        logger.debug("Loaded %s store", self.key)
        return state

    def transact(self, mutate: Callable[[S], S]) -> S:
        """
        Run ``mutate`` against the current snapshot and commit its result.

        ``mutate`` must return a new snapshot (or the same one for a no-op).
        If persisting the new snapshot fails the in-memory state is left
        untouched and the error propagates.
        """
        with self._lock:
            new_state = mutate(self._state)
            if new_state is self._state:
                return new_state
            if self._persistence is not None:
                self._persistence.save(self.key, new_state.model_dump_json())
            self._state = new_state
            return new_state


class EntityRepository(SnapshotStore[S], Generic[S, T]):
    """
    CRUD over one tuple of entities inside a snapshot.

    Subclasses name the snapshot attribute holding the entities in
    ``collection``.
    """

    collection: ClassVar[str]
    entity_name: ClassVar[str] = "Entity"

    def _items(self, state: Optional[S] = None) -> tuple[T, ...]:
        return getattr(self._state if state is None else state, self.collection)

    def _with_items(self, state: S, items: Iterable[T]) -> S:
        return state.model_copy(update={self.collection: tuple(items)})

    def _merge(self, entity: T, changes: Changes) -> T:
        return merge_changes(entity, changes)

    def _after_add(self, state: S, added: list[T]) -> S:
        return state

    def _after_remove(self, state: S, removed: T) -> S:
        return state

    def get(self, entity_id: str) -> Optional[T]:
        for entity in self._items():
            if entity.id == entity_id:
                return entity
        return None

    def ids(self) -> set[str]:
        return {entity.id for entity in self._items()}

    def add(self, entity: T) -> T:
        return self.add_many([entity])[0]

    def add_many(self, entities: Iterable[T]) -> list[T]:
        """
        Append entities in one commit.

        Raises:
            ValueError: If any id is already present (nothing is added)
        """
        entities = list(entities)

        def apply(state: S) -> S:
            seen = {entity.id for entity in self._items(state)}
            for entity in entities:
                if entity.id in seen:
                    raise ValueError(f"{self.entity_name} {entity.id} already exists")
                seen.add(entity.id)
            if not entities:
                return state
            new_state = self._with_items(state, [*self._items(state), *entities])
            return self._after_add(new_state, entities)

        self.transact(apply)
        return entities

    def update(self, entity_id: str, changes: Changes) -> Optional[T]:
        """
        Merge ``changes`` into the entity with ``entity_id``.

        Returns:
            The updated entity, or None (and no change) if the id is absent
        """
        updated: Optional[T] = None

        def apply(state: S) -> S:
            nonlocal updated
            items = list(self._items(state))
            for index, entity in enumerate(items):
                if entity.id == entity_id:
                    updated = self._merge(entity, changes)
                    items[index] = updated
                    return self._with_items(state, items)
            return state

        self.transact(apply)
        return updated

    def remove(self, entity_id: str) -> bool:
        """Remove an entity. Returns False if the id was absent."""
        removed: Optional[T] = None

        def apply(state: S) -> S:
            nonlocal removed
            items = self._items(state)
            for entity in items:
                if entity.id == entity_id:
                    removed = entity
                    kept = [item for item in items if item.id != entity_id]
                    return self._after_remove(self._with_items(state, kept), entity)
            return state

        self.transact(apply)
        return removed is not None

    # Keep last: shadows the builtin used in annotations above.
    def list(self) -> list[T]:
        return list(self._items())
