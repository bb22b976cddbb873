"""
Exception hierarchy for plan synchronization.

- PlanSyncError: base class for every known failure
- AuthError: no active session, sync cannot start
- ListFetchError: remote snapshot for an entity type could not be fetched
- ItemError: a single entity could not be created, updated or downloaded
- MappingError: a remote payload could not be mapped to the local shape
"""
from typing import Optional


class PlanSyncError(Exception):
    """Base class for plansync errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthError(PlanSyncError):
    """Raised when an operation needs an authenticated session and has none."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class ListFetchError(PlanSyncError):
    """
    Remote snapshot fetch failed.

    Aborts the whole sync run; the message is what ends up in SyncState.error.
    """

    def __init__(self, entity: str, cause: Exception):
        super().__init__(str(cause) or f"Failed to fetch remote {entity}")
        self.entity = entity
        self.cause = cause


class ItemError(PlanSyncError):
    """Failure to sync one entity. Logged and skipped, never propagated out of a pass."""

    def __init__(self, entity: str, entity_id: str, cause: Optional[Exception] = None):
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to sync {entity} {entity_id}{detail}")
        self.entity = entity
        self.entity_id = entity_id
        self.cause = cause


class MappingError(ItemError):
    """Remote payload is malformed and cannot be turned into a local entity."""
