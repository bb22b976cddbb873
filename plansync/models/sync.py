"""Sync state and result models."""
from datetime import datetime
from enum import Enum
from typing import Optional

from plansync.models.base import CamelModel


class SyncStatus(str, Enum):
    """Lifecycle of a sync run."""

    IDLE = "idle"
    SYNCING = "syncing"
    SUCCESS = "success"
    ERROR = "error"


class SyncState(CamelModel):
    """
    Observable state of the sync engine.

    ``error`` keeps the last failure message until a successful sync
    clears it.
    """

    model_config = {"frozen": True}

    status: SyncStatus = SyncStatus.IDLE
    last_sync_at: Optional[datetime] = None
    error: Optional[str] = None


class SyncResult(CamelModel):
    """Outcome of one ``sync_all`` call."""

    model_config = {"frozen": True}

    success: bool
    error: Optional[str] = None
