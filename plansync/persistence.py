"""Persistence adapters for the local entity stores.

Each logical store (objectives, tasks, schedule, status, settings) is saved
as one independently keyed JSON blob. Stores only talk to the
``PersistenceAdapter`` protocol, so storage can be swapped without touching
them.
"""
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class PersistenceAdapter(Protocol):
    """Key/blob storage used underneath the entity stores."""

    def load(self, key: str) -> Optional[str]:
        """Return the blob saved under ``key``, or None if nothing was saved."""
        ...

    def save(self, key: str, blob: str) -> None:
        """Replace the blob saved under ``key``."""
        ...


class MemoryPersistence:
    """In-process storage, used for tests and ephemeral sessions."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._blobs: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def load(self, key: str) -> Optional[str]:
        with self._lock:
            return self._blobs.get(key)

    def save(self, key: str, blob: str) -> None:
        with self._lock:
            self._blobs[key] = blob

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._blobs)


class JsonFilePersistence:
    """
    One ``<key>.json`` file per store inside ``directory``.

    Writes go to a temp file in the same directory and are moved into place,
    so a crash mid-write never leaves a truncated blob behind.
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)
        self._lock = threading.Lock()

    def _path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValueError(f"Invalid store key: {key!r}")
        return self.directory / f"{key}.json"

    def load(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def save(self, key: str, blob: str) -> None:
        path = self._path(key)
        with self._lock:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.directory, prefix=f".{key}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(blob)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        logger.debug("Saved %s (%d bytes)", path, len(blob))
