"""
Ingestion - Cursor Checkpoints.

Persists the last Horizon cursor whose page was fully handed to the sink,
so a restarted indexer resumes where it stopped instead of replaying the
whole offer book.
"""

import json
import logging
import os
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ingestion.types import StorageError


logger = logging.getLogger(__name__)


class CursorCheckpoint(ABC):
    """Storage for the resume cursor."""

    @abstractmethod
    def load(self) -> Optional[str]:
        """Return the saved cursor, or None to start from the beginning."""
        pass

    @abstractmethod
    def save(self, cursor: str) -> None:
        """Persist the cursor of the last fully stored page."""
        pass


class InMemoryCursorCheckpoint(CursorCheckpoint):
    """Process-local checkpoint; lost on restart."""

    def __init__(self, cursor: Optional[str] = None) -> None:
        self._cursor = cursor

    def load(self) -> Optional[str]:
        return self._cursor

    def save(self, cursor: str) -> None:
        self._cursor = cursor


class JsonFileCursorCheckpoint(CursorCheckpoint):
    """
    Checkpoint kept in a small JSON file.

    Writes go to a sibling temp file that is then renamed over the target,
    so a crash mid-write leaves the previous cursor intact.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[str]:
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise StorageError(
                f"Cannot read cursor checkpoint {self._path}: {e}",
                operation="load_cursor",
                cause=e,
            ) from e
        cursor = data.get("cursor") if isinstance(data, dict) else None
        if cursor is not None and not isinstance(cursor, str):
            raise StorageError(
                f"Cursor checkpoint {self._path} holds a non-string cursor",
                operation="load_cursor",
            )
        return cursor

    def save(self, cursor: str) -> None:
        payload = {
            "cursor": cursor,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(payload), encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError as e:
            raise StorageError(
                f"Cannot write cursor checkpoint {self._path}: {e}",
                operation="save_cursor",
                cause=e,
            ) from e
        logger.debug(f"Checkpointed cursor {cursor}")
