"""Key-value storage collaborators for persisted workspaces."""

import json
import logging
import re
from pathlib import Path
from typing import Any, Optional, Protocol

logger = logging.getLogger(__name__)

Record = Any


class Storage(Protocol):
    """Narrow read/write interface the workspace persists through."""

    def load(self, key: str) -> Optional[Record]: ...

    def save(self, key: str, record: Record) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStorage:
    """Storage held in a dict, for tests and one-off CLI runs."""

    def __init__(self, records: Optional[dict[str, Record]] = None) -> None:
        self.records: dict[str, Record] = dict(records or {})

    def load(self, key: str) -> Optional[Record]:
        record = self.records.get(key)
        # Hand out a copy so callers can't mutate what is stored.
        return json.loads(json.dumps(record)) if record is not None else None

    def save(self, key: str, record: Record) -> None:
        self.records[key] = json.loads(json.dumps(record))

    def remove(self, key: str) -> None:
        self.records.pop(key, None)


class JsonFileStorage:
    """Storage writing one JSON file per key under a directory."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def _get_path(self, key: str) -> Path:
        """Get the file path for a storage key.

        Args:
            key: The storage key.

        Returns:
            Path to the JSON file.
        """
        self.directory.mkdir(parents=True, exist_ok=True)
        safe_key = re.sub(r"[^A-Za-z0-9_.-]", "_", key)
        return self.directory / f"{safe_key}.json"

    def load(self, key: str) -> Optional[Record]:
        """Load a record if one was saved.

        Args:
            key: The storage key.

        Returns:
            The record, or None if missing or unreadable.
        """
        path = self._get_path(key)
        if not path.exists():
            return None

        try:
            with open(path, "r") as f:
                return json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Failed to load stored record '{key}': {e}")
            return None

    def save(self, key: str, record: Record) -> None:
        """Save a record, replacing any previous one.

        Args:
            key: The storage key.
            record: JSON-compatible data.
        """
        path = self._get_path(key)
        tmp_path = path.with_suffix(".json.tmp")
        with open(tmp_path, "w") as f:
            json.dump(record, f, indent=2)
        tmp_path.replace(path)

    def remove(self, key: str) -> None:
        self._get_path(key).unlink(missing_ok=True)
