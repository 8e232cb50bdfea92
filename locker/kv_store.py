"""Key-value stores backing the durable and ephemeral persistence tiers."""

import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional

from common.logging_config import get_logger

logger = get_logger(__name__)


class KeyValueStore:
    """String-to-string namespace with localStorage-like semantics."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class MemoryKeyValueStore(KeyValueStore):
    """In-process store. Its contents end with the process."""

    def __init__(self, data: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()


class JsonFileKeyValueStore(KeyValueStore):
    """Host-persistent store kept in a single JSON file."""

    def __init__(self, path: Path):
        """
        Initialize the store.

        Args:
            path: JSON file holding the namespace (created on first write)
        """
        self.path = Path(path)
        self._data = self._load()

    def _load(self) -> Dict[str, str]:
        """
        Load the namespace from disk.

        Returns:
            Mapping of keys to values, empty when the file is missing or corrupt
        """
        if not self.path.exists():
            return {}

        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Ignoring unreadable state file {self.path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring state file {self.path}: expected a JSON object")
            return {}

        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _save(self, data: Dict[str, str]) -> None:
        """Rewrite the whole file atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix='.state-', suffix='.json')
        try:
            with os.fdopen(fd, 'w') as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def _commit(self, data: Dict[str, str]) -> None:
        # Memory follows the file: a failed write leaves _data untouched
        self._save(data)
        self._data = data

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._commit({**self._data, key: value})

    def remove(self, key: str) -> None:
        if key in self._data:
            self._commit({k: v for k, v in self._data.items() if k != key})

    def clear(self) -> None:
        self._commit({})
