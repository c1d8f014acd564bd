from __future__ import annotations

"""Key-value stores for score history and high scores.

Two backends share the ``get``/``set``/``remove`` contract:

- ``MemoryStore``: process-local dict, values deep-copied in and out.
- ``JsonFileStore``: a single JSON document on disk, keys namespaced with a
  prefix so several apps can share one file.

Reads are forgiving (a missing or corrupt file reads as empty); writes raise
``StorageError`` so callers decide how loud a failed save should be.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from ..config.config import GameConfig, default_config

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "lingoquest_"


class StorageError(RuntimeError):
    """A value could not be written to or removed from a store."""


class KeyValueStore(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStore:
    def __init__(self) -> None:
        self._data: Dict[str, Any] = {}

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def clear_all(self) -> None:
        self._data.clear()

    def keys(self) -> list[str]:
        return list(self._data.keys())


class JsonFileStore:
    def __init__(self, path: str | Path, prefix: str = DEFAULT_PREFIX) -> None:
        self.path = Path(path)
        self.prefix = prefix

    @classmethod
    def from_config(cls, path: str | Path, config: Optional[GameConfig] = None) -> JsonFileStore:
        """Open a store namespaced with the configured ``storage.key_prefix``."""
        config = config if config is not None else default_config()
        return cls(path, prefix=config.storage.key_prefix)

    def _full_key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("Unreadable store file %s, treating as empty: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Store file %s does not hold an object, treating as empty", self.path)
            return {}
        return data

    def _save(self, data: Dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            text = json.dumps(data, indent=2)
            self.path.write_text(text, encoding="utf-8")
        except (OSError, TypeError, ValueError) as exc:
            raise StorageError(f"Could not write {self.path}: {exc}") from exc

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(self._full_key(key), default)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[self._full_key(key)] = value
        self._save(data)

    def remove(self, key: str) -> None:
        data = self._load()
        full = self._full_key(key)
        if full in data:
            del data[full]
            self._save(data)

    def clear_all(self) -> None:
        data = {k: v for k, v in self._load().items() if not k.startswith(self.prefix)}
        self._save(data)
