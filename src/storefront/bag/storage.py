"""Bag storage port (abstract interface) and its adapters.

Mirrors the browser's local-storage contract: string values under string
keys. ``MemoryBagStorage`` backs tests; ``FileBagStorage`` keeps one JSON
document per key on disk for CLI and kiosk front-ends.
"""

import re
from abc import ABC, abstractmethod
from pathlib import Path


class BagStorage(ABC):
    """Abstract key/value storage for serialized bags."""

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return the stored value, or ``None`` when the key is absent."""
        ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``."""
        ...


class MemoryBagStorage(BagStorage):
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.values: dict[str, str] = dict(initial or {})
        self.writes: int = 0

    def get_item(self, key: str) -> str | None:
        return self.values.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.values[key] = value
        self.writes += 1


class FileBagStorage(BagStorage):
    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        safe = re.sub(r"[^A-Za-z0-9_.-]", "_", key)
        return self.directory / f"{safe}.json"

    def get_item(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        self._path(key).write_text(value, encoding="utf-8")
