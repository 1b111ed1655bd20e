"""In-memory key-value store, used by tests and throwaway sessions."""

import json
from typing import Any, Optional

from magnolia.errors import StoreUnavailableError

from .base import KeyValueStore


class MemoryStore(KeyValueStore):
    """
    Dict-backed store.

    Values are kept JSON-encoded so callers never share mutable state with
    the store, matching what a persistent backend returns.
    """

    def __init__(self, available: bool = True):
        self._data: dict[str, str] = {}
        self.available = available

    def _check(self):
        if not self.available:
            raise StoreUnavailableError("memory store is offline")

    def load(self, key: str) -> Optional[Any]:
        self._check()
        raw = self._data.get(key)
        return json.loads(raw) if raw is not None else None

    def save(self, key: str, value: Any) -> None:
        self._check()
        self._data[key] = json.dumps(value)

    def keys(self) -> list[str]:
        return sorted(self._data)
