"""Size-bounded cache of per-mode context strings.

Eviction removes the entry with the oldest *write* timestamp. Reads do not
refresh timestamps, so the order is first-written, first-evicted rather
than least-recently-used.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel

from modeflow.modes.constants import BYTES_PER_MB

logger = logging.getLogger(__name__)


class CacheEntry(BaseModel):
    context: str
    timestamp: float

    def size_bytes(self) -> int:
        """Length of the entry's JSON serialization, in bytes."""
        return len(self.model_dump_json().encode("utf-8"))


class ModeCache:
    """Context cache bounded by total serialized size in MB."""

    def __init__(self, max_size_mb: float) -> None:
        self.max_size_mb = max_size_mb
        self._max_bytes = max_size_mb * BYTES_PER_MB
        self._entries: dict[str, CacheEntry] = {}
        self._sizes: dict[str, int] = {}
        self._current_bytes = 0

    def set(self, key: str, entry: CacheEntry) -> None:
        entry_bytes = entry.size_bytes()
        if entry_bytes > self._max_bytes:
            logger.debug("Entry %s (%d bytes) exceeds cache capacity", key, entry_bytes)
            return

        self.delete(key)
        while self._entries and self._current_bytes + entry_bytes > self._max_bytes:
            oldest = self._oldest_key()
            logger.debug("Evicting cached context %s", oldest)
            self.delete(oldest)

        self._entries[key] = entry
        self._sizes[key] = entry_bytes
        self._current_bytes += entry_bytes

    def get(self, key: str) -> CacheEntry | None:
        return self._entries.get(key)

    def delete(self, key: str) -> None:
        if key in self._entries:
            del self._entries[key]
            self._current_bytes -= self._sizes.pop(key)

    def clear(self) -> None:
        self._entries.clear()
        self._sizes.clear()
        self._current_bytes = 0

    def size(self) -> float:
        """Current size in MB."""
        return self._current_bytes / BYTES_PER_MB

    def keys(self) -> list[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def _oldest_key(self) -> str:
        # min() keeps the first of equal timestamps, i.e. the earliest insert
        return min(self._entries, key=lambda k: self._entries[k].timestamp)
