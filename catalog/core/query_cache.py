"""
Query result cache.

Results are keyed by tuples such as ("products", "admin"). A cached entry is
served while younger than the stale time; invalidate() drops every entry whose
key starts with the given prefix.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from ..utils.logger import get_logger

logger = get_logger(__name__)

QueryKey = Tuple[Any, ...]


@dataclass
class CacheEntry:
    data: Any
    fetched_at: float


class QueryCache:
    def __init__(self, stale_time_seconds: float = 60.0, clock: Callable[[], float] = time.monotonic):
        self.stale_time_seconds = stale_time_seconds
        self._clock = clock
        self._entries: Dict[QueryKey, CacheEntry] = {}

    def get(self, key: QueryKey) -> Optional[Any]:
        entry = self._entries.get(tuple(key))
        return entry.data if entry else None

    def is_fresh(self, key: QueryKey) -> bool:
        entry = self._entries.get(tuple(key))
        if entry is None:
            return False
        return (self._clock() - entry.fetched_at) < self.stale_time_seconds

    def set(self, key: QueryKey, data: Any) -> None:
        self._entries[tuple(key)] = CacheEntry(data=data, fetched_at=self._clock())

    def fetch(self, key: QueryKey, fetcher: Callable[[], Any]) -> Any:
        """Return fresh cached data or call fetcher and cache its result."""
        key = tuple(key)
        if self.is_fresh(key):
            return self._entries[key].data
        data = fetcher()
        self.set(key, data)
        return data

    def invalidate(self, prefix: QueryKey) -> int:
        prefix = tuple(prefix)
        stale = [k for k in self._entries if k[: len(prefix)] == prefix]
        for k in stale:
            del self._entries[k]
        if stale:
            logger.debug("Invalidated queries", prefix=prefix, count=len(stale))
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()
