"""
In-memory result cache for directory queries.

Entries are keyed by logical query identity: a tuple whose first item is the
API path (e.g. "/api/list-doctor-with-filter") followed by the sorted query
parameters. Invalidation by path drops every entry of that query family.
"""

import time
from collections import OrderedDict
from typing import Any, Dict, Hashable, Optional, Tuple

from app.utils.logger import get_logger

logger = get_logger("query_cache")

QueryKey = Tuple[Hashable, ...]


class QueryCache:
    """TTL + size bounded cache. Last write wins for a key."""

    def __init__(self, ttl: int = 300, max_entries: int = 256):
        self.ttl = ttl
        self.max_entries = max_entries
        self._store: "OrderedDict[QueryKey, Dict[str, Any]]" = OrderedDict()

    @staticmethod
    def make_key(path: str, params: Any = None) -> QueryKey:
        """``params`` is a mapping or an iterable of (name, value) pairs."""
        pairs = params.items() if hasattr(params, "items") else (params or ())
        items = sorted((str(k), str(v)) for k, v in pairs)
        return (path, *items)

    def _is_valid(self, entry: Dict[str, Any]) -> bool:
        return time.monotonic() - entry["timestamp"] < self.ttl

    def get(self, key: QueryKey) -> Optional[Any]:
        entry = self._store.get(key)
        if entry is None:
            return None
        if not self._is_valid(entry):
            del self._store[key]
            return None
        self._store.move_to_end(key)
        logger.debug(f"Cache hit: {key}")
        return entry["value"]

    def set(self, key: QueryKey, value: Any) -> None:
        self._store[key] = {"value": value, "timestamp": time.monotonic()}
        self._store.move_to_end(key)
        while len(self._store) > self.max_entries:
            self._store.popitem(last=False)

    def invalidate(self, path: str) -> int:
        """Drop all entries whose key starts with ``path``. Returns how many were dropped."""
        stale = [k for k in self._store if k and k[0] == path]
        for k in stale:
            del self._store[k]
        if stale:
            logger.info(f"Invalidated {len(stale)} cached result(s) for {path}")
        return len(stale)

    def clear(self) -> None:
        self._store.clear()

    def __contains__(self, key: QueryKey) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self._store)
