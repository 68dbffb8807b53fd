# venue_admin/services/list_cache.py
import time
from collections import OrderedDict
from typing import Any, Callable, Hashable, Optional, Tuple


class ListCache:
    """In-process cache of list pages keyed by (cache_key, params).

    Saves call invalidate(cache_key) so the next list read goes to the db.
    Holds at most `max_entries` pages; expired pages are swept on write and
    the oldest page is evicted when full.
    """
    def __init__(self, ttl: float = 30.0, max_entries: int = 1000, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self.max_entries = max_entries
        self.clock = clock
        self._entries: "OrderedDict[Tuple[str, Hashable], Tuple[float, Any]]" = OrderedDict()

    def get(self, key: str, params: Hashable) -> Optional[Any]:
        entry = self._entries.get((key, params))
        if entry is None:
            return None
        stored_at, value = entry
        if self.clock() - stored_at > self.ttl:
            del self._entries[(key, params)]
            return None
        return value

    def set(self, key: str, params: Hashable, value: Any) -> None:
        now = self.clock()
        self._sweep(now)
        self._entries.pop((key, params), None)
        self._entries[(key, params)] = (now, value)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    def _sweep(self, now: float) -> None:
        # insertion order is write order, so expired pages sit at the front
        while self._entries:
            stored_at, _ = next(iter(self._entries.values()))
            if now - stored_at <= self.ttl:
                break
            self._entries.popitem(last=False)

    def invalidate(self, key: str) -> int:
        stale = [k for k in self._entries if k[0] == key]
        for k in stale:
            del self._entries[k]
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
