# alagad_depot/core/cache.py
from datetime import datetime, timedelta
from typing import Any, Dict, Generic, Hashable, Optional, Tuple, TypeVar

from alagad_depot.core.clock import Clock, utc_now

T = TypeVar("T")

class TTLCache(Generic[T]):
    """
    Small keyed cache with a fixed time-to-live.

    Entries older than `ttl` are treated as missing. `invalidate()` drops one
    key, or everything when called without one.
    """

    def __init__(self, ttl: timedelta, clock: Clock = utc_now):
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[Hashable, Tuple[T, datetime]] = {}

    def is_fresh(self, key: Hashable) -> bool:
        entry = self._entries.get(key)
        if entry is None:
            return False
        _, stored_at = entry
        return self._clock() - stored_at < self.ttl

    def get(self, key: Hashable) -> Optional[T]:
        if not self.is_fresh(key):
            return None
        return self._entries[key][0]

    def set(self, key: Hashable, value: T) -> T:
        self._entries[key] = (value, self._clock())
        return value

    def invalidate(self, key: Optional[Hashable] = None) -> None:
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)

    def __contains__(self, key: Any) -> bool:
        return self.is_fresh(key)
