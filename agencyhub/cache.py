"""
In-process identity cache used by the auth dependency.

Entries expire after a short TTL and the map is bounded; a miss simply
falls through to the database, so the cache may be empty at any time.
"""
import logging
import time
from collections import OrderedDict
from threading import Lock
from typing import Any, Callable, Hashable, Optional

logger = logging.getLogger(__name__)


class IdentityCache:
    """Bounded time-to-live map keyed by user id"""

    def __init__(
        self,
        ttl_seconds: float = 30.0,
        max_entries: int = 1024,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[Hashable, tuple[float, Any]]" = OrderedDict()
        self._lock = Lock()

    def get(self, key: Hashable) -> Optional[Any]:
        """Get value from cache, dropping it if expired"""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                logger.debug(f"❌ Identity cache MISS: {key}")
                return None

            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                logger.debug(f"⌛ Identity cache EXPIRED: {key}")
                return None

            logger.debug(f"✅ Identity cache HIT: {key}")
            return value

    def set(self, key: Hashable, value: Any) -> None:
        """Set value; evicts the oldest entry when the map is full"""
        with self._lock:
            if key in self._entries:
                del self._entries[key]
            self._entries[key] = (self._clock() + self.ttl_seconds, value)

            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"🧹 Identity cache evicted: {evicted}")

    def invalidate(self, key: Hashable) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
