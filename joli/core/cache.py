import threading
import time
from typing import Callable, Dict, Generic, Hashable, Optional, Tuple, TypeVar

V = TypeVar("V")


class TTLCache(Generic[V]):
    """Small thread-safe key/value cache with per-entry expiry.

    Entries expire ``ttl_seconds`` after they are stored. When ``max_size``
    entries are live, new keys are not stored (expired entries are purged first).
    """

    def __init__(self, ttl_seconds: float, max_size: int = 500, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.max_size = max_size
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[Hashable, Tuple[V, float]] = {}

    def get(self, key: Hashable) -> Optional[V]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expiry = entry
            if self._clock() >= expiry:
                del self._entries[key]
                return None
            return value

    def set(self, key: Hashable, value: V) -> bool:
        """Store ``value``; returns False when the cache is full."""
        with self._lock:
            now = self._clock()
            if key not in self._entries and len(self._entries) >= self.max_size:
                self._purge_expired(now)
                if len(self._entries) >= self.max_size:
                    return False
            self._entries[key] = (value, now + self.ttl_seconds)
            return True

    def invalidate(self, key: Hashable) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _purge_expired(self, now: float) -> None:
        expired = [k for k, (_, expiry) in self._entries.items() if now >= expiry]
        for k in expired:
            del self._entries[k]
