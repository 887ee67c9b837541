"""
In-process TTL cache used for nearby query results and routes.

Entries expire after a fixed TTL and the map is bounded: once it holds more
than ``max_entries`` keys the oldest-inserted key is evicted (insertion order,
not LRU). Re-setting an existing key keeps its original position.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Generic, Hashable, Optional, Tuple, TypeVar

V = TypeVar("V")


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    evictions: int = 0

    def as_dict(self) -> Dict[str, int]:
        return {"hits": self.hits, "misses": self.misses, "evictions": self.evictions}


class TTLCache(Generic[V]):
    """
    Bounded TTL map safe for concurrent readers and writers.

    Args:
        ttl_seconds: Lifetime of an entry measured from when it was stored
        max_entries: Size ceiling; exceeding it evicts the oldest-inserted key
        clock: Monotonic time source, injectable for deterministic tests
        name: Label used in log lines and metrics
    """

    def __init__(
        self,
        ttl_seconds: float,
        max_entries: int,
        clock: Callable[[], float] = time.monotonic,
        name: str = "cache",
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self.name = name
        self._clock = clock
        self._entries: Dict[Hashable, Tuple[float, V]] = {}
        self._lock = threading.Lock()
        self.stats = CacheStats()
        self.logger = logging.getLogger(__name__)

    def now(self) -> float:
        return self._clock()

    def get(self, key: Hashable) -> Optional[V]:
        """Return the live value for ``key`` or None when missing/expired."""
        found, value = self.lookup(key)
        return value if found else None

    def lookup(self, key: Hashable) -> Tuple[bool, Optional[V]]:
        """Like ``get`` but distinguishes a stored None from a miss."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.stats.misses += 1
                return False, None
            stored_at, value = entry
            if self._clock() - stored_at >= self.ttl_seconds:
                del self._entries[key]
                self.stats.misses += 1
                self.logger.debug(f"[{self.name}] expired key: {key}")
                return False, None
            self.stats.hits += 1
            return True, value

    def set(self, key: Hashable, value: V) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), value)
            while len(self._entries) > self.max_entries:
                oldest = next(iter(self._entries))
                del self._entries[oldest]
                self.stats.evictions += 1
                self.logger.debug(f"[{self.name}] evicted oldest key: {oldest}")

    def clear(self) -> None:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        if count:
            self.logger.info(f"[{self.name}] cleared {count} entries")

    def keys(self) -> list:
        with self._lock:
            return list(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
