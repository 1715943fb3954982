"""Small thread-safe TTL cache for classification results"""

import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Dict, Hashable, Optional


class TTLCache:
    """Bounded mapping whose entries expire ``ttl`` seconds after insertion.

    When full, the oldest entry is evicted first.
    """

    def __init__(self, ttl: float, max_size: int = 512, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self.max_size = max_size
        self._clock = clock
        self._entries: "OrderedDict[Hashable, tuple]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: Hashable) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None

            value, stored_at = entry
            if self._clock() - stored_at > self.ttl:
                del self._entries[key]
                self.misses += 1
                return None

            self.hits += 1
            return value

    def set(self, key: Hashable, value: Any):
        if self.ttl <= 0 or self.max_size <= 0:
            return
        with self._lock:
            self._entries.pop(key, None)
            while len(self._entries) >= self.max_size:
                self._entries.popitem(last=False)
            self._entries[key] = (value, self._clock())

    def clear(self):
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> Dict[str, Any]:
        total = self.hits + self.misses
        return {
            "cache_size": len(self._entries),
            "cache_hits": self.hits,
            "cache_misses": self.misses,
            "hit_rate": self.hits / total if total else 0.0,
        }
