"""Fixed-capacity sample cache adapter.

Provides bounded in-memory storage that evicts the least recently
written key when full. Useful for agents whose set of sampled keys
grows without limit (short-lived containers, ephemeral hosts).
"""

import threading
from collections import OrderedDict

from metricsampler.adapters.storage.in_memory import Clock, epoch_seconds
from metricsampler.core.models import CacheEntry


class BoundedSampleCache:
    """Bounded implementation of SampleCachePort.

    When the cache is full, writing a new key evicts the key written
    longest ago. An evicted key behaves as never seen: its next reading
    becomes a fresh baseline.

    Args:
        max_size: Maximum number of keys to keep.
        clock: Returns the current timestamp. Defaults to epoch seconds.
    """

    def __init__(self, max_size: int, clock: Clock = epoch_seconds) -> None:
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self._max_size = max_size
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def max_size(self) -> int:
        return self._max_size

    def get(self, key: str) -> CacheEntry | None:
        """Return the last reading recorded for key, or None if never seen."""
        with self._lock:
            return self._entries.get(key)

    def set(self, key: str, value: float) -> int:
        """Record value for key, evicting the oldest key if full."""
        timestamp = self._clock()
        with self._lock:
            self._entries[key] = CacheEntry(value=value, timestamp=timestamp)
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_size:
                self._entries.popitem(last=False)
        return timestamp

    def clear(self) -> None:
        """Remove all entries."""
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
