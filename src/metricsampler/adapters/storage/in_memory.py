"""In-memory sample cache adapter."""

import threading
import time
from collections.abc import Callable

from metricsampler.core.models import CacheEntry

Clock = Callable[[], int]


def epoch_seconds() -> int:
    """Default cache clock: whole seconds since the Unix epoch."""
    return int(time.time())


class InMemorySampleCache:
    """In-memory implementation of SampleCachePort.

    Holds the last reading per key in a dict guarded by a lock, so
    collection cycles sampling disjoint keys can share one instance.
    Entries live until deleted, evicted with delete_before() or cleared.

    Args:
        clock: Returns the current timestamp. Defaults to epoch seconds,
            which makes RATE values per-second rates.
    """

    def __init__(self, clock: Clock = epoch_seconds) -> None:
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> CacheEntry | None:
        """Return the last reading recorded for key, or None if never seen."""
        with self._lock:
            return self._entries.get(key)

    def set(self, key: str, value: float) -> int:
        """Record value for key at the current time and return the timestamp."""
        timestamp = self._clock()
        with self._lock:
            self._entries[key] = CacheEntry(value=value, timestamp=timestamp)
        return timestamp

    def delete(self, key: str) -> bool:
        """Forget key. Returns True if it was present."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def delete_before(self, timestamp: int) -> int:
        """Delete entries recorded before timestamp.

        Returns:
            Number of entries deleted.
        """
        with self._lock:
            stale = [k for k, e in self._entries.items() if e.timestamp < timestamp]
            for key in stale:
                del self._entries[key]
        return len(stale)

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


_default_cache: InMemorySampleCache | None = None
_default_lock = threading.Lock()


def get_default_cache() -> InMemorySampleCache:
    """Return the process-wide cache used by MetricSets built without one."""
    global _default_cache
    with _default_lock:
        if _default_cache is None:
            _default_cache = InMemorySampleCache()
        return _default_cache
