"""Port interfaces for sample cache adapters.

These protocols define the contracts that cache adapters must implement.
The sampling core depends only on these interfaces, not concrete caches.
"""

from typing import Protocol, runtime_checkable

from metricsampler.core.models import CacheEntry


@runtime_checkable
class SampleCachePort(Protocol):
    """Port for synchronous sample cache operations.

    Examples: InMemorySampleCache, BoundedSampleCache, SQLiteSampleCache.
    """

    def get(self, key: str) -> CacheEntry | None:
        """Return the last reading recorded for key, or None if never seen."""
        ...

    def set(self, key: str, value: float) -> int:
        """Record value for key at the current time.

        Any previous entry for the key is replaced.

        Returns:
            The timestamp the reading was recorded with.
        """
        ...


@runtime_checkable
class AsyncSampleCachePort(Protocol):
    """Port for sample caches backed by non-blocking storage.

    Examples: SQLiteSampleCache.
    """

    async def get_async(self, key: str) -> CacheEntry | None:
        """Return the last reading recorded for key, or None if never seen."""
        ...

    async def set_async(self, key: str, value: float) -> int:
        """Record value for key at the current time and return the timestamp."""
        ...
