"""SQLite sample cache adapter.

Persists the last reading per key so baselines survive agent restarts:
the first collection cycle after a restart can already report rates.
"""

import sqlite3

import aiosqlite

from metricsampler.adapters.storage.in_memory import Clock, epoch_seconds
from metricsampler.adapters.storage.sqlite_base import SQLiteStorageBase
from metricsampler.core.models import CacheEntry

_SAMPLES_SCHEMA = """
CREATE TABLE IF NOT EXISTS samples (
    key TEXT PRIMARY KEY,
    value REAL NOT NULL,
    timestamp INTEGER NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_samples_timestamp ON samples(timestamp);
"""

_SELECT_SAMPLE = """
SELECT value, timestamp FROM samples WHERE key = ?
"""

_UPSERT_SAMPLE = """
INSERT INTO samples (key, value, timestamp) VALUES (?, ?, ?)
ON CONFLICT(key) DO UPDATE SET value = excluded.value, timestamp = excluded.timestamp
"""

_COUNT_SAMPLES = """
SELECT COUNT(*) FROM samples
"""

_DELETE_SAMPLES_BEFORE = """
DELETE FROM samples WHERE timestamp < ?
"""

_CLEAR_SAMPLES = """
DELETE FROM samples
"""


def _from_row(row: sqlite3.Row | aiosqlite.Row | None) -> CacheEntry | None:
    if row is None:
        return None
    return CacheEntry(value=row[0], timestamp=row[1])


class SQLiteSampleCache(SQLiteStorageBase):
    """SQLite implementation of SampleCachePort and AsyncSampleCachePort.

    Sync methods (get, set, count_sync, clear_sync) use the standard sqlite3
    module so the cache can back a regular MetricSet. Async methods use
    aiosqlite for collection loops running on an event loop.

    Args:
        db_path: Database file, or ":memory:" for a throwaway cache.
        clock: Returns the current timestamp. Defaults to epoch seconds.
    """

    def __init__(self, db_path: str, clock: Clock = epoch_seconds) -> None:
        super().__init__(db_path, _SAMPLES_SCHEMA)
        self._clock = clock

    # --- Sync methods ---

    def get(self, key: str) -> CacheEntry | None:
        """Return the last reading recorded for key, or None if never seen."""
        with self.sync_connection() as conn:
            return _from_row(conn.execute(_SELECT_SAMPLE, (key,)).fetchone())

    def set(self, key: str, value: float) -> int:
        """Record value for key at the current time and return the timestamp."""
        timestamp = self._clock()
        with self.sync_connection() as conn:
            conn.execute(_UPSERT_SAMPLE, (key, value, timestamp))
            conn.commit()
        return timestamp

    def count_sync(self) -> int:
        """Return the number of cached keys."""
        with self.sync_connection() as conn:
            row = conn.execute(_COUNT_SAMPLES).fetchone()
            return row[0] if row else 0

    def clear_sync(self) -> None:
        """Remove all entries."""
        with self.sync_connection() as conn:
            conn.execute(_CLEAR_SAMPLES)
            conn.commit()

    # --- Async methods ---

    async def get_async(self, key: str) -> CacheEntry | None:
        """Return the last reading recorded for key, or None if never seen."""
        async with self.async_connection() as db:
            async with db.execute(_SELECT_SAMPLE, (key,)) as cursor:
                return _from_row(await cursor.fetchone())

    async def set_async(self, key: str, value: float) -> int:
        """Record value for key at the current time and return the timestamp."""
        timestamp = self._clock()
        async with self.async_connection() as db:
            await db.execute(_UPSERT_SAMPLE, (key, value, timestamp))
            await db.commit()
        return timestamp

    async def count(self) -> int:
        """Return the number of cached keys."""
        async with self.async_connection() as db:
            async with db.execute(_COUNT_SAMPLES) as cursor:
                row = await cursor.fetchone()
                return row[0] if row else 0

    async def delete_before(self, timestamp: int) -> int:
        """Delete entries recorded before timestamp and return how many."""
        async with self.async_connection() as db:
            cursor = await db.execute(_DELETE_SAMPLES_BEFORE, (timestamp,))
            deleted = cursor.rowcount
            await db.commit()
            return deleted

    async def clear(self) -> None:
        """Remove all entries."""
        async with self.async_connection() as db:
            await db.execute(_CLEAR_SAMPLES)
            await db.commit()
