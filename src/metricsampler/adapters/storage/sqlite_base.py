"""Connection management shared by SQLite cache adapters."""

import asyncio
import sqlite3
import threading
from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager, closing, contextmanager

import aiosqlite

MEMORY = ":memory:"


class AsyncConnectionManager:
    """Manages async (aiosqlite) database connections.

    Handles schema initialization and connection lifecycle for async contexts.
    For :memory: databases, maintains a persistent connection since SQLite
    in-memory databases are connection-scoped.
    """

    def __init__(self, db_path: str, schema: str) -> None:
        self._db_path = db_path
        self._schema = schema
        self._initialized = False
        self._init_lock: asyncio.Lock | None = None
        self._persistent_conn: aiosqlite.Connection | None = None

    def _get_lock(self) -> asyncio.Lock:
        """Get or create the initialization lock (lazy to avoid event loop issues)."""
        if self._init_lock is None:
            self._init_lock = asyncio.Lock()
        return self._init_lock

    async def _ensure_initialized(self) -> None:
        if self._initialized:
            return
        async with self._get_lock():
            if self._initialized:
                return
            if self._db_path == MEMORY:
                self._persistent_conn = await aiosqlite.connect(MEMORY)
                await self._persistent_conn.executescript(self._schema)
            else:
                async with aiosqlite.connect(self._db_path) as db:
                    await db.execute("PRAGMA journal_mode=WAL")
                    await db.executescript(self._schema)
            self._initialized = True

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[aiosqlite.Connection]:
        """Context manager for async database connections.

        File-based connections are closed on exit; the :memory: connection
        stays open until close().
        """
        await self._ensure_initialized()
        if self._db_path == MEMORY:
            if self._persistent_conn is None:
                raise RuntimeError("Memory database connection not initialized")
            yield self._persistent_conn
            return
        async with aiosqlite.connect(self._db_path) as db:
            yield db

    async def close(self) -> None:
        """Close persistent connection (for :memory: databases)."""
        if self._persistent_conn is not None:
            await self._persistent_conn.close()
            self._persistent_conn = None
            self._initialized = False


class SyncConnectionManager:
    """Manages sync (sqlite3) database connections.

    For :memory: databases this manager keeps its own persistent
    connection, which is a separate database from the async manager's.
    """

    def __init__(self, db_path: str, schema: str) -> None:
        self._db_path = db_path
        self._schema = schema
        self._initialized = False
        self._lock = threading.RLock()
        self._persistent_conn: sqlite3.Connection | None = None

    def _ensure_initialized(self) -> None:
        if self._initialized:
            return
        with self._lock:
            if self._initialized:
                return
            if self._db_path == MEMORY:
                self._persistent_conn = sqlite3.connect(
                    MEMORY, check_same_thread=False
                )
                self._persistent_conn.executescript(self._schema)
            else:
                with closing(sqlite3.connect(self._db_path)) as db:
                    db.execute("PRAGMA journal_mode=WAL")
                    db.executescript(self._schema)
            self._initialized = True

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Context manager for sync database connections."""
        self._ensure_initialized()
        if self._db_path == MEMORY:
            if self._persistent_conn is None:
                raise RuntimeError("Sync memory database connection not initialized")
            with self._lock:
                yield self._persistent_conn
            return
        with closing(sqlite3.connect(self._db_path)) as conn:
            yield conn

    def close(self) -> None:
        """Close persistent connection (for :memory: databases)."""
        with self._lock:
            if self._persistent_conn is not None:
                self._persistent_conn.close()
                self._persistent_conn = None
                self._initialized = False


class SQLiteStorageBase:
    """Base class for SQLite cache adapters.

    Delegates connection lifecycle to AsyncConnectionManager and
    SyncConnectionManager. For file-based databases both share the same
    file. For :memory: databases the sync and async sides are separate
    databases that do not share data.
    """

    def __init__(self, db_path: str, schema: str) -> None:
        self._db_path = db_path
        self._async_manager = AsyncConnectionManager(db_path, schema)
        self._sync_manager = SyncConnectionManager(db_path, schema)

    @property
    def db_path(self) -> str:
        return self._db_path

    async def close(self) -> None:
        """Close persistent connections (for :memory: databases)."""
        await self._async_manager.close()
        self._sync_manager.close()

    def close_sync(self) -> None:
        """Close the sync persistent connection without an event loop."""
        self._sync_manager.close()

    @asynccontextmanager
    async def async_connection(self) -> AsyncIterator[aiosqlite.Connection]:
        async with self._async_manager.connection() as conn:
            yield conn

    @contextmanager
    def sync_connection(self) -> Iterator[sqlite3.Connection]:
        with self._sync_manager.connection() as conn:
            yield conn
