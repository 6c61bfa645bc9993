"""SQLite key-value cache for crate searches and search indexes.

Values are opaque bytes; callers serialise before ``set`` and validate after
``get``. Entries never expire. Crate versions are immutable, and a stale
crate list is refreshed by clearing the whole store.

Read failures are caught internally and treated as a cache miss, so a broken
cache never blocks a lookup. Write failures are logged and ignored (the
fetched result is still returned). Only failing to open the store at all is
fatal: ``open_cache`` raises ``DocsRsError`` with ``CACHE_ERROR``.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING

import aiosqlite
import structlog

from docsrs_lookup.errors import DocsRsError, ErrorCode

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

log = structlog.get_logger()

_CREATE_KV_TABLE = """
CREATE TABLE IF NOT EXISTS kv (
    key   TEXT PRIMARY KEY,
    value BLOB NOT NULL
)
"""


def crate_key(name: str) -> str:
    return f"crate:{name}"


def search_index_key(name: str, version: str) -> str:
    return f"crate-search-index:{name}:{version}"


class Cache:
    """SQLite-backed key-value store implementing CacheProtocol."""

    def __init__(self, db: aiosqlite.Connection) -> None:
        self._db = db

    async def init_db(self) -> None:
        """Create the table and set WAL mode. Called once per process."""
        await self._db.execute("PRAGMA journal_mode = WAL")
        await self._db.execute(_CREATE_KV_TABLE)
        await self._db.commit()

    async def get(self, key: str) -> bytes | None:
        """Read a value. Returns ``None`` on cache miss or read failure."""
        try:
            cursor = await self._db.execute("SELECT value FROM kv WHERE key = ?", (key,))
            row = await cursor.fetchone()
        except aiosqlite.Error:
            log.warning("cache_read_error", key=key, exc_info=True)
            return None

        if row is None:
            return None
        return bytes(row[0])

    async def set(self, key: str, value: bytes) -> None:
        """Write a value, replacing any previous one. Non-fatal on failure."""
        try:
            await self._db.execute(
                "INSERT OR REPLACE INTO kv (key, value) VALUES (?, ?)",
                (key, value),
            )
            await self._db.commit()
            log.debug("cache_set", key=key, size=len(value))
        except aiosqlite.Error:
            log.warning("cache_write_error", key=key, exc_info=True)

    async def clear(self) -> None:
        """Delete every entry. Safe to call on an empty store.

        Unlike reads and writes, a failed clear is reported: the user asked
        for it explicitly.
        """
        try:
            cursor = await self._db.execute("DELETE FROM kv")
            deleted = cursor.rowcount
            await self._db.commit()
        except aiosqlite.Error as exc:
            raise DocsRsError(
                code=ErrorCode.CACHE_ERROR,
                message=f"Cannot clear cache: {exc}",
                suggestion="Delete the cache file by hand.",
            ) from exc
        log.info("cache_cleared", deleted=deleted)


@asynccontextmanager
async def open_cache(db_path: str) -> AsyncIterator[Cache]:
    """Open (creating if needed) the cache at *db_path* for one process run.

    ``":memory:"`` is accepted for tests. The connection is closed on every
    exit path.
    """
    target = db_path
    try:
        if db_path != ":memory:":
            path = Path(db_path).expanduser()
            path.parent.mkdir(parents=True, exist_ok=True)
            target = str(path)
        db = await aiosqlite.connect(target)
    except (OSError, aiosqlite.Error) as exc:
        raise DocsRsError(
            code=ErrorCode.CACHE_ERROR,
            message=f"Cannot open cache at {db_path}: {exc}",
            suggestion="Check that the cache directory is writable.",
        ) from exc

    try:
        cache = Cache(db)
        try:
            await cache.init_db()
        except aiosqlite.Error as exc:
            raise DocsRsError(
                code=ErrorCode.CACHE_ERROR,
                message=f"Cannot initialise cache at {db_path}: {exc}",
                suggestion="Delete the cache file and retry.",
            ) from exc
        yield cache
    finally:
        await db.close()
