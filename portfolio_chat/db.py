"""Async access to the portfolio content database over libsql.

The synchronous ``libsql`` driver is pushed onto worker threads with
``asyncio.to_thread()`` so reads never block the event loop.  Target selection:

- ``TURSO_DATABASE_URL`` set → remote Turso database (production)
- otherwise → local SQLite file at ``database_path`` (dev/test)

Rows can come back as plain dicts keyed by column name so stores build typed
records without positional indexing.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

import libsql

from portfolio_chat.config import settings

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterable, Sequence
    from pathlib import Path


class _AsyncCursor:
    """Async view over a libsql cursor."""

    def __init__(self, cursor: Any) -> None:
        self._cursor = cursor

    async def fetchall(self) -> list[tuple]:
        return await asyncio.to_thread(self._cursor.fetchall)

    async def mappings(self, columns: Sequence[str]) -> list[dict[str, Any]]:
        """Fetch every remaining row as a ``{column: value}`` dict.

        *columns* must match the SELECT list order.
        """
        rows = await self.fetchall()
        return [dict(zip(columns, row, strict=True)) for row in rows]


class ContentConnection:
    """Async wrapper around one libsql connection."""

    def __init__(self, conn: Any) -> None:
        self._conn = conn

    async def execute(self, sql: str, params: tuple = ()) -> _AsyncCursor:
        cursor = await asyncio.to_thread(self._conn.execute, sql, params)
        return _AsyncCursor(cursor)

    async def execute_many(self, sql: str, rows: Iterable[tuple]) -> None:
        for params in rows:
            await self.execute(sql, params)

    async def commit(self) -> None:
        await asyncio.to_thread(self._conn.commit)

    async def close(self) -> None:
        await asyncio.to_thread(self._conn.close)


def _open_local(path: str) -> Any:
    conn = libsql.connect(path)
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA busy_timeout=5000")
    return conn


async def get_connection(local_path_override: Path | None = None) -> ContentConnection:
    """Open a connection to the content database.

    *local_path_override* (used for test isolation) wins over every setting.
    """
    if local_path_override is not None:
        local_path_override.parent.mkdir(parents=True, exist_ok=True)
        raw = await asyncio.to_thread(_open_local, str(local_path_override))
    elif settings.turso_database_url:
        raw = await asyncio.to_thread(
            libsql.connect,
            database=settings.turso_database_url,
            auth_token=settings.turso_auth_token,
        )
    else:
        settings.database_path.parent.mkdir(parents=True, exist_ok=True)
        raw = await asyncio.to_thread(_open_local, str(settings.database_path))
    return ContentConnection(raw)


@asynccontextmanager
async def connection(local_path_override: Path | None = None) -> AsyncIterator[ContentConnection]:
    """``async with connection() as db:`` — closes the connection on exit."""
    db = await get_connection(local_path_override)
    try:
        yield db
    finally:
        await db.close()
