"""SQLite access for the async data layer.

``sqlite3`` blocks, so every call runs in an ``anyio`` worker thread.
Each method does its cursor work in a single thread hop and closes the
cursor before returning; only ``iterate`` keeps one open across hops.

The connection is opened with ``isolation_level=None``: a statement
outside ``BEGIN`` commits on its own, and ``Database.transaction()``
issues ``BEGIN`` / ``COMMIT`` / ``ROLLBACK`` explicitly.
``check_same_thread=False`` because successive calls may land on
different worker threads; ``Database`` serializes them with a lock.
"""

import sqlite3
from collections.abc import AsyncIterator, Callable, Sequence
from typing import Any

import anyio

_PRAGMAS = ("PRAGMA journal_mode=WAL", "PRAGMA foreign_keys=ON")


def _run_sync(func: Callable[..., Any], *args: Any) -> Any:
    return anyio.to_thread.run_sync(func, *args)


class SQLiteConnection:
    """One ``sqlite3`` connection with rows returned as dicts."""

    __slots__ = ("_conn",)

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    @property
    def in_transaction(self) -> bool:
        return self._conn.in_transaction

    # -- Sync bodies, each run whole in a worker thread --

    def _fetch(self, sql: str, params: Sequence[Any], limit: int | None) -> list[dict[str, Any]]:
        cursor = self._conn.execute(sql, params)
        try:
            rows = cursor.fetchall() if limit is None else cursor.fetchmany(limit)
            return [dict(row) for row in rows]
        finally:
            cursor.close()

    def _count(self, method: Callable[[str, Any], sqlite3.Cursor], sql: str, args: Any) -> int:
        cursor = method(sql, args)
        try:
            return cursor.rowcount
        finally:
            cursor.close()

    # -- Async API --

    async def fetch_all(self, sql: str, params: Sequence[Any]) -> list[dict[str, Any]]:
        return await _run_sync(self._fetch, sql, params, None)

    async def fetch_one(self, sql: str, params: Sequence[Any]) -> dict[str, Any] | None:
        rows = await _run_sync(self._fetch, sql, params, 1)
        return rows[0] if rows else None

    async def execute(self, sql: str, params: Sequence[Any]) -> int:
        return await _run_sync(self._count, self._conn.execute, sql, params)

    async def execute_many(self, sql: str, params_seq: Sequence[Sequence[Any]]) -> int:
        return await _run_sync(self._count, self._conn.executemany, sql, params_seq)

    async def execute_script(self, sql: str) -> None:
        """Run several statements. ``sqlite3`` commits any open transaction first."""
        await _run_sync(self._conn.executescript, sql)

    async def iterate(
        self, sql: str, params: Sequence[Any], batch_size: int
    ) -> AsyncIterator[dict[str, Any]]:
        """Yield rows, fetching ``batch_size`` at a time."""
        cursor = await _run_sync(self._conn.execute, sql, params)
        try:
            while rows := await _run_sync(cursor.fetchmany, batch_size):
                for row in rows:
                    yield dict(row)
        finally:
            await _run_sync(cursor.close)

    async def begin(self) -> None:
        await self.execute("BEGIN", ())

    async def commit(self) -> None:
        await self.execute("COMMIT", ())

    async def rollback(self) -> None:
        await self.execute("ROLLBACK", ())

    async def close(self) -> None:
        await _run_sync(self._conn.close)


def _open(path: str) -> sqlite3.Connection:
    conn = sqlite3.connect(path, isolation_level=None, check_same_thread=False)
    try:
        conn.row_factory = sqlite3.Row
        for pragma in _PRAGMAS:
            conn.execute(pragma).close()
    except BaseException:
        conn.close()
        raise
    return conn


async def connect(path: str) -> SQLiteConnection:
    """Open *path* (or ``:memory:``) in autocommit mode with WAL enabled."""
    return SQLiteConnection(await _run_sync(_open, path))
