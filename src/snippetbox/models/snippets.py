"""Snippet persistence.

All SQL for the ``snippets`` table lives here. Timestamps come from the
store's clock: ``created`` and ``expires`` are computed inside the
INSERT, and liveness is checked against ``CURRENT_TIMESTAMP`` at query
time, so the application clock never takes part.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from snippetbox.data import Database, NotFoundError, StoreError

EXPIRY_DAYS: frozenset[int] = frozenset({1, 7, 365})

LATEST_LIMIT = 10

# Date arithmetic is the only part of the SQL that differs by dialect
_INSERT_SQL = {
    "sqlite": (
        "INSERT INTO snippets (title, content, created, expires) "
        "VALUES (?, ?, datetime('now'), datetime('now', '+' || ? || ' days')) "
        "RETURNING id"
    ),
    "postgresql": (
        "INSERT INTO snippets (title, content, created, expires) "
        "VALUES (?, ?, NOW(), NOW() + make_interval(days => ?)) "
        "RETURNING id"
    ),
}

_GET_SQL = (
    "SELECT id, title, content, created, expires FROM snippets "
    "WHERE expires > CURRENT_TIMESTAMP AND id = ?"
)

_LATEST_SQL = (
    "SELECT id, title, content, created, expires FROM snippets "
    "WHERE expires > CURRENT_TIMESTAMP ORDER BY id DESC LIMIT ?"
)


@dataclass(frozen=True, slots=True)
class Snippet:
    """One shareable text record."""

    id: int
    title: str
    content: str
    created: datetime
    expires: datetime


class SnippetModel:
    """Insert, Get, and Latest for snippets.

    Usage::

        snippets = SnippetModel(db)
        new_id = await snippets.insert("O snail", "Climb Mount Fuji...", 7)
        snippet = await snippets.get(new_id)
        recent = await snippets.latest()
    """

    __slots__ = ("_db", "_insert_sql")

    def __init__(self, db: Database) -> None:
        self._db = db
        self._insert_sql = _INSERT_SQL[db.driver]

    async def insert(self, title: str, content: str, expires_days: int) -> int:
        """Insert a snippet and return its store-assigned id.

        Raises ``ValueError`` for an expiry outside 1, 7, or 365 days
        before any SQL runs. Raises ``StoreError`` on store failure.
        """
        if expires_days not in EXPIRY_DAYS:
            msg = f"expires_days must be one of {sorted(EXPIRY_DAYS)}, got {expires_days!r}"
            raise ValueError(msg)
        new_id = await self._db.fetch_val(self._insert_sql, title, content, expires_days)
        if new_id is None:
            msg = "INSERT did not return an id"
            raise StoreError(msg)
        return int(new_id)

    async def get(self, snippet_id: int) -> Snippet:
        """Return the live snippet with *snippet_id*.

        Raises ``NotFoundError`` when no such row exists or it has expired.
        """
        snippet = await self._db.fetch_one(Snippet, _GET_SQL, snippet_id)
        if snippet is None:
            msg = f"no live snippet with id {snippet_id}"
            raise NotFoundError(msg)
        return snippet

    async def latest(self) -> list[Snippet]:
        """Return up to ten live snippets, newest id first."""
        return await self._db.fetch(Snippet, _LATEST_SQL, LATEST_LIMIT)
