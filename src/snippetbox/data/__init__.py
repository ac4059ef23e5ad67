"""Typed async database access for snippetbox.

SQL in, frozen dataclasses out. Not an ORM.

Basic usage::

    from snippetbox.data import Database

    db = Database("sqlite:///snippetbox.db")

    @dataclass(frozen=True, slots=True)
    class Snippet:
        id: int
        title: str

    rows = await db.fetch(Snippet, "SELECT id, title FROM snippets WHERE id > ?", 10)
    row = await db.fetch_one(Snippet, "SELECT id, title FROM snippets WHERE id = ?", 42)

SQLite needs nothing beyond the standard library. PostgreSQL needs
``asyncpg``::

    pip install snippetbox[postgres]
"""

from snippetbox.data.database import Database, to_pg_placeholders
from snippetbox.data.errors import (
    DataError,
    DriverNotInstalledError,
    MigrationError,
    NotFoundError,
    StoreError,
)
from snippetbox.data.migrate import MigrationResult, migrate, migrations_for

__all__ = [
    "DataError",
    "Database",
    "DriverNotInstalledError",
    "MigrationError",
    "MigrationResult",
    "NotFoundError",
    "StoreError",
    "migrate",
    "migrations_for",
    "to_pg_placeholders",
]
