"""Data layer error hierarchy.

Driver exceptions never leave this package: every ``sqlite3`` or
``asyncpg`` failure is re-raised as ``StoreError`` with the original
chained as ``__cause__``.
"""

from snippetbox.errors import SnippetboxError


class DataError(SnippetboxError):
    """Base for all snippetbox.data errors."""


class DriverNotInstalledError(DataError):
    """Raised when the required database driver is not installed."""


class StoreError(DataError):
    """Raised when the store fails: connection, constraint, query, or row mapping."""


class NotFoundError(DataError):
    """Raised when a lookup finds no live record."""


class MigrationError(DataError):
    """Raised when a migration file is invalid or fails to apply."""
