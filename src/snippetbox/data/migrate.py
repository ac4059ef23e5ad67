"""Forward-only schema migrations.

A migrations directory holds ``NNN_description.sql`` files, applied in
ascending ``NNN`` order. Each applied version is recorded in the
``_snippetbox_migrations`` table, so a second run only applies what is
new. The first failure stops the run.

Usage::

    db = Database("sqlite:///snippetbox.db")
    result = await migrate(db, migrations_for(db))
    print(result.summary)
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from snippetbox.data.database import Database
from snippetbox.data.errors import MigrationError

# snippetbox/migrations/<driver>/
MIGRATIONS_ROOT = Path(__file__).resolve().parent.parent / "migrations"

_FILENAME = re.compile(r"(?P<version>\d+)_(?P<label>.+)")

_TABLE = "_snippetbox_migrations"
_SETUP = (
    f"CREATE TABLE IF NOT EXISTS {_TABLE} ("
    " version INTEGER PRIMARY KEY,"
    " name TEXT NOT NULL,"
    " applied_at TEXT NOT NULL)"
)
_RECORD = f"INSERT INTO {_TABLE} (version, name, applied_at) VALUES (?, ?, ?)"

_default_logger = logging.getLogger("snippetbox.data")


@dataclass(frozen=True, slots=True)
class Migration:
    version: int
    name: str
    path: Path

    def read(self) -> str:
        sql = self.path.read_text(encoding="utf-8").strip()
        if not sql:
            msg = f"Invalid migration {self.path.name}: file is empty"
            raise MigrationError(msg)
        return sql


@dataclass(frozen=True, slots=True)
class MigrationResult:
    """What one ``migrate()`` call did."""

    applied: list[str] = field(default_factory=list)
    already_applied: int = 0
    total_available: int = 0

    @property
    def summary(self) -> str:
        if self.applied:
            return f"Applied {len(self.applied)} migration(s): {', '.join(self.applied)}"
        return f"Already up to date ({self.already_applied} migrations applied)"


@dataclass(frozen=True, slots=True)
class _AppliedVersion:
    version: int


def migrations_for(db: Database) -> Path:
    """The bundled migrations directory matching *db*'s driver."""
    return MIGRATIONS_ROOT / db.driver


def load_migrations(directory: str | Path) -> list[Migration]:
    """Read *directory* into migrations sorted by version.

    Raises:
        MigrationError: The directory is missing, a filename does not
            start with a version number, or two files share a version.
    """
    root = Path(directory)
    if not root.is_dir():
        msg = f"Migration directory does not exist: {root}"
        raise MigrationError(msg)

    by_version: dict[int, Migration] = {}
    for path in root.glob("*.sql"):
        match = _FILENAME.fullmatch(path.stem)
        if match is None:
            msg = f"Invalid migration filename {path.name}: expected NNN_description.sql"
            raise MigrationError(msg)
        version = int(match["version"])
        if version in by_version:
            msg = f"Duplicate migration version {version}: {by_version[version].path.name}, {path.name}"
            raise MigrationError(msg)
        by_version[version] = Migration(version=version, name=path.stem, path=path)

    return [by_version[version] for version in sorted(by_version)]


async def migrate(
    db: Database,
    directory: str | Path,
    *,
    logger: logging.Logger | None = None,
) -> MigrationResult:
    """Apply every migration in *directory* not yet recorded in *db*.

    Raises:
        MigrationError: The directory is invalid or a migration failed.
            Migrations before the failing one stay applied.
    """
    log = logger or _default_logger
    available = load_migrations(directory)

    await db.execute(_SETUP)
    done = {row.version for row in await db.fetch(_AppliedVersion, f"SELECT version FROM {_TABLE}")}

    applied: list[str] = []
    for migration in available:
        if migration.version in done:
            continue
        sql = migration.read()
        try:
            await db.execute_script(sql)
            await db.execute(_RECORD, migration.version, migration.name, datetime.now(UTC).isoformat())
        except Exception as exc:
            msg = f"Migration {migration.name} failed: {exc}"
            raise MigrationError(msg) from exc
        log.info("applied migration %s", migration.name)
        applied.append(migration.name)

    return MigrationResult(applied=applied, already_applied=len(done), total_available=len(available))
