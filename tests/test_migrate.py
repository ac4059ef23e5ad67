"""Tests for snippetbox.data.migrate: forward-only migrations."""

import pytest

from snippetbox.data import Database, MigrationError, StoreError, migrate, migrations_for


@pytest.fixture
async def empty_db(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'm.db'}")
    await db.connect()
    yield db
    await db.disconnect()


class TestMigrate:
    async def test_applies_in_version_order(self, empty_db, tmp_path) -> None:
        migrations = tmp_path / "migrations"
        migrations.mkdir()
        (migrations / "002_add_row.sql").write_text("INSERT INTO t (x) VALUES (1);")
        (migrations / "001_create.sql").write_text("CREATE TABLE t (x INTEGER);")

        result = await migrate(empty_db, migrations)

        assert result.applied == ["001_create", "002_add_row"]
        assert result.total_available == 2
        assert await empty_db.fetch_val("SELECT COUNT(*) FROM t") == 1

    async def test_second_run_is_a_no_op(self, empty_db, tmp_path) -> None:
        migrations = tmp_path / "migrations"
        migrations.mkdir()
        (migrations / "001_create.sql").write_text("CREATE TABLE t (x INTEGER);")

        await migrate(empty_db, migrations)
        result = await migrate(empty_db, migrations)

        assert result.applied == []
        assert result.already_applied == 1
        assert "Already up to date" in result.summary

    async def test_failure_stops_the_run(self, empty_db, tmp_path) -> None:
        migrations = tmp_path / "migrations"
        migrations.mkdir()
        (migrations / "001_broken.sql").write_text("CREATE TABLE (;")
        (migrations / "002_create.sql").write_text("CREATE TABLE t (x INTEGER);")

        with pytest.raises(MigrationError, match="001_broken"):
            await migrate(empty_db, migrations)
        with pytest.raises(StoreError):
            await empty_db.fetch_val("SELECT COUNT(*) FROM t")

    async def test_missing_directory(self, empty_db, tmp_path) -> None:
        with pytest.raises(MigrationError, match="does not exist"):
            await migrate(empty_db, tmp_path / "nope")

    async def test_bad_filename(self, empty_db, tmp_path) -> None:
        (tmp_path / "create.sql").write_text("SELECT 1;")
        with pytest.raises(MigrationError, match="Invalid migration"):
            await migrate(empty_db, tmp_path)

    async def test_duplicate_versions(self, empty_db, tmp_path) -> None:
        (tmp_path / "001_a.sql").write_text("SELECT 1;")
        (tmp_path / "001_b.sql").write_text("SELECT 1;")
        with pytest.raises(MigrationError, match="Duplicate"):
            await migrate(empty_db, tmp_path)

    async def test_bundled_migrations_create_snippets(self, empty_db) -> None:
        directory = migrations_for(empty_db)
        assert directory.name == "sqlite"
        result = await migrate(empty_db, directory)
        assert "001_create_snippets" in result.applied
        assert await empty_db.fetch_val("SELECT COUNT(*) FROM snippets") == 0

    def test_postgres_migrations_are_bundled(self) -> None:
        directory = migrations_for(Database("postgresql://localhost/snippetbox"))
        assert (directory / "001_create_snippets.sql").is_file()
