"""Shared fixtures: a migrated SQLite database and an assembled app."""

import pytest

from snippetbox.config import AppConfig
from snippetbox.data import Database, migrate, migrations_for
from snippetbox.testing import TestClient
from snippetbox.web import create_app


@pytest.fixture
async def db(tmp_path):
    """A fresh SQLite database with the bundled migrations applied."""
    database = Database(f"sqlite:///{tmp_path / 'test.db'}")
    await database.connect()
    await migrate(database, migrations_for(database))
    yield database
    await database.disconnect()


@pytest.fixture
def config(tmp_path) -> AppConfig:
    return AppConfig(dsn=f"sqlite:///{tmp_path / 'app.db'}")


@pytest.fixture
def app(config):
    return create_app(config)


@pytest.fixture
async def client(app):
    async with TestClient(app) as c:
        yield c
