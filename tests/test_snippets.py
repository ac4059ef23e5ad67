"""Tests for snippetbox.models.snippets: Insert, Get, Latest."""

from datetime import UTC, datetime, timedelta

import pytest

from snippetbox.data import NotFoundError, StoreError
from snippetbox.models import EXPIRY_DAYS, Snippet, SnippetModel
from snippetbox.models.snippets import LATEST_LIMIT

_EXPIRED_SQL = (
    "INSERT INTO snippets (title, content, created, expires) "
    "VALUES (?, ?, datetime('now', '-2 days'), datetime('now', '-1 days'))"
)


@pytest.fixture
def snippets(db) -> SnippetModel:
    return SnippetModel(db)


class TestInsert:
    async def test_returns_increasing_ids(self, snippets) -> None:
        first = await snippets.insert("O snail", "Climb Mount Fuji", 7)
        second = await snippets.insert("Over the wintry", "forest, winds howl", 365)
        assert first >= 1
        assert second > first

    @pytest.mark.parametrize("days", sorted(EXPIRY_DAYS))
    async def test_expires_is_created_plus_days(self, snippets, days: int) -> None:
        new_id = await snippets.insert("t", "c", days)
        snippet = await snippets.get(new_id)
        assert snippet.expires - snippet.created == timedelta(days=days)

    @pytest.mark.parametrize("days", [0, 2, 30, -1])
    async def test_invalid_expiry_rejected_before_sql(self, snippets, db, days: int) -> None:
        with pytest.raises(ValueError, match="expires_days"):
            await snippets.insert("t", "c", days)
        assert await db.fetch_val("SELECT COUNT(*) FROM snippets") == 0

    async def test_created_uses_store_clock(self, snippets) -> None:
        before = datetime.now(UTC).replace(microsecond=0) - timedelta(seconds=1)
        snippet = await snippets.get(await snippets.insert("t", "c", 1))
        after = datetime.now(UTC) + timedelta(seconds=1)
        assert before <= snippet.created <= after
        assert snippet.created.tzinfo is not None

    async def test_unicode_round_trip(self, snippets) -> None:
        title = "古池や" * 10
        snippet = await snippets.get(await snippets.insert(title, "蛙飛び込む\n水の音", 7))
        assert snippet.title == title
        assert snippet.content == "蛙飛び込む\n水の音"


class TestGet:
    async def test_returns_snippet(self, snippets) -> None:
        new_id = await snippets.insert("O snail", "Climb Mount Fuji", 7)
        snippet = await snippets.get(new_id)
        assert isinstance(snippet, Snippet)
        assert (snippet.id, snippet.title, snippet.content) == (new_id, "O snail", "Climb Mount Fuji")

    async def test_missing_is_not_found(self, snippets) -> None:
        with pytest.raises(NotFoundError):
            await snippets.get(999)

    async def test_expired_is_not_found(self, snippets, db) -> None:
        await db.execute(_EXPIRED_SQL, "old", "gone")
        old_id = await db.fetch_val("SELECT MAX(id) FROM snippets")
        with pytest.raises(NotFoundError):
            await snippets.get(old_id)
        # the row is still physically present
        assert await db.fetch_val("SELECT COUNT(*) FROM snippets WHERE id = ?", old_id) == 1

    async def test_null_column_is_store_error(self, snippets, db) -> None:
        # Bypass the NOT NULL constraint with a table lacking it
        await db.execute_script(
            "DROP TABLE snippets;"
            "CREATE TABLE snippets (id INTEGER PRIMARY KEY, title TEXT, content TEXT,"
            " created DATETIME, expires DATETIME);"
            "INSERT INTO snippets VALUES (1, NULL, 'c', datetime('now'), datetime('now', '+1 days'));"
        )
        with pytest.raises(StoreError):
            await snippets.get(1)


class TestLatest:
    async def test_empty(self, snippets) -> None:
        assert await snippets.latest() == []

    async def test_newest_first_and_limited(self, snippets) -> None:
        ids = [await snippets.insert(f"t{i}", "c", 7) for i in range(LATEST_LIMIT + 2)]
        latest = await snippets.latest()
        assert [s.id for s in latest] == sorted(ids, reverse=True)[:LATEST_LIMIT]

    async def test_skips_expired(self, snippets, db) -> None:
        live = await snippets.insert("live", "c", 1)
        await db.execute(_EXPIRED_SQL, "dead", "c")
        assert [s.id for s in await snippets.latest()] == [live]
