"""Tests for SqliteCategoryRepository and SqliteNoteRepository."""

from __future__ import annotations

import sqlite3
from datetime import timedelta

import pytest

from todolistmore.adapters.sqlite.capabilities import detect_capabilities
from todolistmore.adapters.sqlite.category_repository import SqliteCategoryRepository
from todolistmore.adapters.sqlite.migrations import ALL_MIGRATIONS, MigrationRunner
from todolistmore.adapters.sqlite.note_repository import SqliteNoteRepository
from todolistmore.adapters.sqlite.task_repository import SqliteTaskRepository
from todolistmore.models import (
    CategoryCreate,
    CategoryFilters,
    NoteCreate,
    NoteFilters,
    TaskCreate,
)
from todolistmore.utils.dates import to_storage, utc_now


@pytest.fixture()
def connection():
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    MigrationRunner(conn).run_migrations(ALL_MIGRATIONS)
    yield conn
    conn.close()


@pytest.fixture()
def categories(connection):
    return SqliteCategoryRepository(connection)


@pytest.fixture()
def notes(connection):
    return SqliteNoteRepository(connection)


@pytest.fixture()
def tasks(connection):
    return SqliteTaskRepository(connection, detect_capabilities(connection))


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


class TestCategoryRepository:
    @pytest.mark.asyncio
    async def test_add_and_get(self, categories):
        category = await categories.add(CategoryCreate(name="Work", color_hex="#112233"))
        assert await categories.get(category.id) == category
        assert category.color_hex == "#112233"

    @pytest.mark.asyncio
    async def test_invalid_stored_color_reads_as_default(self, categories, connection):
        connection.execute("INSERT INTO categories (id, name, color_hex) VALUES ('c', 'X', 'red')")
        assert (await categories.get("c")).color_hex == "#007AFF"

    @pytest.mark.asyncio
    async def test_duplicate_names_allowed(self, categories):
        await categories.add(CategoryCreate(name="Work"))
        await categories.add(CategoryCreate(name="Work"))

        assert len(await categories.list_all(CategoryFilters(name="Work"))) == 2

    @pytest.mark.asyncio
    async def test_search_and_sort(self, categories):
        await categories.add(CategoryCreate(name="Home"))
        await categories.add(CategoryCreate(name="homework"))
        await categories.add(CategoryCreate(name="Gym"))

        found = await categories.list_all(CategoryFilters(search="home", sort="name:desc"))

        assert [c.name for c in found] == ["homework", "Home"]

    @pytest.mark.asyncio
    async def test_update_missing(self, categories):
        assert await categories.update("missing", {"name": "x"}) is None

    @pytest.mark.asyncio
    async def test_delete_detaches_tasks(self, categories, tasks):
        category = await categories.add(CategoryCreate(name="Work"))
        task = await tasks.add(TaskCreate(title="Report", category_id=category.id))

        assert await categories.delete(category.id) is True

        detached = await tasks.get(task.id)
        assert detached.category_id is None
        assert detached.date_modified > task.date_modified
        assert await categories.delete(category.id) is False

    @pytest.mark.asyncio
    async def test_delete_keeps_date_modified_increasing(self, categories, tasks, connection):
        category = await categories.add(CategoryCreate(name="Work"))
        task = await tasks.add(TaskCreate(title="Report", category_id=category.id))
        # A modification stamped ahead of the clock must still be superseded
        ahead = utc_now() + timedelta(hours=1)
        connection.execute(
            "UPDATE tasks SET date_modified = ? WHERE id = ?", (to_storage(ahead), task.id)
        )
        connection.commit()

        await categories.delete(category.id)

        assert (await tasks.get(task.id)).date_modified == ahead + timedelta(microseconds=1)

    @pytest.mark.asyncio
    async def test_delete_all(self, categories, tasks):
        category = await categories.add(CategoryCreate(name="Work"))
        await categories.add(CategoryCreate(name="Home"))
        task = await tasks.add(TaskCreate(title="Report", category_id=category.id))

        assert categories.delete_all() == 2
        assert (await tasks.get(task.id)).category_id is None


# ---------------------------------------------------------------------------
# Notes
# ---------------------------------------------------------------------------


class TestNoteRepository:
    @pytest.mark.asyncio
    async def test_add_update_delete(self, notes):
        note = await notes.add(NoteCreate(content="Groceries", tags="home"))

        updated = await notes.update(note.id, {"tags": "errands"})
        assert updated.tags == "errands"
        assert updated.content == "Groceries"
        assert updated.date_modified > note.date_modified

        assert await notes.delete(note.id) is True
        assert await notes.get(note.id) is None

    @pytest.mark.asyncio
    async def test_search_matches_tags(self, notes):
        tagged = await notes.add(NoteCreate(content="Call", tags="phone"))
        await notes.add(NoteCreate(content="Write"))

        found = await notes.list_all(NoteFilters(search="PHONE"))

        assert [n.id for n in found] == [tagged.id]

    @pytest.mark.asyncio
    async def test_sort_oldest_first(self, notes):
        first = await notes.add(NoteCreate(content="1"))
        second = await notes.add(NoteCreate(content="2"))

        found = await notes.list_all(NoteFilters(sort="date_created:asc", limit=5))

        assert [n.id for n in found] == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_update_missing(self, notes):
        assert await notes.update("missing", {"content": "x"}) is None
