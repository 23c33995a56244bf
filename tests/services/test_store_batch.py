"""Tests for Store batch deletes (delete_all_completed, delete_all_data)."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta
from unittest.mock import patch

import pytest

from todolistmore.adapters.sqlite.task_repository import SqliteTaskRepository
from todolistmore.core.change_bus import ChangeKind, Topic
from todolistmore.core.exceptions import BatchOperationError
from todolistmore.models import CategoryCreate, EntityKind, NoteCreate, ReminderType, TaskCreate


async def _add_tasks(store, total: int, completed: int) -> list[str]:
    ids = []
    for i in range(total):
        task = await store.add_task(TaskCreate(title=f"Task {i}"))
        if i < completed:
            await store.toggle_task_completion(task.id)
        ids.append(task.id)
    return ids


class TestDeleteAllCompleted:
    @pytest.mark.asyncio
    async def test_removes_completed_only(self, store):
        ids = await _add_tasks(store, total=5, completed=3)

        assert await store.delete_all_completed() == 3
        assert await store.delete_all_completed() == 0

        remaining = await store.query(EntityKind.TASK)
        assert {t.id for t in remaining} == set(ids[3:])

    @pytest.mark.asyncio
    async def test_spans_several_chunks(self, store):
        store.config.store.batch_chunk_size = 2
        await _add_tasks(store, total=6, completed=5)

        assert await store.delete_all_completed() == 5
        assert len(await store.query(EntityKind.TASK)) == 1

    @pytest.mark.asyncio
    async def test_publishes_one_batch_payload(self, store):
        await _add_tasks(store, total=3, completed=2)
        subscription = store.bus.subscribe(Topic.TASKS_CHANGED)

        await store.delete_all_completed()

        [payload] = subscription.drain()
        assert payload.batch is True
        assert payload.count == 2
        assert payload.kind is ChangeKind.DELETED

    @pytest.mark.asyncio
    async def test_cancels_reminders_of_deleted_tasks(self, store, notifications):
        due = datetime.now().astimezone() + timedelta(days=2)
        task = await store.add_task(
            TaskCreate(title="Reminded", due_date=due, reminder_type=ReminderType.AT_TIME)
        )
        await store.toggle_task_completion(task.id)
        notifications.cancelled.clear()

        await store.delete_all_completed()

        assert notifications.cancelled == [f"task-reminder-{task.id}"]

    @pytest.mark.asyncio
    async def test_partial_failure_reports_processed(self, store):
        store.config.store.batch_chunk_size = 1
        await _add_tasks(store, total=3, completed=3)
        subscription = store.bus.subscribe(Topic.TASKS_CHANGED)

        original = SqliteTaskRepository.delete_ids
        calls = []

        def flaky(repository, task_ids):
            calls.append(task_ids)
            if len(calls) == 2:
                raise sqlite3.OperationalError("disk I/O error")
            return original(repository, task_ids)

        with patch.object(SqliteTaskRepository, "delete_ids", autospec=True, side_effect=flaky):
            with pytest.raises(BatchOperationError) as exc_info:
                await store.delete_all_completed()

        assert exc_info.value.processed == 1
        assert len(await store.query(EntityKind.TASK)) == 2
        [payload] = subscription.drain()
        assert payload.count == 1


class TestDeleteAllData:
    @pytest.mark.asyncio
    async def test_removes_tasks_and_categories_keeps_notes(self, store):
        category = await store.add_category(CategoryCreate(name="Work"))
        await store.add_task(TaskCreate(title="One", category_id=category.id))
        await store.add_task(TaskCreate(title="Two"))
        note = await store.add_note(NoteCreate(content="keep"))

        assert await store.delete_all_data() == 3

        assert await store.query(EntityKind.TASK) == []
        assert await store.query(EntityKind.CATEGORY) == []
        assert await store.get_note(note.id) is not None

    @pytest.mark.asyncio
    async def test_publishes_task_and_category_payloads(self, store):
        await store.add_category(CategoryCreate(name="Work"))
        await store.add_task(TaskCreate(title="One"))
        tasks_sub = store.bus.subscribe(Topic.TASKS_CHANGED)
        categories_sub = store.bus.subscribe(Topic.CATEGORIES_CHANGED)

        await store.delete_all_data()

        assert [p.count for p in tasks_sub.drain()] == [1]
        assert [p.count for p in categories_sub.drain()] == [1]

    @pytest.mark.asyncio
    async def test_cancels_every_reminder(self, store, notifications):
        await store.add_task(TaskCreate(title="One"))

        await store.delete_all_data()

        assert notifications.cancel_all_calls == 1

    @pytest.mark.asyncio
    async def test_empty_store(self, store):
        assert await store.delete_all_data() == 0
