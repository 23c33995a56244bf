"""SQLite implementation of TaskRepository."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from typing import Any

from todolistmore.adapters.sqlite.utils import (
    build_update_clause,
    generate_uuid,
    modified_after,
    row_to_dict,
)
from todolistmore.models import Priority, StoreCapabilities, Task, TaskCreate, TaskFilters
from todolistmore.repositories import TaskRepository
from todolistmore.utils.dates import (
    from_storage,
    next_midnight,
    start_of_day,
    to_storage,
    utc_now,
)

_DATE_FIELDS = ("due_date", "date_created", "date_modified")
_REMINDER_FIELDS = ("reminder_type", "custom_reminder_offset")
_INT_FIELDS = ("priority", "reminder_type", "recurrence_rule", "is_completed")


class SqliteTaskRepository(TaskRepository):
    """SQLite implementation of task repository.

    Optional columns (reminders, recurrence) are only read or written when
    the opened file has them, so an older file opened read-only by a widget
    still answers queries.
    """

    def __init__(self, connection: sqlite3.Connection, capabilities: StoreCapabilities):
        self.connection = connection
        self.capabilities = capabilities

    async def list_all(self, filters: TaskFilters) -> list[Task]:
        """List all tasks with filtering."""
        query = "SELECT * FROM tasks WHERE 1=1"
        params: list[Any] = []

        if filters.is_completed is not None:
            query += " AND is_completed = ?"
            params.append(int(filters.is_completed))

        if filters.priority is not None:
            query += " AND priority = ?"
            params.append(int(filters.priority))

        if filters.category_id:
            query += " AND category_id = ?"
            params.append(filters.category_id)

        if filters.has_due_date is True:
            query += " AND due_date IS NOT NULL"
        elif filters.has_due_date is False:
            query += " AND due_date IS NULL"

        if filters.due_after:
            query += " AND due_date >= ?"
            params.append(to_storage(filters.due_after))

        if filters.due_before:
            query += " AND due_date < ?"
            params.append(to_storage(filters.due_before))

        if filters.search:
            query += " AND (title LIKE ? OR description LIKE ?)"
            search_term = f"%{filters.search}%"
            params.extend([search_term, search_term])

        # Sorting; tasks without a value for the sort field go last
        sort_field, *sort_dir = (filters.sort or "due_date").split(":")
        direction = sort_dir[0].upper() if sort_dir else "ASC"
        collate = " COLLATE NOCASE" if sort_field == "title" else ""
        query += (
            f" ORDER BY {sort_field} IS NULL, {sort_field}{collate} {direction},"
            " date_created ASC"
        )

        # Pagination
        if filters.limit is not None or filters.offset is not None:
            query += " LIMIT ?"
            params.append(filters.limit if filters.limit is not None else -1)
        if filters.offset is not None:
            query += " OFFSET ?"
            params.append(filters.offset)

        cursor = self.connection.execute(query, params)
        return [self._row_to_task(row) for row in cursor.fetchall()]

    async def today(self, now: datetime, limit: int | None = None) -> list[Task]:
        """Incomplete tasks due during the local calendar day containing *now*."""
        day_start = start_of_day(now)
        return await self.list_all(
            TaskFilters(
                is_completed=False,
                due_after=day_start,
                due_before=next_midnight(day_start),
                sort="due_date:asc",
                limit=limit,
            )
        )

    async def high_priority(self, limit: int | None = None) -> list[Task]:
        """Incomplete high-priority tasks, soonest due first and undated last."""
        return await self.list_all(
            TaskFilters(
                is_completed=False,
                priority=Priority.HIGH,
                sort="due_date:asc",
                limit=limit,
            )
        )

    async def get(self, task_id: str) -> Task | None:
        cursor = self.connection.execute("SELECT * FROM tasks WHERE id = ?", (task_id,))
        row = cursor.fetchone()
        return self._row_to_task(row) if row else None

    async def add(self, task_data: TaskCreate) -> Task:
        """Create a new task."""
        now = utc_now()
        values = {
            "id": generate_uuid(),
            "title": task_data.title,
            "description": task_data.description,
            "due_date": task_data.due_date,
            "priority": task_data.priority,
            "is_completed": False,
            "date_created": now,
            "date_modified": now,
            "category_id": task_data.category_id,
            "reminder_type": task_data.reminder_type,
            "custom_reminder_offset": task_data.custom_reminder_offset,
            "recurrence_rule": task_data.recurrence_rule,
        }
        row = self._to_row(values)
        columns = ", ".join(row)
        placeholders = ", ".join("?" for _ in row)
        self.connection.execute(
            f"INSERT INTO tasks ({columns}) VALUES ({placeholders})", list(row.values())
        )
        self.connection.commit()

        task = await self.get(values["id"])
        assert task is not None
        return task

    async def update(self, task_id: str, changes: dict[str, Any]) -> Task | None:
        """Update an existing task."""
        current = await self.get(task_id)
        if current is None:
            return None

        row = self._to_row(changes)
        row["date_modified"] = to_storage(modified_after(current.date_modified))
        set_clause, params = build_update_clause(row)
        self.connection.execute(
            f"UPDATE tasks SET {set_clause} WHERE id = ?", [*params, task_id]
        )
        self.connection.commit()
        return await self.get(task_id)

    async def delete(self, task_id: str) -> bool:
        cursor = self.connection.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
        self.connection.commit()
        return cursor.rowcount > 0

    def completed_ids(self) -> list[str]:
        cursor = self.connection.execute("SELECT id FROM tasks WHERE is_completed = 1")
        return [row[0] for row in cursor.fetchall()]

    def all_ids(self) -> list[str]:
        cursor = self.connection.execute("SELECT id FROM tasks")
        return [row[0] for row in cursor.fetchall()]

    def delete_ids(self, task_ids: list[str]) -> int:
        if not task_ids:
            return 0
        placeholders = ", ".join("?" for _ in task_ids)
        try:
            cursor = self.connection.execute(
                f"DELETE FROM tasks WHERE id IN ({placeholders})", task_ids
            )
            self.connection.commit()
        except sqlite3.Error:
            self.connection.rollback()
            raise
        return cursor.rowcount

    def _to_row(self, values: dict[str, Any]) -> dict[str, Any]:
        """Convert Task field values to column values the file supports."""
        row = {}
        for key, value in values.items():
            if key in _REMINDER_FIELDS and not self.capabilities.reminders:
                continue
            if key == "recurrence_rule" and not self.capabilities.recurrence:
                continue
            if key in _DATE_FIELDS:
                value = to_storage(value)
            elif value is not None and key in _INT_FIELDS:
                value = int(value)
            row[key] = value
        return row

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        task_dict = row_to_dict(row)
        for key in _DATE_FIELDS:
            task_dict[key] = from_storage(task_dict.get(key))
        return Task(**task_dict)
