"""Migration 002: reminder fields on tasks."""

from __future__ import annotations

import sqlite3

from todolistmore.adapters.sqlite import schema
from todolistmore.adapters.sqlite.migrations.runner import Migration
from todolistmore.adapters.sqlite.utils import table_columns


class ReminderFieldsMigration(Migration):
    """Add reminder_type and custom_reminder_offset to tasks."""

    @property
    def version(self) -> int:
        return 2

    @property
    def description(self) -> str:
        return "Add task reminder fields"

    def up(self, connection: sqlite3.Connection) -> None:
        existing = table_columns(connection, "tasks")
        for statement in schema.ADD_TASK_REMINDER_COLUMNS:
            column = statement.split("ADD COLUMN ")[1].split()[0]
            if column not in existing:
                connection.execute(statement)


reminders_migration = ReminderFieldsMigration()
