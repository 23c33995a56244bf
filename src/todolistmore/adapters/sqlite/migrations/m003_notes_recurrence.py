"""Migration 003: brain-dump notes and task recurrence."""

from __future__ import annotations

import sqlite3

from todolistmore.adapters.sqlite import schema
from todolistmore.adapters.sqlite.migrations.runner import Migration
from todolistmore.adapters.sqlite.utils import table_columns


class NotesRecurrenceMigration(Migration):
    """Create the notes table and add recurrence_rule to tasks."""

    @property
    def version(self) -> int:
        return 3

    @property
    def description(self) -> str:
        return "Add notes table and task recurrence"

    def up(self, connection: sqlite3.Connection) -> None:
        connection.execute(schema.CREATE_NOTES_TABLE)
        for index_sql in schema.CREATE_NOTE_INDEXES:
            connection.execute(index_sql)
        if "recurrence_rule" not in table_columns(connection, "tasks"):
            connection.execute(schema.ADD_TASK_RECURRENCE_COLUMN)


notes_recurrence_migration = NotesRecurrenceMigration()
