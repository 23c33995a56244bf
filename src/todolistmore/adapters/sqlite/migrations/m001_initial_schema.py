"""Initial schema: categories and tasks."""

import sqlite3

from todolistmore.adapters.sqlite import schema
from todolistmore.adapters.sqlite.migrations.runner import Migration


class InitialSchemaMigration(Migration):
    """Migration 001: Create categories and tasks."""

    @property
    def version(self) -> int:
        return 1

    @property
    def description(self) -> str:
        return "Initial schema (categories, tasks)"

    def up(self, connection: sqlite3.Connection) -> None:
        connection.execute(schema.CREATE_CATEGORIES_TABLE)
        connection.execute(schema.CREATE_TASKS_TABLE)
        for index_sql in schema.CREATE_TASK_INDEXES:
            connection.execute(index_sql)


initial_migration = InitialSchemaMigration()
