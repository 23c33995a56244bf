"""Migration 004: local notification registry."""

from __future__ import annotations

import sqlite3

from todolistmore.adapters.sqlite import schema
from todolistmore.adapters.sqlite.migrations.runner import Migration


class NotificationRegistryMigration(Migration):
    @property
    def version(self) -> int:
        return 4

    @property
    def description(self) -> str:
        return "Add notification_requests table"

    def up(self, connection: sqlite3.Connection) -> None:
        connection.execute(schema.CREATE_NOTIFICATION_REQUESTS_TABLE)
        for index_sql in schema.CREATE_NOTIFICATION_INDEXES:
            connection.execute(index_sql)


notification_registry_migration = NotificationRegistryMigration()
