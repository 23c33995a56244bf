"""Detect what an opened store file supports."""

from __future__ import annotations

import sqlite3

from todolistmore.adapters.sqlite.utils import table_columns
from todolistmore.models.core import StoreCapabilities

REMINDER_COLUMNS = frozenset({"reminder_type", "custom_reminder_offset"})


def detect_capabilities(connection: sqlite3.Connection) -> StoreCapabilities:
    """Inspect the table layout once, without writing to the file."""
    version = 0
    if table_columns(connection, "schema_version"):
        row = connection.execute("SELECT MAX(version) FROM schema_version").fetchone()
        version = row[0] or 0

    task_columns = table_columns(connection, "tasks")
    return StoreCapabilities(
        schema_version=version,
        reminders=REMINDER_COLUMNS <= task_columns,
        recurrence="recurrence_rule" in task_columns,
        notes=bool(table_columns(connection, "notes")),
        notification_registry=bool(table_columns(connection, "notification_requests")),
    )
