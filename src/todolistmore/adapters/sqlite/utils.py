"""Utility functions for SQLite adapter."""

from __future__ import annotations

import sqlite3
import uuid
from datetime import datetime, timedelta
from typing import Any

from todolistmore.utils.dates import utc_now


def generate_uuid() -> str:
    """Generate a new UUID as string.

    Returns:
        UUID string (e.g., "123e4567-e89b-12d3-a456-426614174000")
    """
    return str(uuid.uuid4())


def row_to_dict(row: Any) -> dict[str, Any]:
    """Convert sqlite3.Row to dictionary.

    Args:
        row: sqlite3.Row object

    Returns:
        Dictionary with column names as keys
    """
    if row is None:
        return {}
    return dict(row)


def table_columns(connection: sqlite3.Connection, table: str) -> set[str]:
    """Column names of a table; empty when the table does not exist."""
    cursor = connection.execute(f"PRAGMA table_info({table})")
    return {row[1] for row in cursor.fetchall()}


def build_update_clause(updates: dict[str, Any]) -> tuple[str, list[Any]]:
    """Build SQL UPDATE SET clause from updates dictionary.

    Unlike a filter, None values are kept and written as NULL.

    Args:
        updates: Dictionary of column names to new values

    Returns:
        Tuple of (SET clause string, parameters list)
    """
    set_parts = [f"{key} = ?" for key in updates]
    return ", ".join(set_parts), list(updates.values())


def chunked(items: list[Any], size: int) -> list[list[Any]]:
    return [items[i : i + size] for i in range(0, len(items), size)]


def modified_after(previous: datetime | None) -> datetime:
    """Current time, nudged forward so it is strictly later than *previous*."""
    now = utc_now()
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now
