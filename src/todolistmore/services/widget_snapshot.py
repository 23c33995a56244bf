"""Read-only snapshots for widget processes.

A widget process is short-lived and cannot see the main process's
ChangeBus, so every snapshot re-opens the shared store file read-only, runs
the two widget queries and closes the file again. Nothing is cached between
calls.
"""

from __future__ import annotations

import sqlite3
from datetime import UTC, datetime, timedelta
from pathlib import Path

from todolistmore.adapters.sqlite.connection import DatabaseConnection
from todolistmore.adapters.sqlite.location import shared_store_path
from todolistmore.adapters.sqlite.task_repository import SqliteTaskRepository
from todolistmore.core.exceptions import StoreUnavailableError
from todolistmore.models import AppConfig, WidgetSnapshot
from todolistmore.utils.dates import local_now, next_midnight, to_local
from todolistmore.utils.logger import get_logger

logger = get_logger(__name__)


class WidgetSnapshotProvider:
    """Produces WidgetSnapshot values from the shared store file."""

    def __init__(self, config: AppConfig | None = None, *, store_path: str | Path | None = None):
        config = config or AppConfig()
        self.store_path = Path(store_path) if store_path else shared_store_path(
            config.store.shared_root
        )
        self.limit = config.widget.limit
        self.refresh_interval = timedelta(minutes=config.widget.refresh_interval_minutes)
        self.timeout = config.store.busy_timeout

    def next_refresh(self, now: datetime) -> datetime:
        """The earlier of the periodic refresh and the next local midnight."""
        now = to_local(now)
        periodic = (now.astimezone(UTC) + self.refresh_interval).astimezone(now.tzinfo)
        return min(periodic, next_midnight(now))

    async def snapshot(self, now: datetime | None = None) -> WidgetSnapshot:
        """Today's and high-priority tasks as of *now*.

        Never raises for an unavailable or unreadable store; the snapshot is
        then empty.
        """
        now = to_local(now) if now is not None else local_now()
        snapshot = WidgetSnapshot(date=now, next_refresh=self.next_refresh(now))

        database = DatabaseConnection(self.store_path, read_only=True, timeout=self.timeout)
        try:
            database.open()
            tasks = SqliteTaskRepository(database.connection, database.capabilities)
            today = await tasks.today(now, self.limit)
            high_priority = await tasks.high_priority(self.limit)
        except (StoreUnavailableError, sqlite3.Error, ValueError) as e:
            logger.warning("Widget snapshot unavailable: %s", e)
            return snapshot
        finally:
            database.close()

        return snapshot.model_copy(
            update={"today_tasks": today, "high_priority_tasks": high_priority}
        )
