"""Notification service backed by the store file.

Requests live in the ``notification_requests`` table so that any process
opening the store can list what is due. Authorization is the persisted
``reminders.authorized`` config flag; there is no interactive prompt.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime

from todolistmore.adapters.sqlite.utils import row_to_dict
from todolistmore.models import NotificationRequest
from todolistmore.services.notification_service import NotificationService
from todolistmore.services.reminder_scheduler import REMINDER_PREFIX
from todolistmore.utils.dates import from_storage, to_storage, utc_now
from todolistmore.utils.logger import get_logger

logger = get_logger(__name__)


class SqliteNotificationService(NotificationService):
    """Local notification registry in the shared store file."""

    def __init__(
        self,
        connection: sqlite3.Connection,
        *,
        authorized: bool = False,
    ):
        self.connection = connection
        self._authorized = authorized

    async def request_authorization(self) -> bool:
        return self._authorized

    async def check_authorization(self) -> bool:
        return self._authorized

    async def schedule(
        self, identifier: str, fire_time: datetime, title: str, body: str
    ) -> None:
        task_id = identifier.removeprefix(REMINDER_PREFIX)
        self.connection.execute(
            """INSERT OR REPLACE INTO notification_requests
               (identifier, task_id, fire_at, title, body, delivered, created_at)
               VALUES (?, ?, ?, ?, ?, 0, ?)""",
            (identifier, task_id, to_storage(fire_time), title, body, to_storage(utc_now())),
        )
        self.connection.commit()
        logger.debug("Notification %s registered for %s", identifier, fire_time.isoformat())

    async def cancel(self, identifier: str) -> None:
        self.connection.execute(
            "DELETE FROM notification_requests WHERE identifier = ?", (identifier,)
        )
        self.connection.commit()

    async def cancel_all(self) -> None:
        self.connection.execute("DELETE FROM notification_requests")
        self.connection.commit()

    async def get(self, identifier: str) -> NotificationRequest | None:
        cursor = self.connection.execute(
            "SELECT * FROM notification_requests WHERE identifier = ?", (identifier,)
        )
        row = cursor.fetchone()
        return self._row_to_request(row) if row else None

    async def pending(self) -> list[NotificationRequest]:
        """Undelivered requests in firing order."""
        cursor = self.connection.execute(
            "SELECT * FROM notification_requests WHERE delivered = 0 ORDER BY fire_at"
        )
        return [self._row_to_request(row) for row in cursor.fetchall()]

    async def due(self, now: datetime | None = None) -> list[NotificationRequest]:
        """Undelivered requests whose fire time has passed."""
        cursor = self.connection.execute(
            """SELECT * FROM notification_requests
               WHERE delivered = 0 AND fire_at <= ? ORDER BY fire_at""",
            (to_storage(now or utc_now()),),
        )
        return [self._row_to_request(row) for row in cursor.fetchall()]

    async def mark_delivered(self, identifier: str) -> bool:
        cursor = self.connection.execute(
            "UPDATE notification_requests SET delivered = 1 WHERE identifier = ?",
            (identifier,),
        )
        self.connection.commit()
        logger.info("Notification %s delivered", identifier)
        return cursor.rowcount > 0

    @staticmethod
    def _row_to_request(row: sqlite3.Row) -> NotificationRequest:
        data = row_to_dict(row)
        data.pop("created_at", None)
        data["fire_at"] = from_storage(data["fire_at"])
        return NotificationRequest(**data)
