"""Contract for the platform notification service.

The Reminder Scheduler only talks to this interface. Implementations decide
how a registered request is eventually delivered.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime


class NotificationService(ABC):
    """Registers, cancels and authorizes one-shot local notifications."""

    @abstractmethod
    async def request_authorization(self) -> bool:
        """Ask the user for permission to deliver notifications.

        Returns:
            True if notifications may be delivered
        """

    @abstractmethod
    async def check_authorization(self) -> bool:
        """Current permission state, without prompting."""

    @abstractmethod
    async def schedule(
        self, identifier: str, fire_time: datetime, title: str, body: str
    ) -> None:
        """Register a request, replacing any request with the same identifier."""

    @abstractmethod
    async def cancel(self, identifier: str) -> None:
        """Remove both the pending and the delivered request for an identifier."""

    @abstractmethod
    async def cancel_all(self) -> None:
        """Remove every pending and delivered request."""
