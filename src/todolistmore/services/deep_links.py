"""Deep-link destinations opened from widgets."""

from __future__ import annotations

from enum import StrEnum
from urllib.parse import urlsplit

from todolistmore.models import Task, WidgetSnapshot
from todolistmore.utils.logger import get_logger

logger = get_logger(__name__)

DEEP_LINK_SCHEME = "todolistmore"


class DeepLink(StrEnum):
    TODAY = "today"
    PRIORITY = "priority"
    NEW_TASK = "new"

    @property
    def url(self) -> str:
        return f"{DEEP_LINK_SCHEME}://{self.value}"


def parse_deep_link(url: str) -> DeepLink | None:
    """Resolve ``todolistmore://<host>`` to a destination, or None."""
    parts = urlsplit(url)
    if parts.scheme != DEEP_LINK_SCHEME or not parts.hostname:
        logger.debug("Not a deep link: %s", url)
        return None
    try:
        return DeepLink(parts.hostname)
    except ValueError:
        logger.info("Unknown deep link destination: %s", url)
        return None


def tasks_for(snapshot: WidgetSnapshot, link: DeepLink) -> list[Task]:
    """Snapshot tasks backing a destination; NEW_TASK has none."""
    if link is DeepLink.TODAY:
        return snapshot.today_tasks
    if link is DeepLink.PRIORITY:
        return snapshot.high_priority_tasks
    return []
