"""Reminder scheduling for tasks.

Each task has at most one registered notification, identified by
``task-reminder-<task id>``. ``reconcile`` is the single entry point the
Store calls after task mutations: it always removes the existing request and
then registers a new one only if the task still qualifies.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from todolistmore.models import ReminderType, StoreCapabilities, Task
from todolistmore.services.notification_service import NotificationService
from todolistmore.utils.dates import ensure_aware, format_due, utc_now
from todolistmore.utils.logger import get_logger

logger = get_logger(__name__)

REMINDER_PREFIX = "task-reminder-"
DEFAULT_GRACE_SECONDS = 30


def reminder_identifier(task_id: str) -> str:
    return f"{REMINDER_PREFIX}{task_id}"


def compute_fire_time(
    due_date: datetime,
    reminder_type: ReminderType,
    custom_offset: float | None,
    now: datetime,
    grace_seconds: int = DEFAULT_GRACE_SECONDS,
) -> datetime | None:
    """When a reminder for *due_date* should fire.

    Args:
        due_date: Task due date
        reminder_type: Offset kind
        custom_offset: Seconds relative to the due date, used for CUSTOM
        now: Current time
        grace_seconds: Delay used when the computed time is not in the future

    Returns:
        The fire time, or None when the reminder type yields no reminder
    """
    if reminder_type is ReminderType.NONE:
        return None
    if reminder_type is ReminderType.CUSTOM:
        if custom_offset is None:
            return None
        offset = float(custom_offset)
    else:
        offset = reminder_type.offset_seconds

    fire_time = ensure_aware(due_date).astimezone(UTC) + timedelta(seconds=offset)
    now = ensure_aware(now)
    if fire_time <= now:
        return now + timedelta(seconds=grace_seconds)
    return fire_time


def notification_body(task: Task) -> str:
    if task.description and task.description.strip():
        return task.description
    if task.due_date is not None:
        return f"Due: {format_due(task.due_date)}"
    return ""


class ReminderScheduler:
    """Keeps registered notifications in step with task state."""

    def __init__(
        self,
        notifications: NotificationService,
        capabilities: StoreCapabilities,
        grace_seconds: int = DEFAULT_GRACE_SECONDS,
    ):
        self.notifications = notifications
        self.capabilities = capabilities
        self.grace_seconds = grace_seconds

    async def request_authorization(self) -> bool:
        granted = await self.notifications.request_authorization()
        logger.info("Notification authorization %s", "granted" if granted else "denied")
        return granted

    async def reconcile(self, task: Task, now: datetime | None = None) -> datetime | None:
        """Cancel the task's reminder, then register it again if it still applies.

        Returns:
            The registered fire time, or None if nothing was registered
        """
        identifier = reminder_identifier(task.id)
        await self.notifications.cancel(identifier)

        if task.is_completed or task.due_date is None:
            return None
        if task.reminder_type is ReminderType.NONE or not self.capabilities.reminders:
            return None

        fire_time = compute_fire_time(
            task.due_date,
            task.reminder_type,
            task.custom_reminder_offset,
            now or utc_now(),
            self.grace_seconds,
        )
        if fire_time is None:
            return None

        if not await self.notifications.check_authorization():
            logger.info("Notifications not authorized; reminder for %s not registered", task.id)
            return None

        await self.notifications.schedule(
            identifier, fire_time, task.title, notification_body(task)
        )
        logger.debug("Reminder for %s registered at %s", task.id, fire_time.isoformat())
        return fire_time

    async def cancel(self, task_id: str) -> None:
        await self.notifications.cancel(reminder_identifier(task_id))

    async def cancel_all(self) -> None:
        await self.notifications.cancel_all()
        logger.info("All reminders cancelled")
