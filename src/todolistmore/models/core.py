"""Task, category and note data models."""

from __future__ import annotations

import re
from datetime import datetime
from enum import IntEnum, StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from todolistmore.utils.dates import add_days, add_months, ensure_aware, to_local

DEFAULT_CATEGORY_COLOR = "#007AFF"

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


def is_hex_color(value: str) -> bool:
    """Whether *value* is a #RRGGBB color."""
    return bool(_HEX_COLOR.match(value.strip()))


class Priority(IntEnum):
    """Task priority levels (stored as integers)."""

    LOW = 1
    MEDIUM = 2
    HIGH = 3

    @classmethod
    def coerce(cls, value) -> Priority:
        """Map any stored or user value to a priority, defaulting to MEDIUM."""
        if isinstance(value, str) and value.strip().upper() in cls.__members__:
            return cls[value.strip().upper()]
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            return cls.MEDIUM


class ReminderType(IntEnum):
    """When a reminder fires relative to the due date."""

    NONE = 0
    AT_TIME = 1
    FIFTEEN_MINUTES_BEFORE = 2
    ONE_HOUR_BEFORE = 3
    ONE_DAY_BEFORE = 4
    CUSTOM = 5

    @property
    def offset_seconds(self) -> int | None:
        """Fixed offset from the due date; None for NONE and CUSTOM."""
        return _REMINDER_OFFSETS.get(self)

    @property
    def label(self) -> str:
        return _REMINDER_LABELS[self]

    @classmethod
    def coerce(cls, value) -> ReminderType:
        if isinstance(value, str):
            key = value.strip().lower()
            if key in _REMINDER_ALIASES:
                return _REMINDER_ALIASES[key]
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            return cls.NONE


_REMINDER_OFFSETS = {
    ReminderType.AT_TIME: 0,
    ReminderType.FIFTEEN_MINUTES_BEFORE: -15 * 60,
    ReminderType.ONE_HOUR_BEFORE: -60 * 60,
    ReminderType.ONE_DAY_BEFORE: -24 * 60 * 60,
}

_REMINDER_LABELS = {
    ReminderType.NONE: "None",
    ReminderType.AT_TIME: "At time of event",
    ReminderType.FIFTEEN_MINUTES_BEFORE: "15 minutes before",
    ReminderType.ONE_HOUR_BEFORE: "1 hour before",
    ReminderType.ONE_DAY_BEFORE: "1 day before",
    ReminderType.CUSTOM: "Custom",
}

_REMINDER_ALIASES = {
    "none": ReminderType.NONE,
    "attime": ReminderType.AT_TIME,
    "at-time": ReminderType.AT_TIME,
    "-15m": ReminderType.FIFTEEN_MINUTES_BEFORE,
    "15m": ReminderType.FIFTEEN_MINUTES_BEFORE,
    "-1h": ReminderType.ONE_HOUR_BEFORE,
    "1h": ReminderType.ONE_HOUR_BEFORE,
    "-1d": ReminderType.ONE_DAY_BEFORE,
    "1d": ReminderType.ONE_DAY_BEFORE,
    "custom": ReminderType.CUSTOM,
}


class RecurrenceRule(IntEnum):
    """Repeat period for recurring tasks."""

    NONE = 0
    DAILY = 1
    WEEKLY = 2
    MONTHLY = 3
    YEARLY = 4

    @classmethod
    def coerce(cls, value) -> RecurrenceRule:
        if isinstance(value, str) and value.strip().upper() in cls.__members__:
            return cls[value.strip().upper()]
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            return cls.NONE

    def advance(self, value: datetime) -> datetime:
        """The next occurrence after *value*, stepped in local calendar time.

        NONE returns *value* unchanged.
        """
        if self is RecurrenceRule.NONE:
            return value
        value = to_local(value)
        if self is RecurrenceRule.DAILY:
            return add_days(value, 1)
        if self is RecurrenceRule.WEEKLY:
            return add_days(value, 7)
        if self is RecurrenceRule.MONTHLY:
            return add_months(value, 1)
        if self is RecurrenceRule.YEARLY:
            return add_months(value, 12)
        return value


class EntityKind(StrEnum):
    TASK = "task"
    CATEGORY = "category"
    NOTE = "note"


def _aware(value: datetime | None) -> datetime | None:
    return ensure_aware(value) if value is not None else None


class Category(BaseModel):
    """Category grouping tasks.

    Attributes:
        id: Unique identifier for the category
        name: Display name (uniqueness is not enforced)
        color_hex: Display color as #RRGGBB
    """

    id: str
    name: str
    color_hex: str = DEFAULT_CATEGORY_COLOR

    @field_validator("color_hex", mode="before")
    @classmethod
    def valid_color(cls, value):
        if isinstance(value, str) and is_hex_color(value):
            return value.strip()
        return DEFAULT_CATEGORY_COLOR


class CategoryCreate(BaseModel):
    name: str
    color_hex: str | None = None


class CategoryUpdate(BaseModel):
    """Partial category update; only provided fields change."""

    name: str | None = None
    color_hex: str | None = None


class Task(BaseModel):
    """Task model representing a stored task.

    Attributes:
        id: Unique identifier, assigned once at creation
        title: Display title
        description: Optional free text
        due_date: Optional deadline
        priority: Priority level (defaults to MEDIUM)
        is_completed: Completion status
        date_created: Creation timestamp
        date_modified: Last mutation timestamp
        category_id: Optional reference to a Category
        reminder_type: Reminder offset kind
        custom_reminder_offset: Seconds relative to the due date (CUSTOM only)
        recurrence_rule: Repeat period
    """

    id: str
    title: str
    description: str | None = None
    due_date: datetime | None = None
    priority: Priority = Priority.MEDIUM
    is_completed: bool = False
    date_created: datetime
    date_modified: datetime
    category_id: str | None = None
    reminder_type: ReminderType = ReminderType.NONE
    custom_reminder_offset: float | None = None
    recurrence_rule: RecurrenceRule = RecurrenceRule.NONE

    @field_validator("due_date", "date_created", "date_modified")
    @classmethod
    def aware_dates(cls, value):
        return _aware(value)

    @field_validator("priority", mode="before")
    @classmethod
    def coerce_priority(cls, value):
        return Priority.coerce(value)

    @field_validator("reminder_type", mode="before")
    @classmethod
    def coerce_reminder(cls, value):
        return ReminderType.coerce(value)

    @field_validator("recurrence_rule", mode="before")
    @classmethod
    def coerce_recurrence(cls, value):
        return RecurrenceRule.coerce(value)

    @property
    def has_reminder(self) -> bool:
        return self.due_date is not None and self.reminder_type is not ReminderType.NONE


class TaskCreate(BaseModel):
    """Model for creating a new task."""

    title: str
    description: str | None = None
    due_date: datetime | None = None
    priority: Priority = Priority.MEDIUM
    category_id: str | None = None
    reminder_type: ReminderType = ReminderType.NONE
    custom_reminder_offset: float | None = None
    recurrence_rule: RecurrenceRule = RecurrenceRule.NONE

    @field_validator("due_date")
    @classmethod
    def aware_due(cls, value):
        return _aware(value)

    @field_validator("priority", mode="before")
    @classmethod
    def coerce_priority(cls, value):
        return Priority.coerce(value)

    @field_validator("reminder_type", mode="before")
    @classmethod
    def coerce_reminder(cls, value):
        return ReminderType.coerce(value)

    @field_validator("recurrence_rule", mode="before")
    @classmethod
    def coerce_recurrence(cls, value):
        return RecurrenceRule.coerce(value)


class TaskUpdate(BaseModel):
    """Partial task update.

    Fields left as None are not changed. Clearing the due date or the
    category needs the explicit remove_* flag.
    """

    title: str | None = None
    description: str | None = None
    due_date: datetime | None = None
    remove_due_date: bool = False
    priority: Priority | None = None
    is_completed: bool | None = None
    category_id: str | None = None
    remove_category: bool = False
    reminder_type: ReminderType | None = None
    custom_reminder_offset: float | None = None
    recurrence_rule: RecurrenceRule | None = None

    @field_validator("due_date")
    @classmethod
    def aware_due(cls, value):
        return _aware(value)

    @field_validator("priority", mode="before")
    @classmethod
    def coerce_priority(cls, value):
        return None if value is None else Priority.coerce(value)

    @field_validator("reminder_type", mode="before")
    @classmethod
    def coerce_reminder(cls, value):
        return None if value is None else ReminderType.coerce(value)

    @field_validator("recurrence_rule", mode="before")
    @classmethod
    def coerce_recurrence(cls, value):
        return None if value is None else RecurrenceRule.coerce(value)

    def changes(self) -> dict:
        """Provided fields, excluding the remove_* flags."""
        return self.model_dump(
            exclude_none=True, exclude={"remove_due_date", "remove_category"}
        )

    @property
    def touches_reminder(self) -> bool:
        """Whether the update can change the reminder's time or content."""
        fields = self.changes().keys() & {
            "title",
            "description",
            "due_date",
            "is_completed",
            "reminder_type",
            "custom_reminder_offset",
        }
        return bool(fields) or self.remove_due_date


class Note(BaseModel):
    """Brain-dump note.

    Attributes:
        id: Unique identifier
        content: Note text
        tags: Free-text tags
        date_created: Creation timestamp
        date_modified: Last mutation timestamp
    """

    id: str
    content: str
    tags: str = ""
    date_created: datetime
    date_modified: datetime

    @field_validator("date_created", "date_modified")
    @classmethod
    def aware_dates(cls, value):
        return _aware(value)


class NoteCreate(BaseModel):
    content: str
    tags: str = ""


class NoteUpdate(BaseModel):
    content: str | None = None
    tags: str | None = None


_TASK_SORT = r"^(due_date|priority|title|date_created|date_modified)(:(asc|desc))?$"


class TaskFilters(BaseModel):
    """Filters for querying tasks.

    Equality and range predicates only; every provided field is ANDed.

    Attributes:
        is_completed: Completion status
        priority: Exact priority
        category_id: Exact category
        has_due_date: Only tasks with (True) or without (False) a due date
        due_after: Due date >= this instant
        due_before: Due date < this instant
        search: Case-insensitive substring of title or description
        sort: Sort field and direction (e.g. "due_date:asc")
        limit: Maximum number of results
        offset: Pagination offset
    """

    is_completed: bool | None = None
    priority: Priority | None = None
    category_id: str | None = None
    has_due_date: bool | None = None
    due_after: datetime | None = None
    due_before: datetime | None = None
    search: str | None = None
    sort: str | None = Field(default=None, pattern=_TASK_SORT)
    limit: int | None = Field(default=None, ge=1)
    offset: int | None = Field(default=None, ge=0)


class CategoryFilters(BaseModel):
    name: str | None = None
    search: str | None = None
    sort: str | None = Field(default=None, pattern=r"^(name)(:(asc|desc))?$")
    limit: int | None = Field(default=None, ge=1)


class NoteFilters(BaseModel):
    search: str | None = None
    sort: str | None = Field(
        default=None, pattern=r"^(date_created|date_modified)(:(asc|desc))?$"
    )
    limit: int | None = Field(default=None, ge=1)


class StoreCapabilities(BaseModel):
    """What the opened store file supports, computed once at open time.

    Attributes:
        schema_version: Highest applied migration
        reminders: Task reminder columns exist
        recurrence: Task recurrence column exists
        notes: Notes table exists
        notification_registry: Local notification registry table exists
    """

    model_config = ConfigDict(frozen=True)

    schema_version: int = 0
    reminders: bool = False
    recurrence: bool = False
    notes: bool = False
    notification_registry: bool = False


class NotificationRequest(BaseModel):
    """A registered local notification."""

    identifier: str
    task_id: str
    fire_at: datetime
    title: str
    body: str
    delivered: bool = False

    @field_validator("fire_at")
    @classmethod
    def aware_fire(cls, value):
        return _aware(value)


class WidgetSnapshot(BaseModel):
    """Read-only view handed to widget processes."""

    date: datetime
    today_tasks: list[Task] = Field(default_factory=list)
    high_priority_tasks: list[Task] = Field(default_factory=list)
    next_refresh: datetime | None = None
