"""TodoListMore domain models.

Pydantic models for the entities held in the shared store, the filters used
to query them and the application configuration.
"""

from .config_models import AppConfig, LoggingConfig, ReminderConfig, StoreConfig, WidgetConfig
from .core import (
    DEFAULT_CATEGORY_COLOR,
    Category,
    CategoryCreate,
    CategoryFilters,
    CategoryUpdate,
    EntityKind,
    Note,
    NoteCreate,
    NoteFilters,
    NoteUpdate,
    NotificationRequest,
    Priority,
    RecurrenceRule,
    ReminderType,
    StoreCapabilities,
    Task,
    TaskCreate,
    TaskFilters,
    TaskUpdate,
    WidgetSnapshot,
)

__all__ = [
    # Task models
    "Task",
    "TaskCreate",
    "TaskUpdate",
    "TaskFilters",
    "Priority",
    "ReminderType",
    "RecurrenceRule",
    # Category models
    "Category",
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryFilters",
    "DEFAULT_CATEGORY_COLOR",
    # Note models
    "Note",
    "NoteCreate",
    "NoteUpdate",
    "NoteFilters",
    # Store
    "EntityKind",
    "StoreCapabilities",
    "NotificationRequest",
    "WidgetSnapshot",
    # Config
    "AppConfig",
    "StoreConfig",
    "ReminderConfig",
    "WidgetConfig",
    "LoggingConfig",
]
