"""Configuration models.

The configuration is a single JSON document in the user config directory,
split into one section per component.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator


class StoreConfig(BaseModel):
    """Shared store configuration."""

    shared_root: str | None = Field(
        default=None,
        description="Directory standing in for the shared app-group container",
    )
    strict_category_lookup: bool = Field(
        default=False,
        description="Reject tasks whose category_id does not resolve",
    )
    busy_timeout: float = Field(default=30.0, gt=0)
    batch_chunk_size: int = Field(default=200, ge=1)

    @field_validator("shared_root")
    @classmethod
    def validate_shared_root(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()


class ReminderConfig(BaseModel):
    """Reminder scheduling configuration."""

    grace_seconds: int = Field(default=30, ge=1)
    authorized: bool = Field(
        default=False, description="Whether the user granted notification permission"
    )


class WidgetConfig(BaseModel):
    """Widget snapshot configuration."""

    limit: int = Field(default=5, ge=1, le=10)
    refresh_interval_minutes: int = Field(default=60, ge=1)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, v):
        return v.upper() if isinstance(v, str) else v


class AppConfig(BaseModel):
    """Main TodoListMore configuration"""

    store: StoreConfig = Field(default_factory=StoreConfig)
    reminders: ReminderConfig = Field(default_factory=ReminderConfig)
    widget: WidgetConfig = Field(default_factory=WidgetConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
