"""Database migrations for the shared store file."""

from .m001_initial_schema import initial_migration
from .m002_reminders import reminders_migration
from .m003_notes_recurrence import notes_recurrence_migration
from .m004_notification_registry import notification_registry_migration
from .runner import Migration, MigrationRunner

ALL_MIGRATIONS: list[Migration] = [
    initial_migration,
    reminders_migration,
    notes_recurrence_migration,
    notification_registry_migration,
]

__all__ = ["ALL_MIGRATIONS", "Migration", "MigrationRunner"]
