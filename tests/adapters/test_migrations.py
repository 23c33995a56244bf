"""Tests for the migration runner and the bundled migrations."""

from __future__ import annotations

import sqlite3

import pytest

from todolistmore.adapters.sqlite import schema
from todolistmore.adapters.sqlite.capabilities import detect_capabilities
from todolistmore.adapters.sqlite.migrations import ALL_MIGRATIONS, Migration, MigrationRunner
from todolistmore.adapters.sqlite.utils import table_columns


@pytest.fixture()
def connection():
    conn = sqlite3.connect(":memory:")
    yield conn
    conn.close()


class _CreateWidgets(Migration):
    @property
    def version(self) -> int:
        return 1

    @property
    def description(self) -> str:
        return "Create widgets"

    def up(self, connection: sqlite3.Connection) -> None:
        connection.execute("CREATE TABLE widgets (id TEXT PRIMARY KEY)")


class _Broken(Migration):
    @property
    def version(self) -> int:
        return 2

    @property
    def description(self) -> str:
        return "Broken"

    def up(self, connection: sqlite3.Connection) -> None:
        connection.execute("ALTER TABLE missing ADD COLUMN x TEXT")


# ---------------------------------------------------------------------------
# MigrationRunner
# ---------------------------------------------------------------------------


class TestMigrationRunner:
    def test_fresh_database_is_version_zero(self, connection):
        assert MigrationRunner(connection).get_current_version() == 0

    def test_runs_pending_migration(self, connection):
        runner = MigrationRunner(connection)

        assert runner.run_migrations([_CreateWidgets()]) == 1
        assert runner.get_current_version() == 1
        assert table_columns(connection, "widgets") == {"id"}

    def test_skips_applied_migrations(self, connection):
        runner = MigrationRunner(connection)
        runner.run_migrations([_CreateWidgets()])

        assert runner.run_migrations([_CreateWidgets()]) == 0

    def test_rejects_old_version(self, connection):
        runner = MigrationRunner(connection)
        runner.run_migration(_CreateWidgets())

        with pytest.raises(ValueError):
            runner.run_migration(_CreateWidgets())

    def test_failed_migration_raises_and_is_not_recorded(self, connection):
        runner = MigrationRunner(connection)
        runner.run_migration(_CreateWidgets())

        with pytest.raises(RuntimeError, match="Migration 2 failed"):
            runner.run_migration(_Broken())
        assert runner.get_current_version() == 1

    def test_history(self, connection):
        runner = MigrationRunner(connection)
        runner.run_migrations([_CreateWidgets()])

        [entry] = runner.get_migration_history()
        assert entry["version"] == 1
        assert entry["description"] == "Create widgets"
        assert entry["applied_at"]


# ---------------------------------------------------------------------------
# Bundled migrations
# ---------------------------------------------------------------------------


class TestBundledMigrations:
    def test_versions_are_sequential(self):
        assert [m.version for m in ALL_MIGRATIONS] == list(range(1, schema.SCHEMA_VERSION + 1))

    def test_full_schema(self, connection):
        MigrationRunner(connection).run_migrations(ALL_MIGRATIONS)

        capabilities = detect_capabilities(connection)
        assert capabilities.schema_version == schema.SCHEMA_VERSION
        assert capabilities.reminders
        assert capabilities.recurrence
        assert capabilities.notes
        assert capabilities.notification_registry

    def test_upgrades_pre_migration_file(self, connection):
        # Files written before schema_version existed already have the v1 tables
        connection.execute(schema.CREATE_CATEGORIES_TABLE)
        connection.execute(schema.CREATE_TASKS_TABLE)
        connection.execute(
            "INSERT INTO tasks (id, title, date_created, date_modified)"
            " VALUES ('t1', 'Old', '2024-01-01T00:00:00.000000+00:00',"
            " '2024-01-01T00:00:00.000000+00:00')"
        )
        connection.commit()

        MigrationRunner(connection).run_migrations(ALL_MIGRATIONS)

        row = connection.execute(
            "SELECT title, reminder_type, recurrence_rule FROM tasks WHERE id = 't1'"
        ).fetchone()
        assert row == ("Old", 0, 0)

    def test_reminder_migration_tolerates_existing_columns(self, connection):
        connection.execute(schema.CREATE_CATEGORIES_TABLE)
        connection.execute(schema.CREATE_TASKS_TABLE)
        connection.execute(schema.ADD_TASK_REMINDER_COLUMNS[0])
        connection.commit()

        MigrationRunner(connection).run_migrations(ALL_MIGRATIONS)

        assert {"reminder_type", "custom_reminder_offset"} <= table_columns(connection, "tasks")
