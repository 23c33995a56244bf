"""Tests for the categories, notes, reminders, widget, data and config command groups."""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

from typer.testing import CliRunner

from todolistmore.main import app
from todolistmore.services.config_service import get_config_service
from todolistmore.utils import exit_codes

runner = CliRunner()


def _json(*args: str):
    result = runner.invoke(app, [*args, "-o", "json"])
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


def _add_task(*args: str) -> dict:
    return _json("tasks", "add", *args)


# ---------------------------------------------------------------------------
# Main app
# ---------------------------------------------------------------------------


class TestMain:
    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "tasks" in result.output

    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "group.com.harjot.TodoListApp.SimpleTodoWidget" in result.output

    def test_suggests_close_command(self):
        result = runner.invoke(app, ["taks"])
        assert result.exit_code == 1
        assert "tasks" in result.output


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


class TestCategories:
    def test_add_list_update_delete(self):
        assert runner.invoke(app, ["categories", "add", "Work", "--color", "#FF0000"]).exit_code == 0
        [category] = _json("categories", "list")
        assert category["color_hex"] == "#FF0000"

        result = runner.invoke(app, ["categories", "update", category["id"], "--name", "Job"])
        assert result.exit_code == 0
        assert _json("categories", "list")[0]["name"] == "Job"

        result = runner.invoke(app, ["categories", "delete", category["id"], "--yes"])
        assert result.exit_code == 0
        assert _json("categories", "list") == []

    def test_invalid_color(self):
        result = runner.invoke(app, ["categories", "add", "Work", "--color", "red"])
        assert result.exit_code == exit_codes.ERROR_INVALID_ARGS

    def test_delete_keeps_tasks(self):
        runner.invoke(app, ["categories", "add", "Work"])
        [category] = _json("categories", "list")
        task = _add_task("Report", "-c", category["id"])
        assert task["category_id"] == category["id"]

        runner.invoke(app, ["categories", "delete", category["id"], "--yes"])

        [orphan] = _json("tasks", "list")
        assert orphan["category_id"] is None

    def test_update_missing(self):
        result = runner.invoke(app, ["categories", "update", "missing", "--name", "x"])
        assert result.exit_code == exit_codes.ERROR_NOT_FOUND


# ---------------------------------------------------------------------------
# Notes
# ---------------------------------------------------------------------------


class TestNotes:
    def test_add_search_update_delete(self):
        runner.invoke(app, ["notes", "add", "Call the plumber", "--tags", "home"])
        runner.invoke(app, ["notes", "add", "Read a book"])

        [note] = _json("notes", "list", "--search", "plumber")
        assert note["tags"] == "home"

        assert runner.invoke(app, ["notes", "update", note["id"], "--content", "Plumber called"]).exit_code == 0
        assert _json("notes", "list", "--limit", "1")[0]["content"] == "Plumber called"

        assert runner.invoke(app, ["notes", "delete", note["id"]]).exit_code == 0
        assert len(_json("notes", "list")) == 1

    def test_delete_missing(self):
        result = runner.invoke(app, ["notes", "delete", "missing"])
        assert result.exit_code == exit_codes.ERROR_NOT_FOUND


# ---------------------------------------------------------------------------
# Reminders
# ---------------------------------------------------------------------------


class TestReminders:
    def test_nothing_registered_without_authorization(self):
        _add_task("Meeting", "--due", "2099-01-01T09:00", "-r", "1h")
        assert _json("reminders", "list") == []

    def test_authorize_then_schedule(self):
        assert runner.invoke(app, ["reminders", "authorize"]).exit_code == 0
        task = _add_task("Meeting", "--due", "2099-01-01T09:00", "-r", "1h")

        [request] = _json("reminders", "list")
        assert request["task_id"] == task["id"]
        assert request["identifier"] == f"task-reminder-{task['id']}"

    def test_revoke_clears_pending(self):
        runner.invoke(app, ["reminders", "authorize"])
        _add_task("Meeting", "--due", "2099-01-01T09:00", "-r", "attime")

        result = runner.invoke(app, ["reminders", "authorize", "--revoke"])

        assert result.exit_code == 0
        assert get_config_service().config.reminders.authorized is False
        assert _json("reminders", "list") == []

    def test_due_marks_delivered(self):
        runner.invoke(app, ["reminders", "authorize"])
        # A past due date is clamped to a few seconds from now
        _add_task("Overdue", "--due", "2000-01-01T09:00", "-r", "attime", "-d", "Late")

        with patch("todolistmore.adapters.sqlite.notification_registry.utc_now") as now:
            now.return_value = datetime.now(UTC) + timedelta(minutes=5)
            result = runner.invoke(app, ["reminders", "due"])
            assert "Overdue: Late" in result.output

            result = runner.invoke(app, ["reminders", "due"])
            assert "No reminders due" in result.output


# ---------------------------------------------------------------------------
# Widget
# ---------------------------------------------------------------------------


class TestWidget:
    def test_snapshot_json(self):
        _add_task("Urgent", "-p", "high")

        snapshot = _json("widget", "snapshot")

        assert [t["title"] for t in snapshot["high_priority_tasks"]] == ["Urgent"]
        assert snapshot["next_refresh"] is not None

    def test_snapshot_without_store(self):
        snapshot = _json("widget", "snapshot")
        assert snapshot["today_tasks"] == []

    def test_open_priority_link(self):
        _add_task("Urgent", "-p", "high")

        result = runner.invoke(app, ["widget", "open", "todolistmore://priority"])

        assert result.exit_code == 0
        assert "Urgent" in result.output

    def test_open_new_task_link(self):
        result = runner.invoke(app, ["widget", "open", "todolistmore://new"])
        assert result.exit_code == 0
        assert "new task" in result.output

    def test_open_unknown_link(self):
        result = runner.invoke(app, ["widget", "open", "todolistmore://settings"])
        assert result.exit_code == exit_codes.ERROR_INVALID_ARGS


# ---------------------------------------------------------------------------
# Data
# ---------------------------------------------------------------------------


class TestData:
    def test_reset_keeps_notes(self):
        runner.invoke(app, ["categories", "add", "Work"])
        _add_task("One")
        runner.invoke(app, ["notes", "add", "Keep me"])

        result = runner.invoke(app, ["data", "reset", "--yes"])

        assert result.exit_code == 0
        assert "Deleted 2 record(s)" in result.output
        assert _json("tasks", "list") == []
        assert len(_json("notes", "list")) == 1

    def test_reset_declined(self):
        _add_task("One")
        result = runner.invoke(app, ["data", "reset"], input="n\n")
        assert "Cancelled" in result.output
        assert len(_json("tasks", "list")) == 1

    def test_where(self):
        result = runner.invoke(app, ["data", "where"])
        assert result.exit_code == 0
        assert "Shared store" in result.output


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


class TestConfig:
    def test_view_yaml(self):
        result = runner.invoke(app, ["config", "view"])
        assert result.exit_code == 0
        assert "batch_chunk_size: 200" in result.output

    def test_set_and_get(self):
        assert runner.invoke(app, ["config", "set", "widget.limit", "3"]).exit_code == 0
        result = runner.invoke(app, ["config", "get", "widget.limit"])
        assert result.output.strip() == "3"

    def test_set_unknown_key(self):
        result = runner.invoke(app, ["config", "set", "widget.colour", "red"])
        assert result.exit_code == exit_codes.ERROR_NOT_FOUND

    def test_set_invalid_value(self):
        result = runner.invoke(app, ["config", "set", "widget.limit", "99"])
        assert result.exit_code == exit_codes.ERROR_INVALID_ARGS

    def test_get_unknown_key(self):
        result = runner.invoke(app, ["config", "get", "nope"])
        assert result.exit_code == exit_codes.ERROR_NOT_FOUND

    def test_reset_key(self):
        runner.invoke(app, ["config", "set", "widget.limit", "3"])
        assert runner.invoke(app, ["config", "reset", "widget.limit", "--yes"]).exit_code == 0
        assert get_config_service().config.widget.limit == 5

    def test_strict_category_lookup_from_config(self):
        runner.invoke(app, ["config", "set", "store.strict_category_lookup", "true"])

        result = runner.invoke(app, ["tasks", "add", "Report", "-c", "missing"])

        assert result.exit_code == exit_codes.ERROR_INVALID_ARGS
