"""Task management commands."""

from datetime import datetime

import typer

from todolistmore.commands.decorators import AppError, command_wrapper
from todolistmore.commands.session import open_store
from todolistmore.core.exceptions import RecordNotFoundError
from todolistmore.models import (
    EntityKind,
    Priority,
    RecurrenceRule,
    ReminderType,
    TaskCreate,
    TaskFilters,
    TaskUpdate,
)
from todolistmore.utils import exit_codes
from todolistmore.utils.ui.formatters import (
    format_info,
    format_output,
    format_success,
    format_tasks_pretty,
    task_to_dict,
)
from todolistmore.utils.typer_helpers import SuggestingGroup

app = typer.Typer(cls=SuggestingGroup, help="Task management commands")


def parse_due(value: str | None) -> datetime | None:
    """Parse an ISO date or date-time; naive values are local time."""
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError as e:
        raise AppError(f"Invalid date: {value}", exit_codes.ERROR_INVALID_ARGS) from e


def parse_priority(value: str | None) -> Priority | None:
    if value is None:
        return None
    if value.strip().upper() not in Priority.__members__ and not value.strip().isdigit():
        raise AppError(f"Invalid priority: {value}", exit_codes.ERROR_INVALID_ARGS)
    return Priority.coerce(value)


def parse_reminder(value: str | None) -> ReminderType | None:
    if value is None:
        return None
    reminder = ReminderType.coerce(value)
    if reminder is ReminderType.NONE and value.strip().lower() not in ("none", "0"):
        raise AppError(f"Invalid reminder: {value}", exit_codes.ERROR_INVALID_ARGS)
    return reminder


def parse_recurrence(value: str | None) -> RecurrenceRule | None:
    if value is None:
        return None
    rule = RecurrenceRule.coerce(value)
    if rule is RecurrenceRule.NONE and value.strip().lower() not in ("none", "0"):
        raise AppError(f"Invalid recurrence: {value}", exit_codes.ERROR_INVALID_ARGS)
    return rule


@app.command("add")
@command_wrapper
async def add_task(
    title: str = typer.Argument(..., help="Task title"),
    description: str | None = typer.Option(None, "--description", "-d", help="Description"),
    due: str | None = typer.Option(None, "--due", help="Due date (ISO format)"),
    priority: str = typer.Option("medium", "--priority", "-p", help="low, medium or high"),
    category: str | None = typer.Option(None, "--category", "-c", help="Category ID"),
    reminder: str = typer.Option(
        "none", "--reminder", "-r", help="none, attime, 15m, 1h, 1d or custom"
    ),
    custom_offset: float | None = typer.Option(
        None, "--offset", help="Custom reminder offset in seconds (negative = before)"
    ),
    repeat: str = typer.Option("none", "--repeat", help="none, daily, weekly, monthly, yearly"),
    output: str = typer.Option("pretty", "--output", "-o", help="Output format"),
) -> None:
    """Add a new task."""
    task_data = TaskCreate(
        title=title,
        description=description,
        due_date=parse_due(due),
        priority=parse_priority(priority),
        category_id=category,
        reminder_type=parse_reminder(reminder),
        custom_reminder_offset=custom_offset,
        recurrence_rule=parse_recurrence(repeat),
    )
    async with open_store() as store:
        task = await store.add_task(task_data)

    if output == "pretty":
        format_success(f"Task created: {task.id}")
    else:
        format_output(task_to_dict(task), output)


@app.command("list")
@command_wrapper
async def list_tasks(
    status: str = typer.Option("all", "--status", help="all, active or completed"),
    priority: str | None = typer.Option(None, "--priority", "-p", help="Filter by priority"),
    category: str | None = typer.Option(None, "--category", "-c", help="Filter by category ID"),
    search: str | None = typer.Option(None, "--search", help="Search title and description"),
    sort: str | None = typer.Option(None, "--sort", help="e.g. due_date:asc, priority:desc"),
    limit: int | None = typer.Option(None, "--limit", help="Limit results"),
    output: str = typer.Option("pretty", "--output", "-o", help="Output format"),
) -> None:
    """List tasks."""
    if status not in ("all", "active", "completed"):
        raise AppError(f"Invalid status: {status}", exit_codes.ERROR_INVALID_ARGS)
    try:
        filters = TaskFilters(
            is_completed=None if status == "all" else status == "completed",
            priority=parse_priority(priority),
            category_id=category,
            search=search,
            sort=sort,
            limit=limit,
        )
    except ValueError as e:
        raise AppError(str(e), exit_codes.ERROR_INVALID_ARGS) from e

    async with open_store() as store:
        tasks = await store.query(EntityKind.TASK, filters)

    if output == "pretty":
        format_tasks_pretty(tasks)
    else:
        format_output([task_to_dict(t) for t in tasks], output)


@app.command("show")
@command_wrapper
async def show_task(
    task_id: str = typer.Argument(..., help="Task ID"),
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """Show one task."""
    async with open_store() as store:
        task = await store.get_task(task_id)
    if task is None:
        raise RecordNotFoundError(f"Task not found: {task_id}")
    format_output(task_to_dict(task), output)


@app.command("update")
@command_wrapper
async def update_task(
    task_id: str = typer.Argument(..., help="Task ID"),
    title: str | None = typer.Option(None, "--title", help="New title"),
    description: str | None = typer.Option(None, "--description", "-d", help="Description"),
    due: str | None = typer.Option(None, "--due", help="Due date (ISO format)"),
    clear_due: bool = typer.Option(False, "--clear-due", help="Remove the due date"),
    priority: str | None = typer.Option(None, "--priority", "-p", help="low, medium or high"),
    category: str | None = typer.Option(None, "--category", "-c", help="Category ID"),
    clear_category: bool = typer.Option(False, "--clear-category", help="Remove the category"),
    reminder: str | None = typer.Option(None, "--reminder", "-r", help="Reminder type"),
    custom_offset: float | None = typer.Option(None, "--offset", help="Custom offset (seconds)"),
    repeat: str | None = typer.Option(None, "--repeat", help="Recurrence"),
) -> None:
    """Update a task; only the given fields change."""
    updates = TaskUpdate(
        title=title,
        description=description,
        due_date=parse_due(due),
        remove_due_date=clear_due,
        priority=parse_priority(priority),
        category_id=category,
        remove_category=clear_category,
        reminder_type=parse_reminder(reminder),
        custom_reminder_offset=custom_offset,
        recurrence_rule=parse_recurrence(repeat),
    )
    async with open_store() as store:
        if not await store.update_task(task_id, updates):
            raise RecordNotFoundError(f"Task not found: {task_id}")
    format_success(f"Task updated: {task_id}")


@app.command("complete")
@command_wrapper
async def complete_task(task_id: str = typer.Argument(..., help="Task ID")) -> None:
    """Toggle completion (recurring tasks move to their next due date)."""
    async with open_store() as store:
        if not await store.toggle_task_completion(task_id):
            raise RecordNotFoundError(f"Task not found: {task_id}")
        task = await store.get_task(task_id)

    if task is not None and task.is_completed:
        format_success(f"Task completed: {task.title}")
    elif task is not None and task.due_date is not None and task.recurrence_rule:
        format_success(f"Next occurrence of '{task.title}' scheduled")
    else:
        format_success(f"Task reopened: {task_id}")


@app.command("delete")
@command_wrapper
async def delete_task(
    task_id: str = typer.Argument(..., help="Task ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a task."""
    if not yes and not typer.confirm(f"Delete task {task_id}?"):
        format_info("Cancelled")
        raise typer.Exit(0)
    async with open_store() as store:
        if not await store.delete_task(task_id):
            raise RecordNotFoundError(f"Task not found: {task_id}")
    format_success(f"Task deleted: {task_id}")


@app.command("today")
@command_wrapper
async def today_tasks(
    limit: int | None = typer.Option(None, "--limit", help="Maximum tasks"),
    output: str = typer.Option("pretty", "--output", "-o", help="Output format"),
) -> None:
    """Incomplete tasks due today."""
    async with open_store() as store:
        tasks = await store.today_tasks(limit=limit)
    if output == "pretty":
        format_tasks_pretty(tasks, title="Today")
    else:
        format_output([task_to_dict(t) for t in tasks], output)


@app.command("priority")
@command_wrapper
async def priority_tasks(
    limit: int | None = typer.Option(None, "--limit", help="Maximum tasks"),
    output: str = typer.Option("pretty", "--output", "-o", help="Output format"),
) -> None:
    """Incomplete high-priority tasks."""
    async with open_store() as store:
        tasks = await store.high_priority_tasks(limit=limit)
    if output == "pretty":
        format_tasks_pretty(tasks, title="High priority")
    else:
        format_output([task_to_dict(t) for t in tasks], output)


@app.command("purge-completed")
@command_wrapper
async def purge_completed(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete every completed task."""
    if not yes and not typer.confirm("Delete all completed tasks?"):
        format_info("Cancelled")
        raise typer.Exit(0)
    async with open_store() as store:
        count = await store.delete_all_completed()
    format_success(f"Deleted {count} completed task(s)")
