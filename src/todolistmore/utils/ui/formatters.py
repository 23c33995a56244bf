"""Output formatting for the command-line surface."""

import json
from datetime import datetime
from typing import Any

import yaml
from rich.table import Table
from rich.text import Text

from todolistmore.models import Priority, Task
from todolistmore.utils.dates import local_now, start_of_day, to_local
from todolistmore.utils.ui.console import get_console

console = get_console()

PRIORITY_COLORS = {
    Priority.HIGH: "bold red",
    Priority.MEDIUM: "yellow",
    Priority.LOW: "dim",
}

OUTPUT_FORMATS = ("pretty", "table", "json", "yaml")


def format_output(data: Any, output_format: str = "pretty") -> None:
    """Display plain data (dicts and lists of dicts) in the requested format."""
    if output_format == "json":
        print(json.dumps(data, indent=2, default=str))
    elif output_format == "yaml":
        print(yaml.safe_dump(data, default_flow_style=False, sort_keys=False))
    elif isinstance(data, list):
        format_dict_table(data)
    elif isinstance(data, dict):
        format_single_item(data)
    else:
        console.print(data)


def format_dict_table(items: list[dict]) -> None:
    """Format a list of dictionaries as a table."""
    if not items:
        console.print("[yellow]No items found[/yellow]")
        return

    columns = list(items[0].keys())
    table = Table(show_header=True, header_style="bold magenta")
    for col in columns:
        table.add_column(col.replace("_", " ").title())
    for item in items:
        table.add_row(*(_cell(item.get(col)) for col in columns))

    console.print(table)


def format_single_item(item: dict) -> None:
    """Format a single item as key-value pairs."""
    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")
    for key, value in item.items():
        table.add_row(key.replace("_", " ").title(), _cell(value))
    console.print(table)


def _cell(value: Any) -> str:
    if isinstance(value, bool):
        return "✓" if value else "✗"
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    if value is None:
        return "-"
    if isinstance(value, datetime):
        return format_due_date(value)
    return str(value)


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def format_warning(message: str) -> None:
    """Format and display a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def format_info(message: str) -> None:
    """Format and display an info message."""
    console.print(f"[bold blue]Info:[/bold blue] {message}")


def format_due_date(value: datetime) -> str:
    """Compact local due date: HH:MM DD/MM Dow, with the year when it differs."""
    local = to_local(value)
    now = local_now()
    day_str = local.strftime("%d/%m") if local.year == now.year else local.strftime("%d/%m/%Y")
    return f"{local.strftime('%H:%M')} {day_str} {local.strftime('%a')}"


def is_overdue(task: Task, now: datetime | None = None) -> bool:
    if task.is_completed or task.due_date is None:
        return False
    return task.due_date < (now or local_now())


def is_today(value: datetime | None, now: datetime | None = None) -> bool:
    if value is None:
        return False
    return start_of_day(value) == start_of_day(now or local_now())


def format_tasks_pretty(tasks: list[Task], title: str = "Tasks") -> None:
    """Tasks grouped by priority, highest first, overdue tasks last."""
    active = [t for t in tasks if not t.is_completed]
    header = Text()
    header.append(f"📋 {title} ", style="bold cyan")
    header.append(f"({len(active)} active, {len(tasks) - len(active)} completed)", style="dim")
    console.print(header)
    console.print()

    if not tasks:
        console.print("[yellow]No tasks found[/yellow]")
        return

    overdue = [t for t in tasks if is_overdue(t)]
    for priority in (Priority.HIGH, Priority.MEDIUM, Priority.LOW):
        group = [t for t in tasks if t.priority is priority and t not in overdue]
        if not group:
            continue
        console.print(priority.name, style=PRIORITY_COLORS[priority])
        for task in group:
            format_task_item(task, indent="  ")
        console.print()

    if overdue:
        console.print(f"⏱️  OVERDUE ({len(overdue)})", style="bold red")
        for task in overdue:
            format_task_item(task, indent="  ")
        console.print()


def format_task_item(task: Task, indent: str = "") -> None:
    line = Text(indent)
    line.append("✓ " if task.is_completed else "○ ", style="green" if task.is_completed else "")
    line.append(task.title, style="dim strike" if task.is_completed else "")
    if task.due_date is not None:
        style = "red" if is_overdue(task) else "cyan"
        line.append(f"  {format_due_date(task.due_date)}", style=style)
    if task.has_reminder:
        line.append("  🔔", style="")
    line.append(f"  [{task.id}]", style="dim")
    console.print(line)
    if task.description:
        console.print(f"{indent}    {task.description}", style="dim")


def task_to_dict(task: Task) -> dict:
    """Plain dict for json/yaml/table output."""
    data = task.model_dump(mode="json")
    data["priority"] = task.priority.name.lower()
    data["reminder_type"] = task.reminder_type.label
    data["recurrence_rule"] = task.recurrence_rule.name.lower()
    return data
