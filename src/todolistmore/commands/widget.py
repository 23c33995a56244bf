"""Widget snapshot and deep-link commands.

These run the same code a widget process would: the store file is opened
read-only for every call.
"""

import typer

from todolistmore.commands.decorators import AppError, command_wrapper
from todolistmore.services.config_service import get_config_service
from todolistmore.services.deep_links import DeepLink, parse_deep_link, tasks_for
from todolistmore.services.widget_snapshot import WidgetSnapshotProvider
from todolistmore.utils import exit_codes
from todolistmore.utils.logger import configure_logging
from todolistmore.utils.ui.formatters import (
    format_due_date,
    format_info,
    format_output,
    format_tasks_pretty,
    task_to_dict,
)
from todolistmore.utils.typer_helpers import SuggestingGroup

app = typer.Typer(cls=SuggestingGroup, help="Widget snapshot commands")


def _provider() -> WidgetSnapshotProvider:
    config = get_config_service().config
    configure_logging(config.logging.level)
    return WidgetSnapshotProvider(config)


@app.command("snapshot")
@command_wrapper
async def show_snapshot(
    output: str = typer.Option("pretty", "--output", "-o", help="Output format"),
) -> None:
    """Show what the widgets would display now."""
    snapshot = await _provider().snapshot()
    if output != "pretty":
        data = snapshot.model_dump(mode="json")
        data["today_tasks"] = [task_to_dict(t) for t in snapshot.today_tasks]
        data["high_priority_tasks"] = [task_to_dict(t) for t in snapshot.high_priority_tasks]
        format_output(data, output)
        return

    format_tasks_pretty(snapshot.today_tasks, title="Today")
    format_tasks_pretty(snapshot.high_priority_tasks, title="High priority")
    if snapshot.next_refresh is not None:
        format_info(f"Next refresh: {format_due_date(snapshot.next_refresh)}")


@app.command("open")
@command_wrapper
async def open_link(url: str = typer.Argument(..., help="todolistmore:// URL")) -> None:
    """Resolve a deep link and show its destination."""
    link = parse_deep_link(url)
    if link is None:
        raise AppError(f"Not a recognised deep link: {url}", exit_codes.ERROR_INVALID_ARGS)
    if link is DeepLink.NEW_TASK:
        format_info("Destination: new task (use 'todolistmore tasks add')")
        return

    snapshot = await _provider().snapshot()
    title = "Today" if link is DeepLink.TODAY else "High priority"
    format_tasks_pretty(tasks_for(snapshot, link), title=title)
