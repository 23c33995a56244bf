"""Main entry point for the todolistmore CLI."""

import typer

from todolistmore import __version__
from todolistmore.adapters.sqlite.location import SHARED_CONTAINER_ID, shared_store_path
from todolistmore.commands import categories, config, data, notes, reminders, tasks, widget
from todolistmore.services.config_service import get_config_service
from todolistmore.utils.typer_helpers import SuggestingGroup
from todolistmore.utils.ui.console import get_console

app = typer.Typer(
    name="todolistmore",
    cls=SuggestingGroup,
    help="Tasks, categories, notes and reminders on the shared TodoListMore store",
    no_args_is_help=True,
)

console = get_console()

app.add_typer(tasks.app, name="tasks", help="Task management commands")
app.add_typer(categories.app, name="categories", help="Category management commands")
app.add_typer(notes.app, name="notes", help="Brain-dump notes")
app.add_typer(reminders.app, name="reminders", help="Reminder notifications")
app.add_typer(widget.app, name="widget", help="Widget snapshots and deep links")
app.add_typer(config.app, name="config", help="Configuration management")
app.add_typer(data.app, name="data", help="Data management")


@app.command()
def version() -> None:
    """Show version and store location."""
    console.print(f"[bold]TodoListMore[/bold] version [cyan]{__version__}[/cyan]")
    shared_root = get_config_service().config.store.shared_root
    console.print(f"App group: {SHARED_CONTAINER_ID}")
    console.print(f"Store: {shared_store_path(shared_root)}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
