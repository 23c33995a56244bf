"""Data management commands."""

import typer

from todolistmore.commands.decorators import command_wrapper
from todolistmore.commands.session import open_store
from todolistmore.utils.ui.formatters import format_info, format_success, format_warning
from todolistmore.utils.typer_helpers import SuggestingGroup

app = typer.Typer(cls=SuggestingGroup, help="Data management commands")


@app.command("reset")
@command_wrapper
async def reset_data(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete every task and category. Notes are kept."""
    if not yes:
        format_warning("This permanently deletes all tasks and categories.")
        if not typer.confirm("Continue?"):
            format_info("Cancelled")
            raise typer.Exit(0)
    async with open_store() as store:
        count = await store.delete_all_data()
    format_success(f"Deleted {count} record(s)")


@app.command("where")
@command_wrapper
async def show_location() -> None:
    """Show which store file is in use."""
    async with open_store() as store:
        if store.database.is_memory:
            format_warning("Shared store unavailable; using a temporary in-memory store")
        elif store.is_shared:
            format_info(f"Shared store: {store.database.db_path}")
        else:
            format_warning(f"Private (non-shared) store: {store.database.db_path}")
        format_info(f"Schema version: {store.capabilities.schema_version}")
