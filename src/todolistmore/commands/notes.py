"""Brain-dump note commands."""

import typer

from todolistmore.commands.decorators import command_wrapper
from todolistmore.commands.session import open_store
from todolistmore.core.exceptions import RecordNotFoundError
from todolistmore.models import EntityKind, NoteCreate, NoteFilters, NoteUpdate
from todolistmore.utils.ui.formatters import format_output, format_success
from todolistmore.utils.typer_helpers import SuggestingGroup

app = typer.Typer(cls=SuggestingGroup, help="Brain-dump notes")


@app.command("add")
@command_wrapper
async def add_note(
    content: str = typer.Argument(..., help="Note text"),
    tags: str = typer.Option("", "--tags", help="Free-text tags"),
) -> None:
    """Add a note."""
    async with open_store() as store:
        note = await store.add_note(NoteCreate(content=content, tags=tags))
    format_success(f"Note created: {note.id}")


@app.command("list")
@command_wrapper
async def list_notes(
    search: str | None = typer.Option(None, "--search", help="Search content and tags"),
    limit: int | None = typer.Option(None, "--limit", help="Limit results"),
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """List notes, most recently modified first."""
    async with open_store() as store:
        notes = await store.query(EntityKind.NOTE, NoteFilters(search=search, limit=limit))
    format_output([n.model_dump(mode="json") for n in notes], output)


@app.command("update")
@command_wrapper
async def update_note(
    note_id: str = typer.Argument(..., help="Note ID"),
    content: str | None = typer.Option(None, "--content", help="New text"),
    tags: str | None = typer.Option(None, "--tags", help="New tags"),
) -> None:
    """Edit a note."""
    async with open_store() as store:
        if not await store.update_note(note_id, NoteUpdate(content=content, tags=tags)):
            raise RecordNotFoundError(f"Note not found: {note_id}")
    format_success(f"Note updated: {note_id}")


@app.command("delete")
@command_wrapper
async def delete_note(note_id: str = typer.Argument(..., help="Note ID")) -> None:
    """Delete a note."""
    async with open_store() as store:
        if not await store.delete_note(note_id):
            raise RecordNotFoundError(f"Note not found: {note_id}")
    format_success(f"Note deleted: {note_id}")
