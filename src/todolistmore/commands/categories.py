"""Category management commands."""

import typer

from todolistmore.commands.decorators import command_wrapper
from todolistmore.commands.session import open_store
from todolistmore.core.exceptions import RecordNotFoundError
from todolistmore.models import CategoryCreate, CategoryFilters, CategoryUpdate, EntityKind
from todolistmore.utils.ui.formatters import format_info, format_output, format_success
from todolistmore.utils.typer_helpers import SuggestingGroup

app = typer.Typer(cls=SuggestingGroup, help="Category management commands")


@app.command("add")
@command_wrapper
async def add_category(
    name: str = typer.Argument(..., help="Category name"),
    color: str | None = typer.Option(None, "--color", help="Color as #RRGGBB"),
) -> None:
    """Add a category."""
    async with open_store() as store:
        category = await store.add_category(CategoryCreate(name=name, color_hex=color))
    format_success(f"Category created: {category.id}")


@app.command("list")
@command_wrapper
async def list_categories(
    search: str | None = typer.Option(None, "--search", help="Search by name"),
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """List categories."""
    async with open_store() as store:
        categories = await store.query(EntityKind.CATEGORY, CategoryFilters(search=search))
    format_output([c.model_dump(mode="json") for c in categories], output)


@app.command("update")
@command_wrapper
async def update_category(
    category_id: str = typer.Argument(..., help="Category ID"),
    name: str | None = typer.Option(None, "--name", help="New name"),
    color: str | None = typer.Option(None, "--color", help="Color as #RRGGBB"),
) -> None:
    """Rename or recolor a category."""
    async with open_store() as store:
        updated = await store.update_category(
            category_id, CategoryUpdate(name=name, color_hex=color)
        )
    if not updated:
        raise RecordNotFoundError(f"Category not found: {category_id}")
    format_success(f"Category updated: {category_id}")


@app.command("delete")
@command_wrapper
async def delete_category(
    category_id: str = typer.Argument(..., help="Category ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a category. Its tasks are kept without a category."""
    if not yes and not typer.confirm(f"Delete category {category_id}?"):
        format_info("Cancelled")
        raise typer.Exit(0)
    async with open_store() as store:
        if not await store.delete_category(category_id):
            raise RecordNotFoundError(f"Category not found: {category_id}")
    format_success(f"Category deleted: {category_id}")
