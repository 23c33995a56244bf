"""Reminder and notification registry commands."""

import typer

from todolistmore.adapters.sqlite.notification_registry import SqliteNotificationService
from todolistmore.commands.decorators import AppError, command_wrapper
from todolistmore.commands.session import open_store
from todolistmore.services.config_service import get_config_service
from todolistmore.utils.ui.formatters import (
    format_info,
    format_output,
    format_success,
)
from todolistmore.utils.typer_helpers import SuggestingGroup

app = typer.Typer(cls=SuggestingGroup, help="Reminder commands")


def _registry(notifications) -> SqliteNotificationService:
    if not isinstance(notifications, SqliteNotificationService):
        raise AppError("The notification registry is not available")
    return notifications


@app.command("authorize")
@command_wrapper
async def authorize(
    revoke: bool = typer.Option(False, "--revoke", help="Withdraw permission instead"),
) -> None:
    """Allow (or stop) reminder notifications."""
    config_service = get_config_service()
    config_service.set("reminders.authorized", not revoke)
    if revoke:
        async with open_store() as store:
            await store.scheduler.cancel_all()
        format_success("Notifications disabled; pending reminders removed")
    else:
        format_success("Notifications enabled")


@app.command("list")
@command_wrapper
async def list_pending(
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """List pending reminders."""
    async with open_store() as store:
        requests = await _registry(store.notifications).pending()
    format_output([r.model_dump(mode="json") for r in requests], output)


@app.command("due")
@command_wrapper
async def deliver_due(
    mark: bool = typer.Option(True, "--mark/--no-mark", help="Mark shown reminders delivered"),
) -> None:
    """Show reminders whose time has come."""
    async with open_store() as store:
        registry = _registry(store.notifications)
        due = await registry.due()
        if not due:
            format_info("No reminders due")
            return
        for request in due:
            format_info(f"{request.title}: {request.body}")
            if mark:
                await registry.mark_delivered(request.identifier)
