"""Configuration management commands."""

import json

import typer
from pydantic import ValidationError

from todolistmore.commands.decorators import AppError, command_wrapper
from todolistmore.services.config_service import get_config_service
from todolistmore.utils import exit_codes
from todolistmore.utils.ui.console import get_console
from todolistmore.utils.ui.formatters import format_info, format_output, format_success
from todolistmore.utils.typer_helpers import SuggestingGroup

app = typer.Typer(cls=SuggestingGroup, help="Configuration management commands")


def _parse_value(value: str):
    """Interpret a command-line value as JSON where possible (true, 5, null)."""
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value


@app.command("view")
@command_wrapper
def view_config(
    output: str = typer.Option("yaml", "--output", "-o", help="Output format"),
) -> None:
    """View current configuration."""
    format_output(get_config_service().config.model_dump(mode="json"), output)


@app.command("get")
@command_wrapper
def get_config(key: str = typer.Argument(..., help="Configuration key (e.g. widget.limit)")) -> None:
    """Get a configuration value."""
    try:
        value = get_config_service().get(key)
    except KeyError as e:
        raise AppError(f"Configuration key '{key}' not found", exit_codes.ERROR_NOT_FOUND) from e
    get_console().print(value)


@app.command("set")
@command_wrapper
def set_config(
    key: str = typer.Argument(..., help="Configuration key (e.g. widget.limit)"),
    value: str = typer.Argument(..., help="Configuration value"),
) -> None:
    """Set a configuration value."""
    parsed = _parse_value(value)
    try:
        get_config_service().set(key, parsed)
    except KeyError as e:
        raise AppError(f"Configuration key '{key}' not found", exit_codes.ERROR_NOT_FOUND) from e
    except ValidationError as e:
        raise AppError(f"Invalid value for '{key}': {value}", exit_codes.ERROR_INVALID_ARGS) from e
    format_success(f"Configuration '{key}' set to '{parsed}'")


@app.command("reset")
@command_wrapper
def reset_config(
    key: str | None = typer.Argument(None, help="Configuration key to reset"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset configuration to defaults."""
    if not yes:
        target = "entire configuration" if not key else f"'{key}'"
        if not typer.confirm(f"Are you sure you want to reset {target}?"):
            format_info("Cancelled")
            raise typer.Exit(0)
    try:
        get_config_service().reset(key)
    except KeyError as e:
        raise AppError(f"Configuration key '{key}' not found", exit_codes.ERROR_NOT_FOUND) from e
    format_success(f"Configuration '{key}' reset to default" if key else "Configuration reset to defaults")
