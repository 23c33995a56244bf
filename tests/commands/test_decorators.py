"""Tests for command_wrapper and AppError."""

from __future__ import annotations

import pytest
import typer

from todolistmore.commands.decorators import AppError, command_wrapper
from todolistmore.core.exceptions import (
    BatchOperationError,
    PersistenceFailedError,
    RecordNotFoundError,
    StoreUnavailableError,
    ValidationFailedError,
)
from todolistmore.utils import exit_codes


class TestCommandWrapper:
    def test_sync_result_passes_through(self):
        @command_wrapper
        def cmd(value):
            return value * 2

        assert cmd(21) == 42

    def test_async_function_is_run(self):
        @command_wrapper
        async def cmd():
            return "done"

        assert cmd() == "done"

    def test_preserves_name(self):
        @command_wrapper
        def list_things():
            """Docs."""

        assert list_things.__name__ == "list_things"
        assert list_things.__doc__ == "Docs."

    def test_app_error_exit_code(self, capsys):
        @command_wrapper
        def cmd():
            raise AppError("bad input", exit_codes.ERROR_INVALID_ARGS)

        with pytest.raises(typer.Exit) as exc_info:
            cmd()

        assert exc_info.value.exit_code == exit_codes.ERROR_INVALID_ARGS
        assert "bad input" in capsys.readouterr().out

    @pytest.mark.parametrize(
        "error, expected",
        [
            (ValidationFailedError("x"), exit_codes.ERROR_INVALID_ARGS),
            (RecordNotFoundError("x"), exit_codes.ERROR_NOT_FOUND),
            (StoreUnavailableError("x"), exit_codes.ERROR_STORE_UNAVAILABLE),
            (PersistenceFailedError("x"), exit_codes.ERROR_PERSISTENCE),
            (BatchOperationError("x", processed=2), exit_codes.ERROR_PERSISTENCE),
        ],
    )
    def test_store_errors_map_to_exit_codes(self, error, expected):
        @command_wrapper
        async def cmd():
            raise error

        with pytest.raises(typer.Exit) as exc_info:
            cmd()

        assert exc_info.value.exit_code == expected

    def test_unexpected_error(self, capsys):
        @command_wrapper
        def cmd():
            raise KeyError("boom")

        with pytest.raises(typer.Exit) as exc_info:
            cmd()

        assert exc_info.value.exit_code == exit_codes.ERROR_GENERAL
        assert "unexpected error" in capsys.readouterr().out

    def test_typer_exit_is_reraised(self):
        @command_wrapper
        def cmd():
            raise typer.Exit(0)

        with pytest.raises(typer.Exit) as exc_info:
            cmd()

        assert exc_info.value.exit_code == 0


def test_app_error_defaults_to_general():
    assert AppError("x").exit_code == exit_codes.ERROR_GENERAL
