"""Decorators for command functions."""

import asyncio
import inspect
import functools
import time
from collections.abc import Callable

import typer

from todolistmore.core.exceptions import (
    PersistenceFailedError,
    RecordNotFoundError,
    StoreError,
    StoreUnavailableError,
    ValidationFailedError,
)
from todolistmore.utils import exit_codes
from todolistmore.utils.logger import get_logger
from todolistmore.utils.ui.formatters import format_error

_STORE_EXIT_CODES: list[tuple[type[StoreError], int]] = [
    (ValidationFailedError, exit_codes.ERROR_INVALID_ARGS),
    (RecordNotFoundError, exit_codes.ERROR_NOT_FOUND),
    (StoreUnavailableError, exit_codes.ERROR_STORE_UNAVAILABLE),
    (PersistenceFailedError, exit_codes.ERROR_PERSISTENCE),
]


class AppError(Exception):
    """Custom application error with exit code."""

    def __init__(self, message: str, exit_code: int = exit_codes.ERROR_GENERAL):
        super().__init__(message)
        self.exit_code = exit_code


def _exit_code_for(error: StoreError) -> int:
    for error_type, code in _STORE_EXIT_CODES:
        if isinstance(error, error_type):
            return code
    return exit_codes.ERROR_GENERAL


def command_wrapper(func: Callable) -> Callable:
    """Log, run (sync or async) and map errors to exit codes."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = get_logger()
        cmd = func.__name__
        start = time.monotonic()
        logger.info("command started: %s", cmd)
        try:
            if inspect.iscoroutinefunction(func):
                result = asyncio.run(func(*args, **kwargs))
            else:
                result = func(*args, **kwargs)

            logger.info("command completed: %s (%.3fs)", cmd, time.monotonic() - start)
            return result

        except (AppError, StoreError) as e:
            code = e.exit_code if isinstance(e, AppError) else _exit_code_for(e)
            logger.error(
                "command failed: %s (%.3fs) - %s", cmd, time.monotonic() - start, e
            )
            format_error(str(e))
            raise typer.Exit(code=code) from e

        except typer.Exit:
            raise

        except Exception as e:
            logger.exception("command failed: %s (%.3fs)", cmd, time.monotonic() - start)
            format_error(f"An unexpected error occurred: {e}")
            raise typer.Exit(code=exit_codes.ERROR_GENERAL) from e

    return wrapper
