"""Application-wide logger writing to platformdirs user_log_dir."""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from platformdirs import user_log_dir

_APP_NAME = "todolistmore"
_LOG_FILE = "todolistmore.log"
_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
_BACKUP_COUNT = 3

_configured = False


def configure_logging(
    level: str | int = logging.INFO, log_dir: str | Path | None = None
) -> logging.Logger:
    """Attach the rotating file handler to the application logger.

    Safe to call more than once; later calls only adjust the level.
    """
    global _configured
    root = logging.getLogger(_APP_NAME)
    root.setLevel(level if isinstance(level, int) else level.upper())
    if _configured:
        return root

    directory = Path(log_dir) if log_dir is not None else Path(user_log_dir(_APP_NAME))
    try:
        directory.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.handlers.RotatingFileHandler(
            directory / _LOG_FILE,
            maxBytes=_MAX_BYTES,
            backupCount=_BACKUP_COUNT,
            encoding="utf-8",
        )
    except OSError:
        # Read-only home (e.g. sandboxed widget process): keep logging to stderr.
        handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    if not root.handlers:
        root.addHandler(handler)
    root.propagate = False
    _configured = True
    return root


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the application logger or one of its children.

    Module names outside the package are nested under the application logger.
    """
    if not name or name == _APP_NAME:
        return logging.getLogger(_APP_NAME)
    if not name.startswith(f"{_APP_NAME}."):
        name = f"{_APP_NAME}.{name}"
    return logging.getLogger(name)
