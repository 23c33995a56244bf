"""Where the shared store file lives.

Both the main process and widget processes resolve the store path through
``shared_store_path``. The app-group container is emulated by a directory
named after SHARED_CONTAINER_ID under a configurable root.
"""

from __future__ import annotations

from pathlib import Path

from platformdirs import user_data_dir

SHARED_CONTAINER_ID = "group.com.harjot.TodoListApp.SimpleTodoWidget"
STORE_FILENAME = "TodoListMore.sqlite"

_APP_NAME = "todolistmore"


def shared_container_dir(root: str | Path | None = None) -> Path:
    """Directory shared by every process of the application."""
    base = Path(root) if root else Path(user_data_dir(_APP_NAME)) / "AppGroups"
    return base / SHARED_CONTAINER_ID


def shared_store_path(root: str | Path | None = None) -> Path:
    return shared_container_dir(root) / STORE_FILENAME


def private_store_path() -> Path:
    """Per-app store used when the shared container cannot be opened."""
    return Path(user_data_dir(_APP_NAME)) / "Private" / STORE_FILENAME
