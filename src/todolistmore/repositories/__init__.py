"""Repository interfaces for TodoListMore.

Abstract base classes that define the contracts for data persistence.
Implementations live in ``todolistmore.adapters.sqlite``.
"""

from .repository import CategoryRepository, NoteRepository, TaskRepository

__all__ = [
    "TaskRepository",
    "CategoryRepository",
    "NoteRepository",
]
