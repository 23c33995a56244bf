"""Repository abstraction layer for TodoListMore.

Abstract base classes (ports) for every record type held in the shared
store. The SQLite adapters in ``todolistmore.adapters.sqlite`` implement
them; the Store orchestrates them and owns change publication and reminder
side effects.

Lookups return None for unknown IDs and deletes return False; raising is
reserved for persistence failures.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from todolistmore.models import (
    Category,
    CategoryCreate,
    CategoryFilters,
    Note,
    NoteCreate,
    NoteFilters,
    Task,
    TaskCreate,
    TaskFilters,
)


class TaskRepository(ABC):
    """Abstract base class for task persistence operations."""

    @abstractmethod
    async def list_all(self, filters: TaskFilters) -> list[Task]:
        """List tasks matching every provided filter.

        Args:
            filters: TaskFilters object specifying filter criteria

        Returns:
            List of Task objects, ordered by ``filters.sort`` (due date
            ascending with undated tasks last by default)
        """

    @abstractmethod
    async def get(self, task_id: str) -> Task | None:
        """Get a specific task by ID, or None if it does not exist."""

    @abstractmethod
    async def add(self, task_data: TaskCreate) -> Task:
        """Create a new task.

        Args:
            task_data: TaskCreate object with task details

        Returns:
            Created Task object with generated ID and timestamps
        """

    @abstractmethod
    async def update(self, task_id: str, changes: dict[str, Any]) -> Task | None:
        """Apply field changes to a task.

        Args:
            task_id: Task to change
            changes: Mapping of Task field names to new values (None clears)

        Returns:
            The updated Task, or None if the task does not exist
        """

    @abstractmethod
    async def delete(self, task_id: str) -> bool:
        """Delete a task. Returns False if it did not exist."""

    @abstractmethod
    def completed_ids(self) -> list[str]:
        """IDs of every completed task."""

    @abstractmethod
    def all_ids(self) -> list[str]:
        """IDs of every task."""

    @abstractmethod
    def delete_ids(self, task_ids: list[str]) -> int:
        """Delete the given tasks in one transaction; returns the number removed."""


class CategoryRepository(ABC):
    """Abstract base class for category persistence operations."""

    @abstractmethod
    async def list_all(self, filters: CategoryFilters) -> list[Category]:
        """List categories, ordered by name by default."""

    @abstractmethod
    async def get(self, category_id: str) -> Category | None:
        """Get a specific category by ID, or None if it does not exist."""

    @abstractmethod
    async def add(self, category_data: CategoryCreate) -> Category:
        """Create a new category."""

    @abstractmethod
    async def update(self, category_id: str, changes: dict[str, Any]) -> Category | None:
        """Apply field changes to a category; None if it does not exist."""

    @abstractmethod
    async def delete(self, category_id: str) -> bool:
        """Delete a category, clearing the reference on every task that points to it.

        Both steps happen in one transaction.
        """

    @abstractmethod
    def delete_all(self) -> int:
        """Delete every category; returns the number removed."""


class NoteRepository(ABC):
    """Abstract base class for note persistence operations."""

    @abstractmethod
    async def list_all(self, filters: NoteFilters) -> list[Note]:
        """List notes, most recently modified first by default."""

    @abstractmethod
    async def get(self, note_id: str) -> Note | None:
        """Get a specific note by ID, or None if it does not exist."""

    @abstractmethod
    async def add(self, note_data: NoteCreate) -> Note:
        """Create a new note."""

    @abstractmethod
    async def update(self, note_id: str, changes: dict[str, Any]) -> Note | None:
        """Apply field changes to a note; None if it does not exist."""

    @abstractmethod
    async def delete(self, note_id: str) -> bool:
        """Delete a note. Returns False if it did not exist."""
