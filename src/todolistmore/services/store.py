"""The shared store.

Store owns persistence of tasks, categories and notes. Every committed
mutation is followed by a publication on the store's ChangeBus and, for
tasks, by a call into the ReminderScheduler.

One Store is constructed per process with ``Store.open`` and passed to
whatever needs it. Widget processes do not use a Store; they read the same
file through ``WidgetSnapshotProvider``.
"""

from __future__ import annotations

import asyncio
import sqlite3
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, TypeVar

from todolistmore.adapters.sqlite.category_repository import SqliteCategoryRepository
from todolistmore.adapters.sqlite.connection import MEMORY_PATH, DatabaseConnection
from todolistmore.adapters.sqlite.location import private_store_path, shared_store_path
from todolistmore.adapters.sqlite.note_repository import SqliteNoteRepository
from todolistmore.adapters.sqlite.notification_registry import SqliteNotificationService
from todolistmore.adapters.sqlite.task_repository import SqliteTaskRepository
from todolistmore.adapters.sqlite.utils import chunked
from todolistmore.core.change_bus import ChangeBus, ChangeKind, ChangePayload, Topic
from todolistmore.core.exceptions import (
    BatchOperationError,
    PersistenceFailedError,
    StoreUnavailableError,
    ValidationFailedError,
)
from todolistmore.models import (
    AppConfig,
    Category,
    CategoryCreate,
    CategoryFilters,
    CategoryUpdate,
    EntityKind,
    Note,
    NoteCreate,
    NoteFilters,
    NoteUpdate,
    RecurrenceRule,
    Task,
    TaskCreate,
    TaskFilters,
    TaskUpdate,
)
from todolistmore.models.core import is_hex_color
from todolistmore.services.notification_service import NotificationService
from todolistmore.services.reminder_scheduler import ReminderScheduler
from todolistmore.utils.dates import utc_now
from todolistmore.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

_FILTER_TYPES = {
    EntityKind.TASK: TaskFilters,
    EntityKind.CATEGORY: CategoryFilters,
    EntityKind.NOTE: NoteFilters,
}


@contextmanager
def _persistence(action: str) -> Iterator[None]:
    """Report storage engine failures as PersistenceFailedError."""
    try:
        yield
    except sqlite3.Error as e:
        logger.error("Failed to %s: %s", action, e)
        raise PersistenceFailedError(f"Failed to {action}: {e}") from e


class Store:
    """Durable CRUD over tasks, categories and notes.

    Attributes:
        database: Connection handle for the store file
        config: Application configuration
        bus: Change notifications for in-process observers
        scheduler: Reminder scheduler driven by task mutations
    """

    def __init__(
        self,
        database: DatabaseConnection,
        config: AppConfig | None = None,
        notifications: NotificationService | None = None,
    ):
        self.database = database
        self.config = config or AppConfig()
        self.bus = ChangeBus()

        connection = database.connection
        self.capabilities = database.capabilities
        self.tasks = SqliteTaskRepository(connection, self.capabilities)
        self.categories = SqliteCategoryRepository(connection)
        self.notes = SqliteNoteRepository(connection)

        if notifications is None:
            notifications = SqliteNotificationService(
                connection, authorized=self.config.reminders.authorized
            )
        self.notifications = notifications
        self.scheduler = ReminderScheduler(
            notifications, self.capabilities, self.config.reminders.grace_seconds
        )

    @classmethod
    def open(
        cls,
        config: AppConfig | None = None,
        notifications: NotificationService | None = None,
        *,
        path: str | Path | None = None,
    ) -> Store:
        """Open the store, falling back when the shared location is unusable.

        Candidates, in order: *path* (or the shared store path), the private
        per-app path, then an in-memory database.
        """
        config = config or AppConfig()
        primary = path if path is not None else shared_store_path(config.store.shared_root)
        candidates: list[str | Path] = [primary]
        if path is None:
            candidates.append(private_store_path())
        candidates.append(MEMORY_PATH)

        for candidate in candidates:
            database = DatabaseConnection(candidate, timeout=config.store.busy_timeout)
            try:
                database.open()
            except StoreUnavailableError as e:
                logger.warning("Store unavailable, falling back: %s", e)
                continue
            if candidate != primary:
                logger.warning("Using non-shared store at %s", candidate)
            else:
                logger.info("Opened store at %s", candidate)
            return cls(database, config, notifications)

        raise StoreUnavailableError("No store location could be opened")

    @property
    def is_shared(self) -> bool:
        return not self.database.is_memory and Path(self.database.db_path) == shared_store_path(
            self.config.store.shared_root
        )

    def close(self) -> None:
        self.bus.close()
        self.database.close()

    # Tasks

    async def get_task(self, task_id: str) -> Task | None:
        with _persistence("read task"):
            return await self.tasks.get(task_id)

    async def add_task(self, task_data: TaskCreate) -> Task:
        """Create a task.

        Raises:
            ValidationFailedError: Empty title, or unresolvable category in strict mode
            PersistenceFailedError: Storage failure
        """
        if not task_data.title.strip():
            raise ValidationFailedError("Task title must not be empty")

        category_id = await self._resolve_category(task_data.category_id)
        task_data = task_data.model_copy(update={"category_id": category_id})

        with _persistence("add task"):
            task = await self.tasks.add(task_data)

        logger.info("Task %s created", task.id)
        self.bus.publish(
            Topic.TASKS_CHANGED,
            ChangePayload(id=task.id, kind=ChangeKind.CREATED, category_id=task.category_id),
        )
        if task.has_reminder:
            await self._reconcile(task)
        return task

    async def update_task(self, task_id: str, updates: TaskUpdate) -> bool:
        """Apply a partial update. Returns False if the task does not exist."""
        changes = updates.changes()
        if "title" in changes and not changes["title"].strip():
            raise ValidationFailedError("Task title must not be empty")
        if updates.remove_due_date:
            changes["due_date"] = None
        if updates.remove_category:
            changes["category_id"] = None
        elif "category_id" in changes:
            category_id = await self._resolve_category(changes["category_id"])
            if category_id is None:
                del changes["category_id"]

        with _persistence("update task"):
            task = await self.tasks.update(task_id, changes)
        if task is None:
            return False

        logger.info("Task %s updated (%s)", task_id, ", ".join(sorted(changes)) or "touch")
        self.bus.publish(
            Topic.TASKS_CHANGED,
            ChangePayload(
                id=task.id,
                kind=ChangeKind.UPDATED,
                is_completed=task.is_completed if "is_completed" in changes else None,
                category_id=task.category_id,
            ),
        )
        if updates.touches_reminder:
            await self._reconcile(task)
        return True

    async def toggle_task_completion(self, task_id: str) -> bool:
        """Flip completion. Returns False if the task does not exist.

        Completing a recurring task that has a due date moves the due date to
        the next occurrence and leaves the task open.
        """
        with _persistence("read task"):
            current = await self.tasks.get(task_id)
        if current is None:
            return False

        if (
            not current.is_completed
            and current.recurrence_rule is not RecurrenceRule.NONE
            and current.due_date is not None
        ):
            changes: dict[str, Any] = {
                "due_date": current.recurrence_rule.advance(current.due_date)
            }
        else:
            changes = {"is_completed": not current.is_completed}

        with _persistence("toggle task"):
            task = await self.tasks.update(task_id, changes)
        if task is None:
            return False

        logger.info("Task %s toggled (completed=%s)", task_id, task.is_completed)
        self.bus.publish(
            Topic.TASKS_CHANGED,
            ChangePayload(
                id=task.id,
                kind=ChangeKind.UPDATED,
                is_completed=task.is_completed,
                category_id=task.category_id,
            ),
        )
        await self._reconcile(task)
        return True

    async def delete_task(self, task_id: str) -> bool:
        with _persistence("delete task"):
            task = await self.tasks.get(task_id)
            if task is None or not await self.tasks.delete(task_id):
                return False

        logger.info("Task %s deleted", task_id)
        self.bus.publish(
            Topic.TASKS_CHANGED,
            ChangePayload(id=task_id, kind=ChangeKind.DELETED, category_id=task.category_id),
        )
        await self._cancel(task_id)
        return True

    async def today_tasks(
        self, now: datetime | None = None, limit: int | None = None
    ) -> list[Task]:
        """Incomplete tasks due today, soonest first."""
        with _persistence("query today tasks"):
            return await self.tasks.today(now or utc_now(), limit or self.config.widget.limit)

    async def high_priority_tasks(self, limit: int | None = None) -> list[Task]:
        with _persistence("query high priority tasks"):
            return await self.tasks.high_priority(limit or self.config.widget.limit)

    # Categories

    async def get_category(self, category_id: str) -> Category | None:
        with _persistence("read category"):
            return await self.categories.get(category_id)

    async def add_category(self, category_data: CategoryCreate) -> Category:
        if not category_data.name.strip():
            raise ValidationFailedError("Category name must not be empty")
        if category_data.color_hex is not None and not is_hex_color(category_data.color_hex):
            raise ValidationFailedError(f"Invalid color: {category_data.color_hex}")

        with _persistence("add category"):
            category = await self.categories.add(category_data)

        logger.info("Category %s created", category.id)
        self.bus.publish(
            Topic.CATEGORIES_CHANGED,
            ChangePayload(id=category.id, kind=ChangeKind.CREATED, category_id=category.id),
        )
        return category

    async def update_category(self, category_id: str, updates: CategoryUpdate) -> bool:
        changes = updates.model_dump(exclude_none=True)
        if "name" in changes and not changes["name"].strip():
            raise ValidationFailedError("Category name must not be empty")
        if "color_hex" in changes and not is_hex_color(changes["color_hex"]):
            raise ValidationFailedError(f"Invalid color: {changes['color_hex']}")

        with _persistence("update category"):
            category = await self.categories.update(category_id, changes)
        if category is None:
            return False

        self.bus.publish(
            Topic.CATEGORIES_CHANGED,
            ChangePayload(id=category_id, kind=ChangeKind.UPDATED, category_id=category_id),
        )
        return True

    async def delete_category(self, category_id: str) -> bool:
        """Delete a category; tasks that referenced it are left uncategorized."""
        with _persistence("delete category"):
            deleted = await self.categories.delete(category_id)
        if not deleted:
            return False

        logger.info("Category %s deleted", category_id)
        self.bus.publish(
            Topic.CATEGORIES_CHANGED,
            ChangePayload(id=category_id, kind=ChangeKind.DELETED, category_id=category_id),
        )
        return True

    # Notes

    async def get_note(self, note_id: str) -> Note | None:
        with _persistence("read note"):
            return await self.notes.get(note_id)

    async def add_note(self, note_data: NoteCreate) -> Note:
        if not note_data.content.strip():
            raise ValidationFailedError("Note content must not be empty")

        with _persistence("add note"):
            note = await self.notes.add(note_data)

        self.bus.publish(Topic.NOTES_CHANGED, ChangePayload(id=note.id, kind=ChangeKind.CREATED))
        return note

    async def update_note(self, note_id: str, updates: NoteUpdate) -> bool:
        changes = updates.model_dump(exclude_none=True)
        if "content" in changes and not changes["content"].strip():
            raise ValidationFailedError("Note content must not be empty")

        with _persistence("update note"):
            note = await self.notes.update(note_id, changes)
        if note is None:
            return False

        self.bus.publish(Topic.NOTES_CHANGED, ChangePayload(id=note_id, kind=ChangeKind.UPDATED))
        return True

    async def delete_note(self, note_id: str) -> bool:
        with _persistence("delete note"):
            deleted = await self.notes.delete(note_id)
        if not deleted:
            return False

        self.bus.publish(Topic.NOTES_CHANGED, ChangePayload(id=note_id, kind=ChangeKind.DELETED))
        return True

    async def delete_record(self, record_id: str) -> bool:
        """Delete whichever task, category or note has this ID."""
        if await self.delete_task(record_id):
            return True
        if await self.delete_category(record_id):
            return True
        return await self.delete_note(record_id)

    # Queries

    async def query(
        self,
        kind: EntityKind | str,
        filters: TaskFilters | CategoryFilters | NoteFilters | None = None,
        *,
        sort: str | None = None,
        limit: int | None = None,
    ) -> list[Task] | list[Category] | list[Note]:
        """Read records of one kind.

        Raises:
            ValidationFailedError: Unknown kind, filters of the wrong type or an invalid sort
            PersistenceFailedError: Storage failure
        """
        try:
            kind = EntityKind(kind)
        except ValueError as e:
            raise ValidationFailedError(f"Unknown record kind: {kind}") from e
        filter_type = _FILTER_TYPES[kind]
        if filters is None:
            filters = filter_type()
        elif not isinstance(filters, filter_type):
            raise ValidationFailedError(
                f"{type(filters).__name__} cannot filter {kind.value} records"
            )

        overrides = {
            key: value for key, value in (("sort", sort), ("limit", limit)) if value is not None
        }
        if overrides:
            try:
                filters = filter_type.model_validate({**filters.model_dump(), **overrides})
            except ValueError as e:
                raise ValidationFailedError(str(e)) from e

        repository = {
            EntityKind.TASK: self.tasks,
            EntityKind.CATEGORY: self.categories,
            EntityKind.NOTE: self.notes,
        }[kind]
        with _persistence(f"query {kind.value} records"):
            return await repository.list_all(filters)

    # Batch operations

    async def delete_all_completed(self) -> int:
        """Delete every completed task.

        Returns:
            Number of tasks removed

        Raises:
            BatchOperationError: A chunk failed; ``processed`` tasks stay deleted
        """
        chunk_size = self.config.store.batch_chunk_size
        capabilities = self.capabilities

        def work(connection: sqlite3.Connection) -> tuple[list[str], sqlite3.Error | None]:
            tasks = SqliteTaskRepository(connection, capabilities)
            return _delete_in_chunks(tasks.completed_ids(), tasks.delete_ids, chunk_size)

        with _persistence("delete completed tasks"):
            removed, error = await self._run_batch(work)
        for task_id in removed:
            await self._cancel(task_id)

        logger.info("Deleted %d completed tasks", len(removed))
        self.bus.publish(
            Topic.TASKS_CHANGED,
            ChangePayload(kind=ChangeKind.DELETED, batch=True, count=len(removed)),
        )
        if error is not None:
            raise BatchOperationError(
                f"Failed to delete completed tasks: {error}", processed=len(removed)
            ) from error
        return len(removed)

    async def delete_all_data(self) -> int:
        """Delete every task and category. Notes are kept.

        Returns:
            Number of tasks and categories removed
        """
        chunk_size = self.config.store.batch_chunk_size
        capabilities = self.capabilities

        def work(connection: sqlite3.Connection) -> tuple[list[str], int, sqlite3.Error | None]:
            tasks = SqliteTaskRepository(connection, capabilities)
            removed, error = _delete_in_chunks(tasks.all_ids(), tasks.delete_ids, chunk_size)
            if error is not None:
                return removed, 0, error
            try:
                return removed, SqliteCategoryRepository(connection).delete_all(), None
            except sqlite3.Error as e:
                return removed, 0, e

        with _persistence("delete all data"):
            removed, categories_removed, error = await self._run_batch(work)
        await self._cancel_all()

        total = len(removed) + categories_removed
        logger.info(
            "Deleted all data (%d tasks, %d categories)", len(removed), categories_removed
        )
        self.bus.publish(
            Topic.TASKS_CHANGED,
            ChangePayload(kind=ChangeKind.DELETED, batch=True, count=len(removed)),
        )
        self.bus.publish(
            Topic.CATEGORIES_CHANGED,
            ChangePayload(kind=ChangeKind.DELETED, batch=True, count=categories_removed),
        )
        if error is not None:
            raise BatchOperationError(f"Failed to delete all data: {error}", processed=total) from error
        return total

    async def _run_batch(self, work: Callable[[sqlite3.Connection], T]) -> T:
        """Run *work* on a background connection in a worker thread.

        In-memory stores have a single connection, so the work runs inline.
        """
        if self.database.is_memory:
            return work(self.database.connection)

        def run() -> T:
            try:
                connection = self.database.open_background()
            except (StoreUnavailableError, sqlite3.Error) as e:
                raise PersistenceFailedError(f"Cannot open background connection: {e}") from e
            try:
                return work(connection)
            finally:
                connection.close()

        return await asyncio.to_thread(run)

    # Reminders and categories

    async def _resolve_category(self, category_id: str | None) -> str | None:
        if category_id is None:
            return None
        with _persistence("resolve category"):
            category = await self.categories.get(category_id)
        if category is not None:
            return category.id
        if self.config.store.strict_category_lookup:
            raise ValidationFailedError(f"Category not found: {category_id}")
        logger.warning("Category %s not found; task left uncategorized", category_id)
        return None

    async def _reconcile(self, task: Task) -> None:
        try:
            await self.scheduler.reconcile(task)
        except Exception:
            logger.exception("Reminder reconciliation failed for task %s", task.id)

    async def _cancel(self, task_id: str) -> None:
        try:
            await self.scheduler.cancel(task_id)
        except Exception:
            logger.exception("Reminder cancellation failed for task %s", task_id)

    async def _cancel_all(self) -> None:
        try:
            await self.scheduler.cancel_all()
        except Exception:
            logger.exception("Cancelling all reminders failed")


def _delete_in_chunks(
    ids: list[str], delete: Callable[[list[str]], int], chunk_size: int
) -> tuple[list[str], sqlite3.Error | None]:
    """Delete *ids* chunk by chunk, committing each; stops at the first failure."""
    removed: list[str] = []
    for chunk in chunked(ids, chunk_size):
        try:
            delete(chunk)
        except sqlite3.Error as e:
            return removed, e
        removed.extend(chunk)
    return removed, None
