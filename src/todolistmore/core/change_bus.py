"""In-process change notifications.

The Store owns one ChangeBus and publishes on it after every committed
mutation. Observers in the same process either iterate a Subscription
(async) or register a plain callback with ``listen``. Nothing here crosses
process boundaries: other processes re-query the store file instead.

Publishing a specific topic also delivers the same payload on
``Topic.DATA_CHANGED`` for observers that do not care which records changed.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from todolistmore.utils.logger import get_logger

logger = get_logger(__name__)


class Topic(StrEnum):
    """Closed set of change topics."""

    TASKS_CHANGED = "tasksChanged"
    CATEGORIES_CHANGED = "categoriesChanged"
    NOTES_CHANGED = "notesChanged"
    DATA_CHANGED = "dataChanged"


class ChangeKind(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


class ChangePayload(BaseModel):
    """Payload carried by a publication.

    Attributes:
        id: Affected record ID (absent for batch operations)
        kind: Kind of change
        is_completed: New completion state, when it changed
        category_id: Category the change relates to
        batch: True when the change came from a batch operation
        count: Number of records affected by a batch operation
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str | None = None
    kind: ChangeKind | None = None
    is_completed: bool | None = Field(default=None, alias="isCompleted")
    category_id: str | None = Field(default=None, alias="categoryId")
    batch: bool | None = None
    count: int | None = None

    def as_mapping(self) -> dict:
        """Return the wire form with camelCase keys and unset keys omitted."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


Listener = Callable[[Topic, ChangePayload], None]

_CLOSED = object()


class Subscription:
    """Stream of payloads published on one topic after subscription time.

    Iterate with ``async for``; ``close()`` ends the iteration.
    """

    def __init__(self, bus: ChangeBus, topic: Topic):
        self.topic = topic
        self._bus = bus
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False

    def _deliver(self, payload: ChangePayload) -> None:
        if not self._closed:
            self._queue.put_nowait(payload)

    @property
    def closed(self) -> bool:
        return self._closed

    def pending(self) -> int:
        """Number of payloads delivered but not yet consumed."""
        return self._queue.qsize()

    def get_nowait(self) -> ChangePayload:
        """Return the next delivered payload without waiting.

        Raises:
            asyncio.QueueEmpty: If nothing is pending
        """
        item = self._queue.get_nowait()
        if item is _CLOSED:
            raise asyncio.QueueEmpty
        return item

    def drain(self) -> list[ChangePayload]:
        """Consume and return every pending payload."""
        items = []
        while True:
            try:
                items.append(self.get_nowait())
            except asyncio.QueueEmpty:
                return items

    async def get(self) -> ChangePayload:
        if self._closed and self._queue.empty():
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is _CLOSED:
            raise StopAsyncIteration
        return item

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._bus._remove(self)
        self._queue.put_nowait(_CLOSED)

    def __aiter__(self) -> Subscription:
        return self

    async def __anext__(self) -> ChangePayload:
        return await self.get()

    async def __aenter__(self) -> Subscription:
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.close()


class ChangeBus:
    """Topic-keyed fan-out of change payloads."""

    def __init__(self) -> None:
        self._subscriptions: dict[Topic, list[Subscription]] = {t: [] for t in Topic}
        self._listeners: dict[Topic, list[Listener]] = {t: [] for t in Topic}

    def subscribe(self, topic: Topic | str) -> Subscription:
        topic = Topic(topic)
        subscription = Subscription(self, topic)
        self._subscriptions[topic].append(subscription)
        return subscription

    def listen(self, topic: Topic | str, callback: Listener) -> Callable[[], None]:
        """Register a synchronous callback; returns a function that removes it."""
        topic = Topic(topic)
        self._listeners[topic].append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners[topic]:
                self._listeners[topic].remove(callback)

        return unsubscribe

    def subscriber_count(self, topic: Topic | str) -> int:
        topic = Topic(topic)
        return len(self._subscriptions[topic]) + len(self._listeners[topic])

    def publish(self, topic: Topic | str, payload: ChangePayload | None = None) -> None:
        """Deliver a payload to every current subscriber of the topic.

        Specific topics are mirrored on DATA_CHANGED after their own delivery.
        """
        topic = Topic(topic)
        payload = payload or ChangePayload()
        logger.debug("publish %s %s", topic.value, payload.as_mapping())
        self._dispatch(topic, payload)
        if topic is not Topic.DATA_CHANGED:
            self._dispatch(Topic.DATA_CHANGED, payload)

    def close(self) -> None:
        """End every open subscription and drop all listeners."""
        for subscriptions in self._subscriptions.values():
            for subscription in list(subscriptions):
                subscription.close()
        for listeners in self._listeners.values():
            listeners.clear()

    def _dispatch(self, topic: Topic, payload: ChangePayload) -> None:
        for subscription in list(self._subscriptions[topic]):
            subscription._deliver(payload)
        for callback in list(self._listeners[topic]):
            try:
                callback(topic, payload)
            except Exception:
                logger.exception("change listener failed for %s", topic.value)

    def _remove(self, subscription: Subscription) -> None:
        subscriptions = self._subscriptions[subscription.topic]
        if subscription in subscriptions:
            subscriptions.remove(subscription)
