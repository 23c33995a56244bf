"""Core building blocks shared by the store, scheduler and widget provider."""

from todolistmore.core.change_bus import ChangeBus, ChangeKind, ChangePayload, Subscription, Topic
from todolistmore.core.exceptions import (
    BatchOperationError,
    PersistenceFailedError,
    RecordNotFoundError,
    StoreError,
    StoreUnavailableError,
    ValidationFailedError,
)

__all__ = [
    "ChangeBus",
    "ChangeKind",
    "ChangePayload",
    "Subscription",
    "Topic",
    "StoreError",
    "ValidationFailedError",
    "RecordNotFoundError",
    "PersistenceFailedError",
    "BatchOperationError",
    "StoreUnavailableError",
]
