"""Exceptions raised by the TodoListMore store and its collaborators."""


class StoreError(Exception):
    """Base exception for store errors."""


class ValidationFailedError(StoreError, ValueError):
    """Raised when caller-supplied data violates a precondition."""


class RecordNotFoundError(StoreError, LookupError):
    """Raised when a referenced record does not exist."""


class PersistenceFailedError(StoreError):
    """Raised when the underlying storage engine reports an error."""


class BatchOperationError(PersistenceFailedError):
    """Raised when a batch operation fails part-way.

    Attributes:
        processed: Number of records committed before the failure
    """

    def __init__(self, message: str, processed: int):
        super().__init__(message)
        self.processed = processed


class StoreUnavailableError(StoreError):
    """Raised when the shared store location cannot be opened."""
