"""TodoListMore core: shared task store, change bus and reminder scheduling."""

__version__ = "0.3.0"
