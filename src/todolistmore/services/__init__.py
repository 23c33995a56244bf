"""Services built on the shared store."""
