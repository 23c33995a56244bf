"""SQLite storage adapter for the shared store file."""
