"""Command groups for the todolistmore CLI."""
