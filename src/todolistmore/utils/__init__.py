"""Utility helpers for TodoListMore."""
