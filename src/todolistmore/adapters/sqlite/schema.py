"""Table definitions for the shared store file.

Statements are grouped by the migration that introduces them. Timestamps are
stored as fixed-width UTC ISO-8601 strings so lexical order equals time
order. The category relationship is a plain column; deleting a category
clears it on referencing tasks explicitly.
"""

from __future__ import annotations

# Highest migration version known to this build
SCHEMA_VERSION = 4

# Migration 1: categories and tasks
CREATE_CATEGORIES_TABLE = """
CREATE TABLE IF NOT EXISTS categories (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    color_hex TEXT
)
"""

CREATE_TASKS_TABLE = """
CREATE TABLE IF NOT EXISTS tasks (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    description TEXT,
    due_date DATETIME,
    priority INTEGER NOT NULL DEFAULT 2,
    is_completed BOOLEAN NOT NULL DEFAULT 0,
    date_created DATETIME NOT NULL,
    date_modified DATETIME NOT NULL,
    category_id TEXT
)
"""

CREATE_TASK_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_tasks_due_date ON tasks(due_date)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_completed ON tasks(is_completed, due_date)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_priority ON tasks(priority, is_completed)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_category ON tasks(category_id)",
]

# Migration 2: reminder fields
ADD_TASK_REMINDER_COLUMNS = [
    "ALTER TABLE tasks ADD COLUMN reminder_type INTEGER NOT NULL DEFAULT 0",
    "ALTER TABLE tasks ADD COLUMN custom_reminder_offset REAL",
]

# Migration 3: notes and recurrence
CREATE_NOTES_TABLE = """
CREATE TABLE IF NOT EXISTS notes (
    id TEXT PRIMARY KEY,
    content TEXT NOT NULL,
    tags TEXT NOT NULL DEFAULT '',
    date_created DATETIME NOT NULL,
    date_modified DATETIME NOT NULL
)
"""

CREATE_NOTE_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_notes_modified ON notes(date_modified)",
]

ADD_TASK_RECURRENCE_COLUMN = (
    "ALTER TABLE tasks ADD COLUMN recurrence_rule INTEGER NOT NULL DEFAULT 0"
)

# Migration 4: local notification registry
CREATE_NOTIFICATION_REQUESTS_TABLE = """
CREATE TABLE IF NOT EXISTS notification_requests (
    identifier TEXT PRIMARY KEY,
    task_id TEXT NOT NULL,
    fire_at DATETIME NOT NULL,
    title TEXT NOT NULL,
    body TEXT NOT NULL,
    delivered BOOLEAN NOT NULL DEFAULT 0,
    created_at DATETIME NOT NULL
)
"""

CREATE_NOTIFICATION_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_notification_fire_at ON notification_requests(delivered, fire_at)",
]
