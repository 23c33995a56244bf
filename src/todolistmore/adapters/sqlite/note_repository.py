"""SQLite implementation of NoteRepository."""

from __future__ import annotations

import sqlite3
from typing import Any

from todolistmore.adapters.sqlite.utils import (
    build_update_clause,
    generate_uuid,
    modified_after,
    row_to_dict,
)
from todolistmore.models import Note, NoteCreate, NoteFilters
from todolistmore.repositories import NoteRepository
from todolistmore.utils.dates import from_storage, to_storage, utc_now


class SqliteNoteRepository(NoteRepository):
    """SQLite implementation of note repository."""

    def __init__(self, connection: sqlite3.Connection):
        self.connection = connection

    async def list_all(self, filters: NoteFilters) -> list[Note]:
        query = "SELECT * FROM notes WHERE 1=1"
        params: list[Any] = []

        if filters.search:
            query += " AND (content LIKE ? OR tags LIKE ?)"
            search_term = f"%{filters.search}%"
            params.extend([search_term, search_term])

        sort_field, *sort_dir = (filters.sort or "date_modified:desc").split(":")
        direction = sort_dir[0].upper() if sort_dir else "ASC"
        query += f" ORDER BY {sort_field} {direction}, rowid {direction}"

        if filters.limit is not None:
            query += " LIMIT ?"
            params.append(filters.limit)

        cursor = self.connection.execute(query, params)
        return [self._row_to_note(row) for row in cursor.fetchall()]

    async def get(self, note_id: str) -> Note | None:
        cursor = self.connection.execute("SELECT * FROM notes WHERE id = ?", (note_id,))
        row = cursor.fetchone()
        return self._row_to_note(row) if row else None

    async def add(self, note_data: NoteCreate) -> Note:
        note_id = generate_uuid()
        now = to_storage(utc_now())
        self.connection.execute(
            """INSERT INTO notes (id, content, tags, date_created, date_modified)
               VALUES (?, ?, ?, ?, ?)""",
            (note_id, note_data.content, note_data.tags, now, now),
        )
        self.connection.commit()
        note = await self.get(note_id)
        assert note is not None
        return note

    async def update(self, note_id: str, changes: dict[str, Any]) -> Note | None:
        current = await self.get(note_id)
        if current is None:
            return None
        row = dict(changes)
        row["date_modified"] = to_storage(modified_after(current.date_modified))
        set_clause, params = build_update_clause(row)
        self.connection.execute(
            f"UPDATE notes SET {set_clause} WHERE id = ?", [*params, note_id]
        )
        self.connection.commit()
        return await self.get(note_id)

    async def delete(self, note_id: str) -> bool:
        cursor = self.connection.execute("DELETE FROM notes WHERE id = ?", (note_id,))
        self.connection.commit()
        return cursor.rowcount > 0

    @staticmethod
    def _row_to_note(row: sqlite3.Row) -> Note:
        note_dict = row_to_dict(row)
        note_dict["date_created"] = from_storage(note_dict["date_created"])
        note_dict["date_modified"] = from_storage(note_dict["date_modified"])
        return Note(**note_dict)
