"""SQLite implementation of CategoryRepository."""

from __future__ import annotations

import sqlite3
from typing import Any

from todolistmore.adapters.sqlite.utils import (
    build_update_clause,
    generate_uuid,
    modified_after,
    row_to_dict,
)
from todolistmore.models import DEFAULT_CATEGORY_COLOR, Category, CategoryCreate, CategoryFilters
from todolistmore.repositories import CategoryRepository
from todolistmore.utils.dates import from_storage, to_storage


class SqliteCategoryRepository(CategoryRepository):
    """SQLite implementation of category repository."""

    def __init__(self, connection: sqlite3.Connection):
        self.connection = connection

    async def list_all(self, filters: CategoryFilters) -> list[Category]:
        query = "SELECT * FROM categories WHERE 1=1"
        params: list[Any] = []

        if filters.name is not None:
            query += " AND name = ?"
            params.append(filters.name)

        if filters.search:
            query += " AND name LIKE ?"
            params.append(f"%{filters.search}%")

        _, *sort_dir = (filters.sort or "name").split(":")
        direction = sort_dir[0].upper() if sort_dir else "ASC"
        query += f" ORDER BY name COLLATE NOCASE {direction}, id"

        if filters.limit is not None:
            query += " LIMIT ?"
            params.append(filters.limit)

        cursor = self.connection.execute(query, params)
        return [Category(**row_to_dict(row)) for row in cursor.fetchall()]

    async def get(self, category_id: str) -> Category | None:
        cursor = self.connection.execute(
            "SELECT * FROM categories WHERE id = ?", (category_id,)
        )
        row = cursor.fetchone()
        return Category(**row_to_dict(row)) if row else None

    async def add(self, category_data: CategoryCreate) -> Category:
        category_id = generate_uuid()
        self.connection.execute(
            "INSERT INTO categories (id, name, color_hex) VALUES (?, ?, ?)",
            (category_id, category_data.name, category_data.color_hex or DEFAULT_CATEGORY_COLOR),
        )
        self.connection.commit()
        category = await self.get(category_id)
        assert category is not None
        return category

    async def update(self, category_id: str, changes: dict[str, Any]) -> Category | None:
        if await self.get(category_id) is None:
            return None
        if changes:
            set_clause, params = build_update_clause(changes)
            self.connection.execute(
                f"UPDATE categories SET {set_clause} WHERE id = ?", [*params, category_id]
            )
            self.connection.commit()
        return await self.get(category_id)

    async def delete(self, category_id: str) -> bool:
        """Delete a category and detach its tasks in one transaction."""
        try:
            rows = self.connection.execute(
                "SELECT id, date_modified FROM tasks WHERE category_id = ?", (category_id,)
            ).fetchall()
            self.connection.executemany(
                "UPDATE tasks SET category_id = NULL, date_modified = ? WHERE id = ?",
                [
                    (to_storage(modified_after(from_storage(row[1]))), row[0])
                    for row in rows
                ],
            )
            cursor = self.connection.execute(
                "DELETE FROM categories WHERE id = ?", (category_id,)
            )
            self.connection.commit()
        except sqlite3.Error:
            self.connection.rollback()
            raise
        return cursor.rowcount > 0

    def delete_all(self) -> int:
        try:
            self.connection.execute("UPDATE tasks SET category_id = NULL")
            cursor = self.connection.execute("DELETE FROM categories")
            self.connection.commit()
        except sqlite3.Error:
            self.connection.rollback()
            raise
        return cursor.rowcount
