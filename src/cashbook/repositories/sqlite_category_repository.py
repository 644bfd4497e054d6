import sqlite3
from typing import List, Optional

from cashbook.database.connection import DatabaseManager
from cashbook.domain.enums import TransactionType
from cashbook.domain.models import Category
from cashbook.repositories.base import CategoryRepository

class SQLiteCategoryRepository(CategoryRepository):
    """SQLite implementation of the CategoryRepository."""

    def __init__(self, db_manager: DatabaseManager):
        self.db = db_manager

    def save(self, category: Category) -> Category:
        """Insert a category; an existing row with the same ID is kept as is."""
        with self.db.transaction() as conn:
            conn.execute(
                "INSERT OR IGNORE INTO categories (id, name, type) VALUES (?, ?, ?)",
                (category.id, category.name, category.type.value),
            )
        return category

    def get_by_id(self, category_id: str) -> Optional[Category]:
        conn = self.db.get_connection()
        row = conn.execute(
            "SELECT * FROM categories WHERE id = ?",
            (category_id,)
        ).fetchone()

        return self._row_to_category(row) if row else None

    def get_all(self, category_type: Optional[TransactionType] = None) -> List[Category]:
        query = "SELECT * FROM categories"
        params = []

        if category_type:
            query += " WHERE type = ?"
            params.append(category_type.value)

        query += " ORDER BY type DESC, name"

        conn = self.db.get_connection()
        return [self._row_to_category(row) for row in conn.execute(query, params).fetchall()]

    def _row_to_category(self, row: sqlite3.Row) -> Category:
        return Category(
            id=row["id"],
            name=row["name"],
            type=TransactionType(row["type"]),
        )
