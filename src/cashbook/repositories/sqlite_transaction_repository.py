import sqlite3
from datetime import datetime
from typing import List, Optional

from cashbook.database.connection import DatabaseManager
from cashbook.domain.enums import TransactionType
from cashbook.domain.models import Category, Transaction
from cashbook.domain.timestamps import from_storage, to_storage
from cashbook.repositories.base import TransactionRepository

# Categories are left-joined so a transaction whose category no longer
# resolves still comes back, with the category columns NULL
SELECT_WITH_CATEGORY = """
    SELECT t.*,
           c.id AS category_ref,
           c.name AS category_name,
           c.type AS category_type
    FROM transactions t
    LEFT JOIN categories c ON c.id = t.category_id
"""

class SQLiteTransactionRepository(TransactionRepository):
    """
    SQLite implementation of the TransactionRepository.

    Handles all database operations for transactions using raw SQL.
    """

    def __init__(self, db_manager: DatabaseManager):
        self.db = db_manager

    def save(self, transaction: Transaction) -> Transaction:
        """Save a single transaction."""
        with self.db.transaction() as conn:
            conn.execute(
                """
                INSERT INTO transactions (
                    id, user_id, type, amount, category_id,
                    note, occurred_at, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    transaction.id,
                    transaction.user_id,
                    transaction.type.value,
                    transaction.amount,
                    transaction.category_id,
                    transaction.note,
                    to_storage(transaction.occurred_at),
                    to_storage(transaction.created_at),
                ),
            )

        return transaction

    def get_by_id(self, transaction_id: str) -> Optional[Transaction]:
        """Retrieve a transaction by ID, or None if it doesn't exist"""
        conn = self.db.get_connection()
        cursor = conn.execute(
            SELECT_WITH_CATEGORY + " WHERE t.id = ?",
            (transaction_id,)
        )
        row = cursor.fetchone()

        if row is None:
            return None

        return self._row_to_transaction(row)

    def get_all(
            self,
            user_id: str,
            start_date: Optional[datetime] = None,
            end_date: Optional[datetime] = None,
            transaction_type: Optional[TransactionType] = None,
    ) -> List[Transaction]:
        """Retrieve one user's transactions with optional filtering."""
        query = SELECT_WITH_CATEGORY + " WHERE t.user_id = ?"
        params: list = [user_id]

        if start_date:
            query += " AND t.occurred_at >= ?"
            params.append(to_storage(start_date))

        if end_date:
            query += " AND t.occurred_at <= ?"
            params.append(to_storage(end_date))

        if transaction_type:
            query += " AND t.type = ?"
            params.append(transaction_type.value)

        query += " ORDER BY t.occurred_at DESC, t.created_at DESC"

        conn = self.db.get_connection()
        cursor = conn.execute(query, params)
        rows = cursor.fetchall()

        return [self._row_to_transaction(row) for row in rows]

    def delete(self, transaction_id: str) -> bool:
        """Delete a transaction by ID."""
        with self.db.transaction() as conn:
            cursor = conn.execute(
                "DELETE FROM transactions WHERE id = ?",
                (transaction_id,)
            )
            return cursor.rowcount > 0

    def _row_to_transaction(self, row: sqlite3.Row) -> Transaction:
        """Convert database row to Transaction object."""
        category = None
        if row["category_ref"] is not None:
            category = Category(
                id=row["category_ref"],
                name=row["category_name"],
                type=TransactionType(row["category_type"]),
            )

        return Transaction(
            id=row["id"],
            user_id=row["user_id"],
            type=TransactionType(row["type"]),
            amount=row["amount"],
            category_id=row["category_id"],
            note=row["note"],
            occurred_at=from_storage(row["occurred_at"]),
            created_at=from_storage(row["created_at"]),
            category=category,
        )
