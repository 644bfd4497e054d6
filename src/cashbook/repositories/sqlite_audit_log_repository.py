import json
import sqlite3
from typing import List

from cashbook.database.connection import DatabaseManager
from cashbook.domain.enums import AuditAction
from cashbook.domain.models import AuditEntry
from cashbook.domain.timestamps import from_storage, to_storage
from cashbook.repositories.base import AuditLogRepository

class SQLiteAuditLogRepository(AuditLogRepository):
    """
    SQLite implementation of the AuditLogRepository.

    Snapshots are stored as JSON text.
    """

    def __init__(self, db_manager: DatabaseManager):
        self.db = db_manager

    def record(self, entry: AuditEntry) -> AuditEntry:
        with self.db.transaction() as conn:
            conn.execute(
                """
                INSERT INTO audit_logs (
                    id, user_id, action, table_name, record_id,
                    old_data, new_data, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    entry.id,
                    entry.user_id,
                    entry.action.value,
                    entry.table_name,
                    entry.record_id,
                    json.dumps(entry.old_data) if entry.old_data is not None else None,
                    json.dumps(entry.new_data) if entry.new_data is not None else None,
                    to_storage(entry.created_at),
                ),
            )
        return entry

    def get_for_user(self, user_id: str) -> List[AuditEntry]:
        conn = self.db.get_connection()
        rows = conn.execute(
            "SELECT * FROM audit_logs WHERE user_id = ? ORDER BY created_at DESC",
            (user_id,)
        ).fetchall()

        return [self._row_to_entry(row) for row in rows]

    def _row_to_entry(self, row: sqlite3.Row) -> AuditEntry:
        return AuditEntry(
            id=row["id"],
            user_id=row["user_id"],
            action=AuditAction(row["action"]),
            table_name=row["table_name"],
            record_id=row["record_id"],
            old_data=json.loads(row["old_data"]) if row["old_data"] else None,
            new_data=json.loads(row["new_data"]) if row["new_data"] else None,
            created_at=from_storage(row["created_at"]),
        )
