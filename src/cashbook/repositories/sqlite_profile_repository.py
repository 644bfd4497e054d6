import sqlite3
from typing import Optional

from cashbook.database.connection import DatabaseManager
from cashbook.domain.enums import UserRole
from cashbook.domain.models import Profile
from cashbook.domain.timestamps import from_storage, to_storage
from cashbook.repositories.base import DuplicateProfileError, ProfileRepository

class SQLiteProfileRepository(ProfileRepository):
    """SQLite implementation of the ProfileRepository."""

    def __init__(self, db_manager: DatabaseManager):
        self.db = db_manager

    def save(self, profile: Profile) -> Profile:
        try:
            with self.db.transaction() as conn:
                conn.execute(
                    "INSERT INTO profiles (id, email, role, created_at) VALUES (?, ?, ?, ?)",
                    (profile.id, profile.email, profile.role.value, to_storage(profile.created_at)),
                )
        except sqlite3.IntegrityError as e:
            raise DuplicateProfileError(f"Profile already exists: {profile.email}") from e

        return profile

    def get_by_id(self, profile_id: str) -> Optional[Profile]:
        conn = self.db.get_connection()
        row = conn.execute(
            "SELECT * FROM profiles WHERE id = ?",
            (profile_id,)
        ).fetchone()

        if row is None:
            return None

        return Profile(
            id=row["id"],
            email=row["email"],
            role=UserRole(row["role"]),
            created_at=from_storage(row["created_at"]),
        )
