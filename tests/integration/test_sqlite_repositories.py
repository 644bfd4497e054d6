import pytest
from datetime import datetime, timezone

from cashbook.database.connection import schema_version
from cashbook.database.setup import initialize_database
from cashbook.domain.enums import AuditAction, TransactionType, UserRole
from cashbook.domain.models import AuditEntry, Category, Profile
from cashbook.repositories.base import DuplicateProfileError
from cashbook.repositories.sqlite_audit_log_repository import SQLiteAuditLogRepository
from cashbook.repositories.sqlite_category_repository import SQLiteCategoryRepository
from cashbook.repositories.sqlite_profile_repository import SQLiteProfileRepository

from tests.ids import ADMIN_ID, FOOD_ID, OTHER_USER_ID, USER_ID

@pytest.mark.integration
class TestDatabaseSetup:

    def test_initialize_is_repeatable(self, test_db):
        row = initialize_database(test_db)

        assert row["version"] == 1
        assert len(SQLiteCategoryRepository(test_db).get_all()) == 12

    def test_schema_version_recorded(self, test_db):
        assert schema_version(test_db.get_connection())["version"] == 1

@pytest.mark.integration
class TestSQLiteCategoryRepository:

    def test_get_by_id(self, test_db):
        category = SQLiteCategoryRepository(test_db).get_by_id(FOOD_ID)
        assert category == Category(FOOD_ID, "Food", TransactionType.EXPENSE)

    def test_get_by_id_missing(self, test_db):
        assert SQLiteCategoryRepository(test_db).get_by_id("nope") is None

    def test_filter_by_type(self, test_db):
        incomes = SQLiteCategoryRepository(test_db).get_all(TransactionType.INCOME)

        assert incomes
        assert all(c.type == TransactionType.INCOME for c in incomes)
        assert [c.name for c in incomes] == sorted(c.name for c in incomes)

    def test_save_does_not_overwrite(self, test_db):
        repo = SQLiteCategoryRepository(test_db)

        repo.save(Category(FOOD_ID, "Renamed", TransactionType.INCOME))

        assert repo.get_by_id(FOOD_ID).name == "Food"

@pytest.mark.integration
class TestSQLiteProfileRepository:

    def test_round_trip(self, test_db):
        profile = SQLiteProfileRepository(test_db).get_by_id(ADMIN_ID)

        assert profile.email == "admin@example.com"
        assert profile.role == UserRole.ADMIN
        assert profile.to_principal().is_admin

    def test_duplicate_email(self, test_db):
        with pytest.raises(DuplicateProfileError):
            SQLiteProfileRepository(test_db).save(Profile(
                id="33333333-3333-4333-8333-333333333333",
                email="user@example.com",
                role=UserRole.USER,
                created_at=datetime(2025, 1, 2, tzinfo=timezone.utc),
            ))

@pytest.mark.integration
class TestSQLiteAuditLogRepository:

    def test_record_and_read_back_newest_first(self, test_db):
        # Arrange
        repo = SQLiteAuditLogRepository(test_db)
        first = AuditEntry(
            id="a1", user_id=USER_ID, action=AuditAction.INSERT, table_name="transactions",
            record_id="txn-1", created_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
            new_data={"amount": 100, "note": None},
        )
        second = AuditEntry(
            id="a2", user_id=USER_ID, action=AuditAction.DELETE, table_name="transactions",
            record_id="txn-1", created_at=datetime(2025, 1, 2, tzinfo=timezone.utc),
            old_data={"amount": 100},
        )
        theirs = AuditEntry(
            id="a3", user_id=OTHER_USER_ID, action=AuditAction.INSERT, table_name="transactions",
            record_id="txn-9", created_at=datetime(2025, 1, 3, tzinfo=timezone.utc),
        )

        # Act
        for entry in (first, second, theirs):
            repo.record(entry)
        entries = repo.get_for_user(USER_ID)

        # Assert
        assert entries == [second, first]

@pytest.mark.integration
class TestDatabaseManagerTransactions:

    def test_inner_scope_does_not_commit(self, test_db):
        categories = SQLiteCategoryRepository(test_db)

        with pytest.raises(RuntimeError):
            with test_db.transaction():
                categories.save(Category(ADMIN_ID, "Gifts", TransactionType.INCOME))
                assert test_db.in_transaction
                raise RuntimeError("abort")

        assert categories.get_by_id(ADMIN_ID) is None
        assert not test_db.in_transaction

    def test_outer_scope_commits(self, test_db):
        with test_db.transaction():
            SQLiteCategoryRepository(test_db).save(Category(ADMIN_ID, "Gifts", TransactionType.INCOME))

        test_db.get_connection().rollback()

        assert SQLiteCategoryRepository(test_db).get_by_id(ADMIN_ID).name == "Gifts"
