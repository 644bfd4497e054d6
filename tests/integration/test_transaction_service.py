import pytest

from cashbook.repositories.sqlite_audit_log_repository import SQLiteAuditLogRepository
from cashbook.repositories.sqlite_category_repository import SQLiteCategoryRepository
from cashbook.repositories.sqlite_transaction_repository import SQLiteTransactionRepository
from cashbook.services.errors import PersistenceError, TransactionValidationError
from cashbook.services.report_service import ReportService
from cashbook.services.transaction_service import TransactionService

@pytest.fixture
def service(test_db) -> TransactionService:
    return TransactionService(
        SQLiteTransactionRepository(test_db),
        SQLiteCategoryRepository(test_db),
        SQLiteAuditLogRepository(test_db),
        db_manager=test_db,
    )

def count(test_db, table: str) -> int:
    return test_db.get_connection().execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]

@pytest.mark.integration
class TestWritesWithAudit:

    def test_create_stores_row_and_audit_entry(self, service, test_db, user, valid_payload):
        service.create_transaction(user, valid_payload)

        assert count(test_db, "transactions") == 1
        assert count(test_db, "audit_logs") == 1

    def test_failed_audit_write_rolls_back_create(self, service, test_db, user, valid_payload):
        test_db.get_connection().execute("DROP TABLE audit_logs")

        with pytest.raises(PersistenceError):
            service.create_transaction(user, valid_payload)

        assert count(test_db, "transactions") == 0
        assert not test_db.in_transaction

    def test_failed_audit_write_rolls_back_delete(self, service, test_db, user, admin, valid_payload):
        created = service.create_transaction(user, valid_payload)
        test_db.get_connection().execute("DROP TABLE audit_logs")

        with pytest.raises(PersistenceError):
            service.delete_transaction(admin, created.id)

        assert service.get_transaction(user, created.id).id == created.id

    def test_store_works_after_a_rolled_back_write(self, service, test_db, user, valid_payload):
        test_db.get_connection().execute("DROP TABLE audit_logs")
        with pytest.raises(PersistenceError):
            service.create_transaction(user, valid_payload)

        plain = TransactionService(SQLiteTransactionRepository(test_db), SQLiteCategoryRepository(test_db))
        plain.create_transaction(user, valid_payload)

        assert count(test_db, "transactions") == 1

@pytest.mark.integration
class TestStoredValueRanges:

    def test_early_year_survives_storage(self, service, test_db, user, valid_payload):
        """Years below 1000 are stored zero-padded and read back"""
        service.create_transaction(user, {**valid_payload, "occurred_at": "0999-06-01T00:00:00Z"})
        service.create_transaction(user, valid_payload)

        listed = service.list_transactions(user)
        summary = ReportService(SQLiteTransactionRepository(test_db)).category_report(user)

        assert [t.occurred_at.year for t in listed] == [2024, 999]
        assert summary.totals.expense == 2 * valid_payload["amount"]

    def test_amount_beyond_integer_column_is_rejected(self, service, test_db, user, valid_payload):
        with pytest.raises(TransactionValidationError) as exc_info:
            service.create_transaction(user, {**valid_payload, "amount": 2**63})

        assert exc_info.value.codes == ("InvalidAmount",)
        assert count(test_db, "transactions") == 0
