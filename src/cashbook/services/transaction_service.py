from contextlib import nullcontext
from typing import Callable, ContextManager, List, Optional
from uuid import uuid4

from cashbook.authorization import AccessDeniedError, AccessPolicy
from cashbook.database.connection import DatabaseManager
from cashbook.domain.enums import AuditAction, TransactionType
from cashbook.domain.models import AuditEntry, Category, Principal, Transaction
from cashbook.domain.timestamps import utcnow
from cashbook.logger import get_logger
from cashbook.repositories.base import (
    AuditLogRepository,
    CategoryRepository,
    TransactionNotFoundError,
    TransactionRepository,
)
from cashbook.services.errors import TransactionValidationError, persistence_guard
from cashbook.validation import (
    ErrorCode,
    FieldError,
    validate_category_type_match,
    validate_list_query,
    validate_transaction,
)

logger = get_logger(__name__)

def _new_id() -> str:
    return str(uuid4())

class TransactionService:
    """
    Create, read and delete transactions on behalf of an explicit principal.

    Every operation runs its access check before touching the repository.
    Given a DatabaseManager, each write and its audit entry are committed
    together or not at all.
    """

    def __init__(
        self,
        repository: TransactionRepository,
        category_repository: CategoryRepository,
        audit_repository: Optional[AuditLogRepository] = None,
        policy: Optional[AccessPolicy] = None,
        clock: Callable = utcnow,
        id_factory: Callable[[], str] = _new_id,
        db_manager: Optional[DatabaseManager] = None,
    ):
        self.repository = repository
        self.category_repository = category_repository
        self.audit_repository = audit_repository
        self.policy = policy or AccessPolicy()
        self._clock = clock
        self._new_id = id_factory
        self.db_manager = db_manager

    def create_transaction(self, principal: Principal, payload: dict) -> Transaction:
        """
        Validate and record a new transaction for the principal.

        Args:
            principal: The authenticated user; becomes the owner
            payload: Raw input with type, amount, category_id, note, occurred_at

        Returns:
            The stored transaction with its category attached

        Raises:
            TransactionValidationError: If the input breaks a field rule, the
                category does not exist, or its type differs from the
                transaction type. Nothing is stored in that case.
            AccessDeniedError: If the insert capability check fails
            PersistenceError: If the data store fails

        Example:
            txn = service.create_transaction(principal, {
                "type": "expense",
                "amount": 5000,
                "category_id": "3f0c1a52-6a8e-4c8e-9d47-1b2f7d1e0b01",
                "occurred_at": "2025-01-15T10:30:00Z",
            })
        """
        result = validate_transaction(payload)
        if not result.is_ok:
            logger.info("Rejected transaction input: %s", ", ".join(e.code.value for e in result.errors))
            raise TransactionValidationError(result.errors)

        draft = result.value

        with persistence_guard("look up category"):
            category = self.category_repository.get_by_id(draft.category_id)

        if category is None:
            raise TransactionValidationError([
                FieldError("category_id", ErrorCode.INVALID_REFERENCE, "Category not found"),
            ])

        if not validate_category_type_match(draft.type, category.type):
            raise TransactionValidationError([
                FieldError(
                    "category_id",
                    ErrorCode.TYPE_MISMATCH,
                    f"Category type '{category.type.value}' does not match "
                    f"transaction type '{draft.type.value}'",
                ),
            ])

        self.policy.require_insert(principal, principal.user_id, draft.type, category.type)

        transaction = Transaction(
            id=self._new_id(),
            user_id=principal.user_id,
            type=draft.type,
            amount=draft.amount,
            category_id=category.id,
            note=draft.note,
            occurred_at=draft.occurred_at,
            created_at=self._clock(),
        )

        with persistence_guard("create transaction"), self._unit_of_work():
            self.repository.save(transaction)
            self._audit(principal, AuditAction.INSERT, transaction.id, new_data=transaction.to_dict())

        logger.info("Created %s transaction %s for user %s", transaction.type.value, transaction.id, principal.user_id)
        return transaction.with_category(category)

    def list_transactions(
        self,
        principal: Principal,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
        transaction_type: Optional[str] = None,
    ) -> List[Transaction]:
        """
        List the principal's own transactions, newest first.

        Args:
            principal: The authenticated user
            from_date: ISO-8601 date-time lower bound (inclusive)
            to_date: ISO-8601 date-time upper bound (inclusive)
            transaction_type: 'income' or 'expense'

        Raises:
            TransactionValidationError: If a filter is malformed
        """
        result = validate_list_query({
            "from_date": from_date,
            "to_date": to_date,
            "type": transaction_type,
        })
        if not result.is_ok:
            raise TransactionValidationError(result.errors)

        query = result.value
        self.policy.require_view(principal, principal.user_id)

        with persistence_guard("fetch transactions"):
            return self.repository.get_all(
                user_id=principal.user_id,
                start_date=query.from_date,
                end_date=query.to_date,
                transaction_type=query.type,
            )

    def get_transaction(self, principal: Principal, transaction_id: str) -> Transaction:
        """
        Fetch one transaction owned by the principal.

        Raises:
            TransactionNotFoundError: If no transaction has this ID
            AccessDeniedError: If it belongs to another user
        """
        with persistence_guard("fetch transaction"):
            transaction = self.repository.get_by_id(transaction_id)

        if transaction is None:
            raise TransactionNotFoundError(f"Transaction with ID {transaction_id} not found")

        self.policy.require_view(principal, transaction.user_id)
        return transaction

    def delete_transaction(self, principal: Principal, transaction_id: str) -> Transaction:
        """
        Delete a transaction. Admins only.

        Returns:
            The deleted transaction

        Raises:
            AccessDeniedError: If the principal is not an admin
            TransactionNotFoundError: If no transaction has this ID
        """
        try:
            self.policy.require_delete(principal)
        except AccessDeniedError:
            logger.warning("User %s denied delete of transaction %s", principal.user_id, transaction_id)
            raise

        with persistence_guard("delete transaction"), self._unit_of_work():
            transaction = self.repository.get_by_id(transaction_id)
            if transaction is None:
                raise TransactionNotFoundError(f"Transaction with ID {transaction_id} not found")

            self.repository.delete(transaction_id)
            self._audit(principal, AuditAction.DELETE, transaction_id, old_data=transaction.to_dict())

        logger.info("Admin %s deleted transaction %s", principal.user_id, transaction_id)
        return transaction

    def list_categories(self, category_type: Optional[TransactionType] = None) -> List[Category]:
        """List reference categories, optionally only those of one type"""
        with persistence_guard("fetch categories"):
            return self.category_repository.get_all(category_type=category_type)

    def list_audit_log(self, principal: Principal) -> List[AuditEntry]:
        """List the audit entries the principal produced, newest first"""
        if self.audit_repository is None:
            return []

        self.policy.require_view(principal, principal.user_id)

        with persistence_guard("fetch audit log"):
            return self.audit_repository.get_for_user(principal.user_id)

    def _unit_of_work(self) -> ContextManager:
        if self.db_manager is None:
            return nullcontext()
        return self.db_manager.transaction()

    def _audit(
        self,
        principal: Principal,
        action: AuditAction,
        record_id: str,
        old_data: Optional[dict] = None,
        new_data: Optional[dict] = None,
    ) -> None:
        if self.audit_repository is None:
            return

        self.audit_repository.record(AuditEntry(
            id=self._new_id(),
            user_id=principal.user_id,
            action=action,
            table_name="transactions",
            record_id=record_id,
            old_data=old_data,
            new_data=new_data,
            created_at=self._clock(),
        ))
