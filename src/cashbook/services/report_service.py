from typing import List, Optional

from cashbook.aggregation import AggregationRow, aggregate, count_orphans
from cashbook.authorization import AccessPolicy
from cashbook.domain.models import Principal, ReportSummary, Transaction
from cashbook.logger import get_logger
from cashbook.repositories.base import TransactionRepository
from cashbook.services.errors import TransactionValidationError, persistence_guard
from cashbook.validation import validate_list_query

logger = get_logger(__name__)

class ReportService:
    """Builds category reports from a user's transactions. Nothing is cached."""

    def __init__(self, repository: TransactionRepository, policy: Optional[AccessPolicy] = None):
        self.repository = repository
        self.policy = policy or AccessPolicy()

    def category_report(
        self,
        principal: Principal,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
        transaction_type: Optional[str] = None,
    ) -> ReportSummary:
        """
        Summarize the principal's transactions by category.

        Args:
            principal: The authenticated user
            from_date: ISO-8601 date-time lower bound (inclusive)
            to_date: ISO-8601 date-time upper bound (inclusive)
            transaction_type: 'income' or 'expense'

        Returns:
            ReportSummary ordered by descending category total

        Raises:
            TransactionValidationError: If a filter is malformed
            PersistenceError: If the data store fails

        Example:
            ### January 2025 spending
            summary = service.category_report(
                principal,
                from_date="2025-01-01T00:00:00Z",
                to_date="2025-01-31T23:59:59Z",
                transaction_type="expense",
            )
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

        with persistence_guard("generate report"):
            transactions = self.repository.get_all(
                user_id=principal.user_id,
                start_date=query.from_date,
                end_date=query.to_date,
                transaction_type=query.type,
            )

        rows = to_rows(transactions)

        orphans = count_orphans(rows)
        if orphans:
            # Still excluded from the report; surfaced here so it is not silent
            logger.warning(
                "%d transaction(s) for user %s have no resolvable category and were left out of the report",
                orphans,
                principal.user_id,
            )

        return aggregate(rows)

def to_rows(transactions: List[Transaction]) -> List[AggregationRow]:
    """Flatten transactions with attached categories into aggregation rows"""
    rows = []
    for txn in transactions:
        category = txn.category
        if category is None:
            rows.append(AggregationRow(None, None, None, txn.amount))
        else:
            rows.append(AggregationRow(category.id, category.name, category.type, txn.amount))
    return rows
