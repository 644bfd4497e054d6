"""
Category aggregation for reports.

A pure, single-pass transform from transaction/category join rows to a
ReportSummary. Integer arithmetic throughout.
"""
from typing import Dict, Iterable, List, NamedTuple, Optional

from cashbook.domain.enums import TransactionType
from cashbook.domain.models import CategoryTotal, ReportSummary, Totals

class AggregationRow(NamedTuple):
    """One transaction joined with its category. Category fields are None when the join failed."""
    category_id: Optional[str]
    category_name: Optional[str]
    category_type: Optional[TransactionType]
    amount: int

def aggregate(rows: Iterable[AggregationRow]) -> ReportSummary:
    """
    Sum amounts per category and overall.

    Rows without a category cannot be attributed and are skipped.
    Categories come out in descending total order; equal totals keep the
    order in which their category was first seen.

    Args:
        rows: Join rows already scoped to one user

    Returns:
        ReportSummary with per-category totals and income/expense/balance
    """
    running: Dict[str, List] = {}

    for row in rows:
        if row.category_id is None:
            continue

        entry = running.get(row.category_id)
        if entry is None:
            # First-seen metadata wins
            running[row.category_id] = [row.category_name, row.category_type, row.amount]
        else:
            entry[2] += row.amount

    # sorted() is stable, including with reverse=True
    by_category = tuple(sorted(
        (
            CategoryTotal(
                category_id=category_id,
                category_name=name,
                category_type=category_type,
                total_amount=total,
            )
            for category_id, (name, category_type, total) in running.items()
        ),
        key=lambda c: c.total_amount,
        reverse=True,
    ))

    income = sum(c.total_amount for c in by_category if c.category_type == TransactionType.INCOME)
    expense = sum(c.total_amount for c in by_category if c.category_type == TransactionType.EXPENSE)

    return ReportSummary(
        by_category=by_category,
        totals=Totals(income=income, expense=expense),
    )

def count_orphans(rows: Iterable[AggregationRow]) -> int:
    """Number of rows aggregate() would skip for lack of a category"""
    return sum(1 for row in rows if row.category_id is None)
