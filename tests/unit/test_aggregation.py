import pytest

from cashbook.aggregation import AggregationRow, aggregate, count_orphans
from cashbook.domain.enums import TransactionType
from cashbook.domain.models import CategoryTotal, ReportSummary, Totals

INCOME = TransactionType.INCOME
EXPENSE = TransactionType.EXPENSE

def row(category_id, amount, category_type=EXPENSE, name=None):
    return AggregationRow(category_id, name or category_id, category_type, amount)

@pytest.mark.unit
class TestAggregate:

    def test_food_and_salary_scenario(self):
        # Arrange
        rows = [
            row("food", 5000),
            row("food", 1500),
            row("salary", 200000, INCOME),
        ]

        # Act
        summary = aggregate(rows)

        # Assert
        assert summary.by_category == (
            CategoryTotal("salary", "salary", INCOME, 200000),
            CategoryTotal("food", "food", EXPENSE, 6500),
        )
        assert summary.totals.income == 200000
        assert summary.totals.expense == 6500
        assert summary.totals.balance == 193500

    def test_empty_input(self):
        summary = aggregate([])

        assert summary.by_category == ()
        assert summary.totals.to_dict() == {"income": 0, "expense": 0, "balance": 0}
        assert summary == ReportSummary()

    def test_descending_order(self):
        summary = aggregate([row("a", 10), row("b", 30), row("c", 20)])
        assert [c.category_id for c in summary.by_category] == ["b", "c", "a"]

    def test_ties_keep_first_seen_order(self):
        summary = aggregate([row("x", 50), row("big", 100), row("y", 25), row("y", 25), row("z", 50)])
        assert [c.category_id for c in summary.by_category] == ["big", "x", "y", "z"]

    def test_first_seen_metadata_wins(self):
        summary = aggregate([
            AggregationRow("food", "Food", EXPENSE, 100),
            AggregationRow("food", "Groceries", EXPENSE, 200),
        ])
        assert summary.by_category == (CategoryTotal("food", "Food", EXPENSE, 300),)

    def test_orphaned_rows_are_skipped(self):
        rows = [row("food", 100), AggregationRow(None, None, None, 999), row("food", 50)]

        summary = aggregate(rows)

        assert summary.by_category == (CategoryTotal("food", "food", EXPENSE, 150),)
        assert summary.totals.expense == 150
        assert count_orphans(rows) == 1

    def test_only_orphans(self):
        summary = aggregate([AggregationRow(None, None, None, 10)])
        assert summary == ReportSummary()

    def test_integer_sums_stay_exact(self):
        huge = 10**18
        summary = aggregate([row("a", huge), row("a", 1)])
        assert summary.by_category[0].total_amount == huge + 1
        assert isinstance(summary.totals.expense, int)

    def test_deterministic(self):
        rows = [row("a", 5), row("b", 5, INCOME), row("c", 7), row("a", 2)]
        assert aggregate(rows) == aggregate(rows)
        assert aggregate(rows).to_dict() == aggregate(list(rows)).to_dict()

    def test_result_contents_do_not_depend_on_input_order(self):
        rows = [row("a", 5), row("b", 9, INCOME), row("c", 7), row("a", 3)]

        forward = aggregate(rows)
        backward = aggregate(list(reversed(rows)))

        assert set(forward.by_category) == set(backward.by_category)
        assert forward.totals == backward.totals

    def test_accepts_a_generator(self):
        summary = aggregate(row(c, 1) for c in ["a", "b", "a"])
        assert summary.totals.expense == 3

    @pytest.mark.parametrize("rows", [
        [],
        [row("a", 1, INCOME)],
        [row("a", 1)],
        [row("a", 300, INCOME), row("b", 500)],
        [row("a", 7, INCOME), row("b", 7), row("c", 1, INCOME)],
    ])
    def test_balance_is_income_minus_expense(self, rows):
        totals = aggregate(rows).totals
        assert totals.balance == totals.income - totals.expense

    def test_to_dict_shape(self):
        summary = aggregate([row("salary", 100, INCOME, name="Salary")])
        assert summary.to_dict() == {
            "by_category": [{
                "category_id": "salary",
                "category_name": "Salary",
                "category_type": "income",
                "total_amount": 100,
            }],
            "totals": {"income": 100, "expense": 0, "balance": 100},
        }

@pytest.mark.unit
class TestReportSummary:

    def test_splits_income_and_expense_categories(self):
        summary = aggregate([row("a", 1, INCOME), row("b", 2), row("c", 3, INCOME)])

        assert [c.category_id for c in summary.income_categories] == ["c", "a"]
        assert [c.category_id for c in summary.expense_categories] == ["b"]

    def test_negative_balance(self):
        assert Totals(income=100, expense=250).balance == -150
