from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from cashbook.domain.enums import AuditAction, TransactionType, UserRole
from cashbook.domain.timestamps import to_storage

@dataclass(frozen=True)
class Category:
    """Reference data a transaction is filed under"""
    id: str
    name: str
    type: TransactionType

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "type": self.type.value}

@dataclass(frozen=True)
class Transaction:
    """
    Core domain model representing a single transaction.

    Amounts are integers in the smallest currency unit (e.g. cents).
    Transactions are never updated once created.
    """
    id: str
    user_id: str
    type: TransactionType
    amount: int
    category_id: str
    occurred_at: datetime
    created_at: datetime
    note: Optional[str] = None
    category: Optional[Category] = field(default=None, compare=False)

    @property
    def signed_amount(self) -> int:
        """Return amount with sign for net calculations"""
        return self.amount if self.type == TransactionType.INCOME else -self.amount

    def with_category(self, category: Optional[Category]) -> "Transaction":
        """Return a copy enriched with its resolved category"""
        return replace(self, category=category)

    def to_dict(self) -> Dict[str, Any]:
        """Serializable snapshot, used for audit records and JSON output"""
        data = {
            "id": self.id,
            "user_id": self.user_id,
            "type": self.type.value,
            "amount": self.amount,
            "category_id": self.category_id,
            "note": self.note,
            "occurred_at": to_storage(self.occurred_at),
            "created_at": to_storage(self.created_at),
        }
        if self.category is not None:
            data["category"] = self.category.to_dict()
        return data

    def __repr__(self):
        sign = "+" if self.type == TransactionType.INCOME else "-"
        return f"Transaction({self.occurred_at:%Y-%m-%d}, {self.category_id[:8]}, {sign}{self.amount})"

@dataclass(frozen=True)
class Principal:
    """The authenticated caller, passed explicitly to every service call"""
    user_id: str
    role: UserRole = UserRole.USER

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

@dataclass(frozen=True)
class Profile:
    """A known user of the application"""
    id: str
    email: str
    role: UserRole
    created_at: datetime

    def to_principal(self) -> Principal:
        return Principal(user_id=self.id, role=self.role)

@dataclass(frozen=True)
class AuditEntry:
    """One recorded write against a table"""
    id: str
    user_id: str
    action: AuditAction
    table_name: str
    record_id: str
    created_at: datetime
    old_data: Optional[Dict[str, Any]] = None
    new_data: Optional[Dict[str, Any]] = None

@dataclass(frozen=True)
class CategoryTotal:
    """Summed amount for one category within a report"""
    category_id: str
    category_name: str
    category_type: TransactionType
    total_amount: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category_id": self.category_id,
            "category_name": self.category_name,
            "category_type": self.category_type.value,
            "total_amount": self.total_amount,
        }

@dataclass(frozen=True)
class Totals:
    """Aggregate income, expense and balance of a report"""
    income: int = 0
    expense: int = 0

    @property
    def balance(self) -> int:
        return self.income - self.expense

    def to_dict(self) -> Dict[str, int]:
        return {"income": self.income, "expense": self.expense, "balance": self.balance}

@dataclass(frozen=True)
class ReportSummary:
    """
    Per-category totals plus aggregate totals.

    Derived on every request, never persisted. by_category is ordered by
    descending total.
    """
    by_category: Tuple[CategoryTotal, ...] = ()
    totals: Totals = field(default_factory=Totals)

    @property
    def income_categories(self) -> Tuple[CategoryTotal, ...]:
        return tuple(c for c in self.by_category if c.category_type == TransactionType.INCOME)

    @property
    def expense_categories(self) -> Tuple[CategoryTotal, ...]:
        return tuple(c for c in self.by_category if c.category_type == TransactionType.EXPENSE)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "by_category": [c.to_dict() for c in self.by_category],
            "totals": self.totals.to_dict(),
        }
