from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from cashbook.domain.enums import TransactionType
from cashbook.domain.models import AuditEntry, Category, Profile, Transaction

class TransactionNotFoundError(Exception):
    """Raised when a transaction cannot be found."""
    pass

class CategoryNotFoundError(Exception):
    """Raised when a category cannot be found."""
    pass

class ProfileNotFoundError(Exception):
    """Raised when a user profile cannot be found."""
    pass

class DuplicateProfileError(Exception):
    """Raised when a profile with the same email already exists."""
    pass

class TransactionRepository(ABC):
    """
    Abstract repository for transaction persistence.

    There is deliberately no update operation: transactions are immutable.
    """

    @abstractmethod
    def save(self, transaction: Transaction) -> Transaction:
        """
        Save a new transaction.

        Args:
            transaction: Transaction to save

        Returns:
            The saved transaction
        """
        pass

    @abstractmethod
    def get_by_id(self, transaction_id: str) -> Optional[Transaction]:
        """
        Retrieve a transaction by ID, with its category attached.

        Returns:
            Transaction if found, None otherwise
        """
        pass

    @abstractmethod
    def get_all(
        self,
        user_id: str,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        transaction_type: Optional[TransactionType] = None,
    ) -> List[Transaction]:
        """
        Retrieve one user's transactions, newest first.

        Each transaction has its category attached, or None when the
        category no longer resolves.

        Args:
            user_id: Owner of the transactions
            start_date: Include transactions occurring on or after this time
            end_date: Include transactions occurring on or before this time
            transaction_type: Filter by INCOME or EXPENSE

        Returns:
            List of matching transactions
        """
        pass

    @abstractmethod
    def delete(self, transaction_id: str) -> bool:
        """
        Delete a transaction by ID.

        Returns:
            True if deleted, False if not found
        """
        pass

class CategoryRepository(ABC):
    """Abstract repository for category reference data."""

    @abstractmethod
    def save(self, category: Category) -> Category:
        """Insert a category, leaving an existing one with the same ID untouched."""
        pass

    @abstractmethod
    def get_by_id(self, category_id: str) -> Optional[Category]:
        pass

    @abstractmethod
    def get_all(self, category_type: Optional[TransactionType] = None) -> List[Category]:
        """Retrieve categories ordered by type then name."""
        pass

class ProfileRepository(ABC):
    """Abstract repository for user profiles."""

    @abstractmethod
    def save(self, profile: Profile) -> Profile:
        """
        Raises:
            DuplicateProfileError: If the email is already registered
        """
        pass

    @abstractmethod
    def get_by_id(self, profile_id: str) -> Optional[Profile]:
        pass

class AuditLogRepository(ABC):
    """Abstract repository for the append-only audit log."""

    @abstractmethod
    def record(self, entry: AuditEntry) -> AuditEntry:
        pass

    @abstractmethod
    def get_for_user(self, user_id: str) -> List[AuditEntry]:
        """Retrieve the entries a user produced, newest first."""
        pass
