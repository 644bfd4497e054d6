"""
Application-level access control.

Every service checks one of these capabilities before touching storage:

- VIEW_OWN: a user may read only records they own
- INSERT_OWN_MATCHING_TYPE: a user may create only their own transactions,
  and only when the transaction type matches the category type
- DELETE_IF_ADMIN: only admins may delete transactions
"""
from enum import Enum
from typing import Union

from cashbook.domain.enums import TransactionType
from cashbook.domain.models import Principal
from cashbook.validation import validate_category_type_match

class Capability(Enum):
    VIEW_OWN = "viewOwn"
    INSERT_OWN_MATCHING_TYPE = "insertOwnMatchingType"
    DELETE_IF_ADMIN = "deleteIfAdmin"

class AccessDeniedError(Exception):
    """Raised when a principal lacks the capability for an operation."""

    def __init__(self, capability: Capability, message: str):
        super().__init__(message)
        self.capability = capability
        self.message = message

class AccessPolicy:
    """
    Stateless capability checks.

    The can_* methods answer the question; require_* raise
    AccessDeniedError instead of returning False.
    """

    def can_view(self, principal: Principal, owner_id: str) -> bool:
        return principal.user_id == owner_id

    def can_insert(
        self,
        principal: Principal,
        owner_id: str,
        transaction_type: Union[TransactionType, str],
        category_type: Union[TransactionType, str],
    ) -> bool:
        return (
            principal.user_id == owner_id
            and validate_category_type_match(transaction_type, category_type)
        )

    def can_delete(self, principal: Principal) -> bool:
        return principal.is_admin

    def require_view(self, principal: Principal, owner_id: str) -> None:
        if not self.can_view(principal, owner_id):
            raise AccessDeniedError(
                Capability.VIEW_OWN,
                f"User {principal.user_id} cannot view records owned by another user",
            )

    def require_insert(
        self,
        principal: Principal,
        owner_id: str,
        transaction_type: Union[TransactionType, str],
        category_type: Union[TransactionType, str],
    ) -> None:
        if not self.can_insert(principal, owner_id, transaction_type, category_type):
            raise AccessDeniedError(
                Capability.INSERT_OWN_MATCHING_TYPE,
                f"User {principal.user_id} cannot insert this transaction",
            )

    def require_delete(self, principal: Principal) -> None:
        if not self.can_delete(principal):
            raise AccessDeniedError(
                Capability.DELETE_IF_ADMIN,
                "Only admins can delete transactions",
            )
