"""
Input validation for transactions.

Quick Start:
    >>> from cashbook.validation import validate_transaction
    >>>
    >>> result = validate_transaction(payload)
    >>> if result.is_ok:
    ...     draft = result.value
    ... else:
    ...     print(result.by_field())
"""
from cashbook.validation.errors import ErrorCode, FieldError
from cashbook.validation.result import Err, Ok, Result
from cashbook.validation.transaction import (
    AMOUNT_MAX,
    NOTE_MAX_LENGTH,
    TransactionDraft,
    TransactionQuery,
    parse_timestamp,
    validate_amount_positive,
    validate_category_type_match,
    validate_list_query,
    validate_transaction,
)

__all__ = [
    "ErrorCode",
    "FieldError",
    "Ok",
    "Err",
    "Result",
    "AMOUNT_MAX",
    "NOTE_MAX_LENGTH",
    "TransactionDraft",
    "TransactionQuery",
    "parse_timestamp",
    "validate_amount_positive",
    "validate_category_type_match",
    "validate_list_query",
    "validate_transaction",
]
