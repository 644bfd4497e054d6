"""
Validation rules for transaction input.

Inputs are deserialized JSON-like mappings. Values must already have the
exact expected type: nothing is coerced (the string "100" is not an
amount, 10.0 is not an integer amount).
"""
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Mapping, Optional, Tuple, Union

from cashbook.domain.enums import TransactionType
from cashbook.domain.timestamps import ensure_utc
from cashbook.validation.errors import ErrorCode, FieldError
from cashbook.validation.result import Err, Ok, Result

NOTE_MAX_LENGTH = 500

# Largest value a SQLite INTEGER column holds
AMOUNT_MAX = 2**63 - 1

UUID_PATTERN = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)

# Date and time are both required; fromisoformat() alone would accept a bare date
ISO_DATETIME_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}")

TYPE_VALUES = tuple(t.value for t in TransactionType)

@dataclass(frozen=True)
class TransactionDraft:
    """Normalized, validated input for a new transaction"""
    type: TransactionType
    amount: int
    category_id: str
    occurred_at: datetime
    note: Optional[str] = None

    def to_payload(self) -> dict:
        """Render back to the raw input shape accepted by validate_transaction()"""
        return {
            "type": self.type.value,
            "amount": self.amount,
            "category_id": self.category_id,
            "note": self.note,
            "occurred_at": self.occurred_at.isoformat(),
        }

@dataclass(frozen=True)
class TransactionQuery:
    """Validated filters for listing and reporting on transactions"""
    from_date: Optional[datetime] = None
    to_date: Optional[datetime] = None
    type: Optional[TransactionType] = None

def validate_amount_positive(amount: Any) -> bool:
    """True iff amount is a positive integer in the smallest currency unit that fits storage"""
    # bool is a subclass of int
    return isinstance(amount, int) and not isinstance(amount, bool) and 0 < amount <= AMOUNT_MAX

def validate_category_type_match(
    transaction_type: Union[TransactionType, str],
    category_type: Union[TransactionType, str],
) -> bool:
    """True iff a transaction's type agrees with its category's type"""
    return _type_value(transaction_type) == _type_value(category_type)

def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 date-time string into an aware UTC datetime.

    Returns:
        The parsed datetime, or None if value is not a full ISO-8601 date-time
    """
    if not isinstance(value, str) or not ISO_DATETIME_PREFIX.match(value):
        return None
    try:
        return ensure_utc(datetime.fromisoformat(value))
    except (ValueError, OverflowError):
        # OverflowError: the offset pushes the UTC value past datetime.min or max
        return None

def validate_transaction(payload: Any) -> Result[TransactionDraft]:
    """
    Validate raw input for a new transaction.

    Every rule is checked, so the caller gets all field errors at once.

    Args:
        payload: Deserialized request body

    Returns:
        Ok(TransactionDraft) if every rule passed, otherwise Err with one
        FieldError per failed rule
    """
    if not isinstance(payload, Mapping):
        return Err((FieldError("_payload", ErrorCode.INVALID_PAYLOAD, "Expected an object"),))

    errors: List[FieldError] = []

    transaction_type, error = _check_type(payload.get("type"), "type")
    if error:
        errors.append(error)

    amount = payload.get("amount")
    if not validate_amount_positive(amount):
        errors.append(FieldError(
            "amount",
            ErrorCode.INVALID_AMOUNT,
            "Amount must be a positive integer (in the smallest currency unit)",
        ))

    category_id = payload.get("category_id")
    if not isinstance(category_id, str) or not UUID_PATTERN.fullmatch(category_id):
        errors.append(FieldError("category_id", ErrorCode.INVALID_REFERENCE, "Invalid category ID"))

    note, error = _check_note(payload.get("note"))
    if error:
        errors.append(error)

    occurred_at = parse_timestamp(payload.get("occurred_at"))
    if occurred_at is None:
        errors.append(FieldError("occurred_at", ErrorCode.INVALID_TIMESTAMP, "Invalid date format"))

    if errors:
        return Err(tuple(errors))

    return Ok(TransactionDraft(
        type=transaction_type,
        amount=amount,
        category_id=category_id.lower(),
        occurred_at=occurred_at,
        note=note,
    ))

def validate_list_query(params: Mapping[str, Any]) -> Result[TransactionQuery]:
    """
    Validate optional list/report filters.

    Missing, None and empty-string values mean "no filter".
    """
    errors: List[FieldError] = []
    dates = {}

    for name in ("from_date", "to_date"):
        raw = params.get(name)
        if raw in (None, ""):
            dates[name] = None
            continue
        dates[name] = parse_timestamp(raw)
        if dates[name] is None:
            errors.append(FieldError(name, ErrorCode.INVALID_TIMESTAMP, "Invalid date format"))

    transaction_type = None
    if params.get("type") not in (None, ""):
        transaction_type, error = _check_type(params.get("type"), "type")
        if error:
            errors.append(error)

    if dates["from_date"] and dates["to_date"] and dates["from_date"] > dates["to_date"]:
        errors.append(FieldError("from_date", ErrorCode.INVALID_RANGE, "from_date is after to_date"))

    if errors:
        return Err(tuple(errors))

    return Ok(TransactionQuery(
        from_date=dates["from_date"],
        to_date=dates["to_date"],
        type=transaction_type,
    ))

def _check_type(value: Any, field_name: str) -> Tuple[Optional[TransactionType], Optional[FieldError]]:
    if isinstance(value, str) and value in TYPE_VALUES:
        return TransactionType(value), None
    return None, FieldError(
        field_name,
        ErrorCode.INVALID_ENUM,
        f"Expected one of {', '.join(TYPE_VALUES)}",
    )

def _check_note(value: Any) -> Tuple[Optional[str], Optional[FieldError]]:
    if value is None or value == "":
        return None, None
    if not isinstance(value, str):
        return None, FieldError("note", ErrorCode.INVALID_NOTE, "Note must be a string")
    if len(value) > NOTE_MAX_LENGTH:
        return None, FieldError(
            "note",
            ErrorCode.NOTE_TOO_LONG,
            f"Note must be at most {NOTE_MAX_LENGTH} characters",
        )
    return value, None

def _type_value(value: Union[TransactionType, str]) -> str:
    return value.value if isinstance(value, TransactionType) else value
