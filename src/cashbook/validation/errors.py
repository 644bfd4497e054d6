from dataclasses import dataclass
from enum import Enum

class ErrorCode(Enum):
    """Field-level validation failures. All are client-input errors."""
    INVALID_ENUM = "InvalidEnum"
    INVALID_AMOUNT = "InvalidAmount"
    INVALID_REFERENCE = "InvalidReference"
    INVALID_TIMESTAMP = "InvalidTimestamp"
    NOTE_TOO_LONG = "NoteTooLong"
    TYPE_MISMATCH = "TypeMismatch"
    INVALID_NOTE = "InvalidNote"
    INVALID_PAYLOAD = "InvalidPayload"
    INVALID_RANGE = "InvalidRange"

@dataclass(frozen=True)
class FieldError:
    """A single failed rule, attributed to the input field it concerns"""
    field: str
    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message} ({self.code.value})"
