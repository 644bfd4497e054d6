import sqlite3
from contextlib import contextmanager
from typing import Generator, Iterable, Tuple

from cashbook.validation import FieldError

class TransactionValidationError(Exception):
    """
    Raised when input for a transaction is rejected.

    Carries every failed rule, each attributed to a field.
    """

    def __init__(self, errors: Iterable[FieldError]):
        self.errors: Tuple[FieldError, ...] = tuple(errors)
        super().__init__("Validation failed: " + "; ".join(str(e) for e in self.errors))

    @property
    def codes(self) -> Tuple[str, ...]:
        return tuple(e.code.value for e in self.errors)

class PersistenceError(Exception):
    """Raised when the data store fails. The underlying cause is chained, not inspected."""
    pass

@contextmanager
def persistence_guard(operation: str) -> Generator[None, None, None]:
    """Re-raise data store failures inside the block as PersistenceError"""
    try:
        yield
    except sqlite3.Error as e:
        raise PersistenceError(f"Failed to {operation}") from e
