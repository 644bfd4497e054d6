"""
Tagged validation result.

A validator returns either Ok(value) or Err(errors), never both and never
a partially accepted value.
"""
from dataclasses import dataclass
from typing import Dict, Generic, List, Tuple, TypeVar, Union

from cashbook.validation.errors import FieldError

T = TypeVar("T")

@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value

@dataclass(frozen=True)
class Err:
    errors: Tuple[FieldError, ...]

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap(self):
        raise ValueError(f"Called unwrap() on Err: {'; '.join(str(e) for e in self.errors)}")

    def by_field(self) -> Dict[str, List[FieldError]]:
        """Group errors by the field they concern, in reporting order"""
        grouped: Dict[str, List[FieldError]] = {}
        for error in self.errors:
            grouped.setdefault(error.field, []).append(error)
        return grouped

Result = Union[Ok[T], Err]
