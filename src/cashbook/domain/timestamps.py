"""
UTC timestamp helpers.

Every timestamp is held as a timezone-aware UTC datetime in memory and as
fixed-width text in storage, so comparing the stored strings orders them
the same way as the datetimes they represent.
"""
from datetime import datetime, timezone

# strftime's %Y is not zero-padded below year 1000 on every platform, so
# the year is written by to_storage() itself
STORAGE_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"
_STORAGE_TAIL = "-%m-%dT%H:%M:%S.%fZ"

def utcnow() -> datetime:
    """Current time as an aware UTC datetime"""
    return datetime.now(timezone.utc)

def ensure_utc(value: datetime) -> datetime:
    """
    Convert to UTC, treating naive datetimes as already UTC.

    Raises:
        OverflowError: If the UTC value falls outside the datetime range
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)

def to_storage(value: datetime) -> str:
    """Format a datetime as fixed-width UTC text"""
    value = ensure_utc(value)
    return f"{value.year:04d}" + value.strftime(_STORAGE_TAIL)

def from_storage(value: str) -> datetime:
    """Parse text written by to_storage()"""
    return datetime.strptime(value, STORAGE_FORMAT).replace(tzinfo=timezone.utc)
