"""
Presentation helpers for currency amounts.

The core only ever handles integer subunits; conversion to and from
human-readable units happens here, at the edge.
"""
from decimal import Decimal, InvalidOperation

def _places(subunits_per_unit: int) -> int:
    places = 0
    while 10 ** places < subunits_per_unit:
        places += 1
    return places

def format_amount(amount: int, symbol: str = "", subunits_per_unit: int = 100) -> str:
    """
    Render subunits as currency, e.g. 123456 -> '฿1,234.56'.

    Negative amounts get a leading minus before the symbol.
    """
    value = Decimal(abs(amount)) / Decimal(subunits_per_unit)
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{value:,.{_places(subunits_per_unit)}f}"

def to_subunits(text: str, subunits_per_unit: int = 100) -> int:
    """
    Convert a human-entered amount such as '12.34' into subunits (1234).

    Raises:
        ValueError: If text is not a number or has more precision than a subunit
    """
    try:
        value = Decimal(text.strip().replace(",", "")) * subunits_per_unit
    except InvalidOperation:
        raise ValueError(f"Not a valid amount: '{text}'")

    if not value.is_finite() or value != value.to_integral_value():
        raise ValueError(f"Amount '{text}' is more precise than the smallest currency unit")
    return int(value)
