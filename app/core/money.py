"""
Money helpers - lenient amount parsing shared by schemas and services
"""
from decimal import Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")
CENTS = Decimal("0.01")


def to_amount(value: Any) -> Decimal:
    """
    Coerce anything to a 2-place Decimal.
    None, blanks, booleans, garbage strings, NaN and infinities become 0; never raises.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, str):
        value = value.strip().replace(",", "")
        if not value:
            return ZERO
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
        if not amount.is_finite():
            return ZERO
        return amount.quantize(CENTS)
    except (InvalidOperation, ValueError, TypeError):
        return ZERO
