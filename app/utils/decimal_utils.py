# app/utils/decimal_utils.py
from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(value) -> Decimal:
    """
    Convert a numeric value to Decimal without passing through float.
    None becomes 0. Raises ValueError for anything that is not a finite number.
    """
    if value is None:
        return ZERO
    if isinstance(value, bool):
        raise ValueError(f"Not a numeric amount: {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except InvalidOperation:
            raise ValueError(f"Not a numeric amount: {value!r}")
    if not result.is_finite():
        raise ValueError(f"Not a numeric amount: {value!r}")
    return result


def quantize_money(value) -> Decimal:
    """Round to the cent, half-to-even."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_EVEN)
