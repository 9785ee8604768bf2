"""Numeric coercion and rounding for monetary values."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

ZERO = Decimal("0")


def to_decimal(value: object) -> Decimal | None:
    """Convert a stored or user-supplied number to Decimal.

    Returns None for missing, non-numeric and non-finite values so callers can decide
    whether that means "fall through" or "treat as zero".
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return None
    if not result.is_finite():
        return None
    return result


def coerce_amount(value: object) -> Decimal:
    """Amount for summation: anything unusable counts as zero."""
    result = to_decimal(value)
    return ZERO if result is None else result


def round_half_up(value: Decimal) -> int:
    """Round to the nearest whole currency unit, halves away from zero."""
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


__all__ = ["ZERO", "to_decimal", "coerce_amount", "round_half_up"]
