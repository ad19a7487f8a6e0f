"""Decimal helpers for money arithmetic."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

HUNDRED = Decimal("100")


def D(x) -> Decimal:
    """Coerce a number (or None) to Decimal via its string form."""
    if isinstance(x, Decimal):
        return x
    try:
        return Decimal(str(x or 0))
    except InvalidOperation:
        return Decimal("0")


def money2(x) -> Decimal:
    """Quantize to two decimal places, rounding half up."""
    return D(x).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
