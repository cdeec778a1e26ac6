"""
Money Utilities - Decimal handling for display prices.

Prices are copied from the catalog as-is; the cart never computes with them,
but keeps them as Decimal so a stored snapshot round-trips exactly.
"""
from decimal import Decimal, InvalidOperation
from typing import Union


def parse_price(value: Union[str, int, float, Decimal]) -> Decimal:
    """
    Convert a catalog price to Decimal.

    Args:
        value: Price as str, int, float or Decimal

    Returns:
        The same amount as a Decimal

    Raises:
        ValueError: If the value is not a finite, non-negative number
    """
    if isinstance(value, bool):
        raise ValueError("price must be a number")

    try:
        if isinstance(value, Decimal):
            price = value
        elif isinstance(value, float):
            # Go through str so 0.1 stays 0.1
            price = Decimal(str(value))
        else:
            price = Decimal(value)
    except (InvalidOperation, ValueError, TypeError) as e:
        raise ValueError(f"price is not a number: {value!r}") from e

    if not price.is_finite():
        raise ValueError(f"price must be finite: {value!r}")
    if price < 0:
        raise ValueError(f"price must not be negative: {value!r}")
    return price


def to_float(value: Decimal) -> float:
    """
    Convert Decimal to float for JSON responses.

    Use only at API boundaries.
    """
    return float(value)
