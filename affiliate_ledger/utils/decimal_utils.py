"""Helpers for Decimal normalization."""

from decimal import Decimal


def coerce_decimal(value) -> Decimal:
    """Normalize numeric values to Decimal.

    Args:
        value: Raw numeric value from SQL, JSON, or adapters.

    Returns:
        Decimal: Normalized numeric value.
    """
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def coerce_optional_decimal(value) -> Decimal | None:
    """Normalize numeric values to Decimal, keeping missing values as None."""
    if value is None or value == "":
        return None
    return coerce_decimal(value)


__all__ = ["coerce_decimal", "coerce_optional_decimal"]
