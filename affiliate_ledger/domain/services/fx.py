"""Domain helpers for USD to VND conversion."""

from decimal import Decimal

from affiliate_ledger.domain.constants import CURRENCY_USD, CURRENCY_VND
from affiliate_ledger.domain.exceptions import CurrencyConversionError
from affiliate_ledger.utils.decimal_utils import coerce_decimal, coerce_optional_decimal


def resolve_rate(rate, fallback) -> Decimal:
    """Return a record's own rate when positive, else the fallback rate.

    Args:
        rate: Rate carried by the record, possibly missing.
        fallback: Configured fallback USD rate.

    Returns:
        Decimal: Rate to use for conversion.
    """
    own = coerce_optional_decimal(rate)
    if own is not None and own > 0:
        return own
    return coerce_decimal(fallback)


def to_vnd(amount, currency: str, rate=None) -> Decimal:
    """Convert an amount in ``currency`` to VND.

    Args:
        amount: Amount in the source currency.
        currency: ``USD`` or ``VND``.
        rate: VND per USD; required for USD amounts.

    Returns:
        Decimal: Amount in VND.

    Raises:
        CurrencyConversionError: If the currency is unknown or a USD amount
            has no positive rate.
    """
    value = coerce_decimal(amount)
    if currency == CURRENCY_VND:
        return value
    if currency != CURRENCY_USD:
        raise CurrencyConversionError(f"Unsupported currency: {currency!r}")
    resolved = coerce_optional_decimal(rate)
    if resolved is None or resolved <= 0:
        raise CurrencyConversionError(
            f"USD amount {value} has no positive rate (rate={rate!r})"
        )
    return value * resolved


__all__ = ["resolve_rate", "to_vnd"]
