"""Domain helpers for YYYY-MM reporting periods."""

import calendar
from collections.abc import Iterable
from datetime import date
import re

from affiliate_ledger.domain.exceptions import InvalidPeriodError

_PERIOD_PATTERN = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")


def validate_period(period: str) -> str:
    """Return the period unchanged, or raise when it is not YYYY-MM.

    Args:
        period: Period string to check.

    Returns:
        str: The validated period.

    Raises:
        InvalidPeriodError: If the string is not a valid YYYY-MM period.
    """
    if not isinstance(period, str) or not _PERIOD_PATTERN.match(period):
        raise InvalidPeriodError(f"Invalid period: {period!r}")
    return period


def is_date_in_period(value: str | None, period: str | None) -> bool:
    """Return True when an ISO date string falls inside the period."""
    if not value or not period:
        return False
    return value.startswith(period)


def select_in_period(
    records: Iterable,
    period: str | None,
    date_field: str = "date",
) -> list:
    """Keep records whose date field falls inside the period.

    Records missing the date field, and every record when no period is
    given, are left out.

    Args:
        records: Records carrying an ISO date attribute.
        period: Reporting period (YYYY-MM).
        date_field: Name of the attribute holding the date.

    Returns:
        list: Matching records in their original order.
    """
    if not period:
        return []
    return [
        record
        for record in records
        if is_date_in_period(getattr(record, date_field, None), period)
    ]


def period_of(value: str | date) -> str:
    """Return the YYYY-MM period containing a date."""
    if isinstance(value, date):
        return f"{value.year:04d}-{value.month:02d}"
    return validate_period(value[:7])


def _split(period: str) -> tuple[int, int]:
    validate_period(period)
    year, month = period.split("-")
    return int(year), int(month)


def next_period(period: str) -> str:
    year, month = _split(period)
    if month == 12:
        return f"{year + 1:04d}-01"
    return f"{year:04d}-{month + 1:02d}"


def previous_period(period: str) -> str:
    year, month = _split(period)
    if month == 1:
        return f"{year - 1:04d}-12"
    return f"{year:04d}-{month - 1:02d}"


def period_start(period: str) -> date:
    year, month = _split(period)
    return date(year, month, 1)


def period_end(period: str) -> date:
    """Return the last calendar day of the period."""
    year, month = _split(period)
    return date(year, month, calendar.monthrange(year, month)[1])


__all__ = [
    "validate_period",
    "is_date_in_period",
    "select_in_period",
    "period_of",
    "next_period",
    "previous_period",
    "period_start",
    "period_end",
]
