"""Domain state machine for opening, closing and viewing periods.

Every transition returns a new ``PeriodState``; a failed transition raises
``PeriodStateError`` and leaves the given state untouched.
"""

from dataclasses import replace
from datetime import date, datetime

from affiliate_ledger.domain.exceptions import PeriodStateError
from affiliate_ledger.domain.models import (
    ClosedPeriod,
    PeriodFinancials,
    PeriodState,
)
from affiliate_ledger.domain.services.periods import (
    next_period,
    period_end,
    period_of,
    period_start,
    validate_period,
)


def open_period(state: PeriodState, period: str) -> PeriodState:
    """Open ``period`` when no other period is open.

    Args:
        state: Current lifecycle state.
        period: Period to open (YYYY-MM).

    Returns:
        PeriodState: State with ``period`` active and no viewing period.

    Raises:
        PeriodStateError: If a period is already open or ``period`` was
            closed before.
    """
    validate_period(period)
    if state.active_period is not None:
        raise PeriodStateError(
            f"Period {state.active_period} is already open; close it first"
        )
    if period in state.closed_period_names():
        raise PeriodStateError(f"Period {period} is closed and cannot reopen")
    return replace(state, active_period=period, viewing_period=None)


def earliest_closing_date(period: str, closing_day: int) -> date:
    """Return the first day on which ``period`` may be closed.

    Days past the end of the following month clamp to its last day.
    """
    following = next_period(period)
    day = min(max(1, closing_day), period_end(following).day)
    return period_start(following).replace(day=day)


def close_period(
    state: PeriodState,
    period: str,
    financials: PeriodFinancials | None,
    closed_at: datetime,
    closing_day: int | None = None,
) -> PeriodState:
    """Close the open period and keep a snapshot of its financials.

    Args:
        state: Current lifecycle state.
        period: Period to close; must be the open one.
        financials: Financials computed for the period at close time.
        closed_at: Timestamp of the close.
        closing_day: When given, closing before this day of the following
            month is refused.

    Returns:
        PeriodState: State with no active period and the new closed period.

    Raises:
        PeriodStateError: If ``period`` is not the open period or the
            closing day has not been reached.
    """
    validate_period(period)
    if state.active_period is None:
        raise PeriodStateError("No period is open")
    if state.active_period != period:
        raise PeriodStateError(
            f"Period {period} is not the open period ({state.active_period})"
        )
    if closing_day is not None:
        earliest = earliest_closing_date(period, closing_day)
        if closed_at.date() < earliest:
            raise PeriodStateError(
                f"Period {period} can be closed from {earliest.isoformat()}"
            )
    closed = ClosedPeriod(period=period, closed_at=closed_at, financials=financials)
    return PeriodState(
        active_period=None,
        viewing_period=None,
        closed_periods=(*state.closed_periods, closed),
    )


def view_period(state: PeriodState, period: str) -> PeriodState:
    """Browse a closed period read-only."""
    validate_period(period)
    if period not in state.closed_period_names():
        raise PeriodStateError(f"Period {period} is not closed")
    return replace(state, viewing_period=period)


def clear_viewing_period(state: PeriodState) -> PeriodState:
    return replace(state, viewing_period=None)


def suggest_next_period(state: PeriodState, today: date) -> str:
    """Return the month after the latest closed period, else this month."""
    names = state.closed_period_names()
    if not names:
        return period_of(today)
    return next_period(max(names))


__all__ = [
    "open_period",
    "close_period",
    "view_period",
    "clear_viewing_period",
    "suggest_next_period",
    "earliest_closing_date",
]
