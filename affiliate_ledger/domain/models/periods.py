"""Domain models for the reporting period lifecycle."""

from dataclasses import dataclass
from datetime import datetime

from affiliate_ledger.domain.models.financials import PeriodFinancials


@dataclass(frozen=True)
class ClosedPeriod:
    """A period that has been closed, with its financials at close time."""

    period: str
    closed_at: datetime
    financials: PeriodFinancials | None = None


@dataclass(frozen=True)
class PeriodState:
    """Lifecycle state of a workspace's reporting periods.

    Attributes:
        active_period: The single open period, if any.
        viewing_period: A closed period being browsed read-only.
        closed_periods: Closed periods in closing order.
    """

    active_period: str | None = None
    viewing_period: str | None = None
    closed_periods: tuple[ClosedPeriod, ...] = ()

    @property
    def current_period(self) -> str | None:
        """Return the viewed period, else the open one."""
        return self.viewing_period or self.active_period

    @property
    def is_read_only(self) -> bool:
        return self.viewing_period is not None

    def closed_period_names(self) -> set[str]:
        return {closed.period for closed in self.closed_periods}

    def find_closed(self, period: str) -> ClosedPeriod | None:
        for closed in self.closed_periods:
            if closed.period == period:
                return closed
        return None


__all__ = ["ClosedPeriod", "PeriodState"]
