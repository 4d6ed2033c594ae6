"""Use case to close the open reporting period."""

from datetime import datetime
from decimal import Decimal

from affiliate_ledger.application.ports.ledger_repository import (
    LedgerRepositoryPort,
)
from affiliate_ledger.application.ports.period_repository import (
    PeriodRepositoryPort,
)
from affiliate_ledger.application.ports.tax_settings_repository import (
    TaxSettingsRepositoryPort,
)
from affiliate_ledger.application.use_cases.get_period_financials import (
    compute_period_financials,
)
from affiliate_ledger.domain.constants import DEFAULT_FALLBACK_USD_RATE
from affiliate_ledger.domain.exceptions import PeriodStateError
from affiliate_ledger.domain.models import ClosedPeriod
from affiliate_ledger.domain.services.period_lifecycle import close_period
from affiliate_ledger.infrastructure.logging.logger import (
    get_app_logger,
    get_usage_logger,
)


class ClosePeriodUseCase:
    """Compute the open period's financials, then close it."""

    def __init__(
        self,
        ledger_repository: LedgerRepositoryPort,
        period_repository: PeriodRepositoryPort,
        tax_settings_repository: TaxSettingsRepositoryPort,
        logger=None,
        usage_logger=None,
        fallback_rate: Decimal = DEFAULT_FALLBACK_USD_RATE,
        enforce_closing_day: bool = True,
    ) -> None:
        """Initialize the use case.

        Args:
            ledger_repository: Port providing the ledger snapshot.
            period_repository: Port loading and saving period state.
            tax_settings_repository: Port providing tax settings.
            logger: Optional logger compatible with logging.Logger-like API.
            usage_logger: Optional logger recording user actions.
            fallback_rate: VND per USD when a record carries no rate.
            enforce_closing_day: Refuse closing before the configured day
                of the following month.
        """
        self._ledger_repository = ledger_repository
        self._period_repository = period_repository
        self._tax_settings_repository = tax_settings_repository
        self._logger = logger or get_app_logger()
        self._usage_logger = usage_logger or get_usage_logger()
        self._fallback_rate = fallback_rate
        self._enforce_closing_day = enforce_closing_day

    def execute(
        self,
        period: str | None = None,
        closed_at: datetime | None = None,
    ) -> ClosedPeriod:
        """Close ``period`` (default: the open period).

        Args:
            period: Period to close; must be the open one.
            closed_at: Close timestamp; defaults to now.

        Returns:
            ClosedPeriod: The closed period with its financials snapshot.

        Raises:
            PeriodStateError: If the period cannot be closed. Nothing is
                saved in that case.
        """
        state = self._period_repository.load_state()
        resolved = period or state.active_period
        if resolved is None:
            raise PeriodStateError("No period is open")
        timestamp = closed_at or datetime.now()
        settings = self._tax_settings_repository.load_settings()
        closing_day = (
            settings.period_closing_day if self._enforce_closing_day else None
        )
        # Check the transition before computing anything.
        close_period(state, resolved, None, timestamp, closing_day)

        snapshot = self._ledger_repository.fetch_snapshot()
        financials = compute_period_financials(
            snapshot,
            resolved,
            settings,
            state=state,
            fallback_rate=self._fallback_rate,
            logger=self._logger,
        )
        new_state = close_period(
            state, resolved, financials, timestamp, closing_day
        )
        self._period_repository.save_state(new_state)
        self._logger.info(
            f"Closed period {resolved}: net_profit={financials.net_profit}, "
            f"end_balance={financials.cash_flow.end_balance}"
        )
        self._usage_logger.info(f"period_closed period={resolved}")
        return new_state.closed_periods[-1]


__all__ = ["ClosePeriodUseCase"]
