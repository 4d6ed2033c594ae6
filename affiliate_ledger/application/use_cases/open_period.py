"""Use case to open a reporting period."""

from datetime import date

from affiliate_ledger.application.ports.period_repository import (
    PeriodRepositoryPort,
)
from affiliate_ledger.domain.models import PeriodState
from affiliate_ledger.domain.services.period_lifecycle import (
    open_period,
    suggest_next_period,
)
from affiliate_ledger.infrastructure.logging.logger import (
    get_app_logger,
    get_usage_logger,
)


class OpenPeriodUseCase:
    """Open a period and persist the new state."""

    def __init__(
        self,
        period_repository: PeriodRepositoryPort,
        logger=None,
        usage_logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            period_repository: Port loading and saving period state.
            logger: Optional logger compatible with logging.Logger-like API.
            usage_logger: Optional logger recording user actions.
        """
        self._period_repository = period_repository
        self._logger = logger or get_app_logger()
        self._usage_logger = usage_logger or get_usage_logger()

    def execute(
        self,
        period: str | None = None,
        today: date | None = None,
    ) -> PeriodState:
        """Open ``period``, or the suggested next period when omitted.

        Args:
            period: Period to open (YYYY-MM).
            today: Date used to suggest a period; defaults to today.

        Returns:
            PeriodState: The saved state.

        Raises:
            PeriodStateError: If a period is open or ``period`` is closed.
        """
        state = self._period_repository.load_state()
        resolved = period or suggest_next_period(state, today or date.today())
        new_state = open_period(state, resolved)
        self._period_repository.save_state(new_state)
        self._logger.info(f"Opened period {resolved}")
        self._usage_logger.info(f"period_opened period={resolved}")
        return new_state


__all__ = ["OpenPeriodUseCase"]
