"""Use case to browse closed periods read-only."""

from affiliate_ledger.application.ports.period_repository import (
    PeriodRepositoryPort,
)
from affiliate_ledger.domain.models import PeriodState
from affiliate_ledger.domain.services.period_lifecycle import (
    clear_viewing_period,
    view_period,
)
from affiliate_ledger.infrastructure.logging.logger import get_usage_logger


class ViewPeriodUseCase:
    """Switch the viewing period on or off."""

    def __init__(self, period_repository: PeriodRepositoryPort, usage_logger=None):
        self._period_repository = period_repository
        self._usage_logger = usage_logger or get_usage_logger()

    def execute(self, period: str | None) -> PeriodState:
        """View ``period``, or return to the open period when None."""
        state = self._period_repository.load_state()
        if period is None:
            new_state = clear_viewing_period(state)
        else:
            new_state = view_period(state, period)
        self._period_repository.save_state(new_state)
        self._usage_logger.info(f"period_viewed period={period}")
        return new_state


__all__ = ["ViewPeriodUseCase"]
