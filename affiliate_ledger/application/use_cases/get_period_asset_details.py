"""Use case to compute per-asset opening and closing balances."""

from decimal import Decimal

from affiliate_ledger.application.ports.ledger_repository import (
    LedgerRepositoryPort,
)
from affiliate_ledger.application.ports.period_repository import (
    PeriodRepositoryPort,
)
from affiliate_ledger.domain.constants import DEFAULT_FALLBACK_USD_RATE
from affiliate_ledger.domain.exceptions import PeriodStateError
from affiliate_ledger.domain.models import PeriodAssetDetail
from affiliate_ledger.domain.services.cash_flow import (
    build_period_asset_details,
)
from affiliate_ledger.infrastructure.logging.logger import get_app_logger


class GetPeriodAssetDetailsUseCase:
    """Return opening balance, change and closing balance per asset."""

    def __init__(
        self,
        ledger_repository: LedgerRepositoryPort,
        period_repository: PeriodRepositoryPort,
        logger=None,
        fallback_rate: Decimal = DEFAULT_FALLBACK_USD_RATE,
    ) -> None:
        self._ledger_repository = ledger_repository
        self._period_repository = period_repository
        self._logger = logger or get_app_logger()
        self._fallback_rate = fallback_rate

    def execute(
        self,
        period: str | None = None,
    ) -> tuple[PeriodAssetDetail, ...]:
        """Return asset details for ``period`` or the current period."""
        resolved = period or self._period_repository.load_state().current_period
        if resolved is None:
            raise PeriodStateError("No period is open or being viewed")
        snapshot = self._ledger_repository.fetch_snapshot()
        details = build_period_asset_details(
            snapshot,
            resolved,
            fallback_rate=self._fallback_rate,
            logger=self._logger,
        )
        self._logger.info(
            f"Computed balances of {len(details)} assets for {resolved}"
        )
        return details


__all__ = ["GetPeriodAssetDetailsUseCase"]
