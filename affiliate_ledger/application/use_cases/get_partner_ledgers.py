"""Use case to build partner running balances."""

from decimal import Decimal

from affiliate_ledger.application.ports.ledger_repository import (
    LedgerRepositoryPort,
)
from affiliate_ledger.application.ports.period_repository import (
    PeriodRepositoryPort,
)
from affiliate_ledger.domain.constants import DEFAULT_FALLBACK_USD_RATE
from affiliate_ledger.domain.models import PartnerLedgerReport
from affiliate_ledger.domain.services.partner_ledger import (
    build_partner_ledgers,
)
from affiliate_ledger.infrastructure.logging.logger import get_app_logger


class GetPartnerLedgersUseCase:
    """Build partner ledgers from records and closed period snapshots."""

    def __init__(
        self,
        ledger_repository: LedgerRepositoryPort,
        period_repository: PeriodRepositoryPort,
        logger=None,
        fallback_rate: Decimal = DEFAULT_FALLBACK_USD_RATE,
    ) -> None:
        """Initialize the use case.

        Args:
            ledger_repository: Port providing the ledger snapshot.
            period_repository: Port providing closed period snapshots.
            logger: Optional logger compatible with logging.Logger-like API.
            fallback_rate: VND per USD for capital paid into USD assets.
        """
        self._ledger_repository = ledger_repository
        self._period_repository = period_repository
        self._logger = logger or get_app_logger()
        self._fallback_rate = fallback_rate

    def execute(self) -> PartnerLedgerReport:
        state = self._period_repository.load_state()
        snapshot = self._ledger_repository.fetch_snapshot()
        report = build_partner_ledgers(
            snapshot,
            state.closed_periods,
            fallback_rate=self._fallback_rate,
            logger=self._logger,
        )
        self._logger.info(
            f"Built ledgers for {len(report.ledgers)} partners from "
            f"{len(state.closed_periods)} closed periods"
        )
        return report


__all__ = ["GetPartnerLedgersUseCase"]
