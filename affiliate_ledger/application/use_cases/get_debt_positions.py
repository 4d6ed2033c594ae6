"""Use case to summarise liabilities and receivables."""

from affiliate_ledger.application.ports.ledger_repository import (
    LedgerRepositoryPort,
)
from affiliate_ledger.domain.models import DebtPosition
from affiliate_ledger.domain.services.debts import compute_debt_positions
from affiliate_ledger.infrastructure.logging.logger import get_app_logger


class GetDebtPositionsUseCase:
    """Return paid and remaining amounts of debts and receivables."""

    def __init__(self, ledger_repository: LedgerRepositoryPort, logger=None):
        self._ledger_repository = ledger_repository
        self._logger = logger or get_app_logger()

    def execute(self, as_of: str | None = None) -> tuple[DebtPosition, ...]:
        snapshot = self._ledger_repository.fetch_snapshot()
        positions = compute_debt_positions(snapshot, as_of)
        open_count = sum(1 for position in positions if not position.is_settled)
        self._logger.info(
            f"Computed {len(positions)} debt positions ({open_count} open)"
        )
        return positions


__all__ = ["GetDebtPositionsUseCase"]
