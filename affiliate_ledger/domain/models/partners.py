"""Domain models for partner running balances."""

from dataclasses import dataclass
from decimal import Decimal

from affiliate_ledger.domain.models.records import PartnerLedgerEntry
from affiliate_ledger.domain.models.warnings import LedgerWarning


@dataclass(frozen=True)
class PartnerLedgerLine:
    """Ledger entry with the partner balance after it was applied."""

    entry: PartnerLedgerEntry
    is_automatic: bool
    running_balance: Decimal


@dataclass(frozen=True)
class PartnerLedger:
    """Running balance and entries of one partner.

    ``entries`` are in display order: newest date first, then id
    descending.
    """

    partner_id: str
    name: str
    total_inflow: Decimal
    total_outflow: Decimal
    balance: Decimal
    entries: tuple[PartnerLedgerLine, ...]


@dataclass(frozen=True)
class PartnerLedgerReport:
    """Ledgers of all partners plus warnings raised while building them."""

    ledgers: tuple[PartnerLedger, ...]
    warnings: tuple[LedgerWarning, ...] = ()

    def for_partner(self, partner_id: str) -> PartnerLedger | None:
        for ledger in self.ledgers:
            if ledger.partner_id == partner_id:
                return ledger
        return None


__all__ = ["PartnerLedgerLine", "PartnerLedger", "PartnerLedgerReport"]
