"""Domain service deriving partner running balances."""

from decimal import Decimal
from logging import Logger

from affiliate_ledger.domain.constants import (
    AUTO_ENTRY_PREFIX,
    CURRENCY_USD,
    DEFAULT_FALLBACK_USD_RATE,
    ENTRY_INFLOW,
    ENTRY_OUTFLOW,
)
from affiliate_ledger.domain.models import (
    ClosedPeriod,
    LedgerSnapshot,
    PartnerLedger,
    PartnerLedgerEntry,
    PartnerLedgerLine,
    PartnerLedgerReport,
)
from affiliate_ledger.domain.models.warnings import (
    INVALID_ENTRY_TYPE,
    UNKNOWN_PARTNER,
)
from affiliate_ledger.domain.services.apportionment import resolve_owner
from affiliate_ledger.domain.services.diagnostics import emit_warning
from affiliate_ledger.domain.services.fx import to_vnd
from affiliate_ledger.domain.services.periods import period_end
from affiliate_ledger.utils.decimal_utils import coerce_decimal

_ZERO = Decimal("0")


def is_automatic_entry(entry: PartnerLedgerEntry) -> bool:
    """Return True for entries synthesised from other records."""
    return entry.id.startswith(AUTO_ENTRY_PREFIX)


def _profit_entries(closed_periods) -> list[PartnerLedgerEntry]:
    entries = []
    for closed in closed_periods:
        if closed.financials is None:
            continue
        closing_date = period_end(closed.period).isoformat()
        for share in closed.financials.partner_pnl_details:
            if share.profit == 0:
                continue
            entries.append(
                PartnerLedgerEntry(
                    id=f"{AUTO_ENTRY_PREFIX}profit-{closed.period}-{share.partner_id}",
                    date=closing_date,
                    partner_id=share.partner_id,
                    amount=abs(share.profit),
                    type=ENTRY_INFLOW if share.profit > 0 else ENTRY_OUTFLOW,
                    description=f"Profit share {closed.period}",
                )
            )
    return entries


def synthesise_entries(
    snapshot: LedgerSnapshot,
    closed_periods: tuple[ClosedPeriod, ...] | list[ClosedPeriod],
    fallback_rate: Decimal = DEFAULT_FALLBACK_USD_RATE,
) -> list[PartnerLedgerEntry]:
    """Return automatic entries plus the manual entries of the snapshot.

    Args:
        snapshot: Ledger snapshot.
        closed_periods: Closed periods whose snapshots carry partner P&L.
        fallback_rate: VND per USD for capital paid into USD assets.

    Returns:
        list[PartnerLedgerEntry]: Automatic and manual entries, unsorted.
    """
    assets = snapshot.asset_by_id()
    entries = _profit_entries(closed_periods)
    for inflow in snapshot.capital_inflows:
        if not inflow.contributed_by_partner_id:
            continue
        amount = coerce_decimal(inflow.amount)
        asset = assets.get(inflow.asset_id)
        if asset is not None and asset.currency == CURRENCY_USD:
            amount = to_vnd(amount, CURRENCY_USD, fallback_rate)
        entries.append(
            PartnerLedgerEntry(
                id=f"{AUTO_ENTRY_PREFIX}capital-{inflow.id}",
                date=inflow.date,
                partner_id=inflow.contributed_by_partner_id,
                amount=amount,
                type=ENTRY_INFLOW,
                description=inflow.description or "Capital contribution",
            )
        )
    for withdrawal in snapshot.withdrawals:
        amount = coerce_decimal(withdrawal.vnd_amount)
        if amount <= 0:
            amount = coerce_decimal(withdrawal.amount)
        entries.append(
            PartnerLedgerEntry(
                id=f"{AUTO_ENTRY_PREFIX}withdrawal-{withdrawal.id}",
                date=withdrawal.date,
                partner_id=withdrawal.withdrawn_by,
                amount=amount,
                type=ENTRY_OUTFLOW,
                description=withdrawal.description or "Withdrawal",
            )
        )
    entries.extend(snapshot.partner_ledger_entries)
    return entries


def build_partner_ledgers(
    snapshot: LedgerSnapshot,
    closed_periods: tuple[ClosedPeriod, ...] | list[ClosedPeriod] = (),
    *,
    fallback_rate: Decimal = DEFAULT_FALLBACK_USD_RATE,
    logger: Logger | None = None,
) -> PartnerLedgerReport:
    """Build each partner's ledger with running balances.

    Balances accumulate in ascending (date, id) order. Each ledger lists
    its entries newest first, ties broken by id descending. Entries for
    partners missing from the snapshot, or whose type is neither inflow
    nor outflow, are dropped with a warning.

    Args:
        snapshot: Ledger snapshot.
        closed_periods: Closed periods providing profit-share entries.
        fallback_rate: VND per USD for capital paid into USD assets.
        logger: Optional logger used for warnings.

    Returns:
        PartnerLedgerReport: Ledgers in partner order, owner first.
    """
    warnings = []
    owner = resolve_owner(snapshot.partners, warnings, logger)
    partners = [owner] + [p for p in snapshot.partners if p.id != owner.id]
    by_partner: dict[str, list[PartnerLedgerEntry]] = {p.id: [] for p in partners}

    for entry in synthesise_entries(snapshot, closed_periods, fallback_rate):
        if entry.type not in (ENTRY_INFLOW, ENTRY_OUTFLOW):
            emit_warning(
                warnings,
                INVALID_ENTRY_TYPE,
                f"Ledger entry {entry.id} has unknown type {entry.type!r}; "
                "dropped",
                record_id=entry.id,
                logger=logger,
            )
            continue
        if entry.partner_id not in by_partner:
            emit_warning(
                warnings,
                UNKNOWN_PARTNER,
                f"Ledger entry {entry.id} references unknown partner "
                f"{entry.partner_id}; dropped",
                record_id=entry.id,
                logger=logger,
            )
            continue
        by_partner[entry.partner_id].append(entry)

    ledgers = []
    for partner in partners:
        balance = _ZERO
        total_inflow = _ZERO
        total_outflow = _ZERO
        lines = []
        for entry in sorted(
            by_partner[partner.id], key=lambda item: (item.date, item.id)
        ):
            amount = coerce_decimal(entry.amount)
            if entry.type == ENTRY_OUTFLOW:
                total_outflow += amount
                balance -= amount
            else:
                total_inflow += amount
                balance += amount
            lines.append(
                PartnerLedgerLine(
                    entry=entry,
                    is_automatic=is_automatic_entry(entry),
                    running_balance=balance,
                )
            )
        lines.reverse()
        ledgers.append(
            PartnerLedger(
                partner_id=partner.id,
                name=partner.name,
                total_inflow=total_inflow,
                total_outflow=total_outflow,
                balance=balance,
                entries=tuple(lines),
            )
        )
    return PartnerLedgerReport(ledgers=tuple(ledgers), warnings=tuple(warnings))


__all__ = ["build_partner_ledgers", "synthesise_entries", "is_automatic_entry"]
