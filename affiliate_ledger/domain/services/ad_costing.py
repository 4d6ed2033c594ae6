"""Domain service valuing USD ad spend against FIFO ad-account deposits."""

from dataclasses import dataclass
from decimal import Decimal
from logging import Logger

from affiliate_ledger.domain.models import (
    AdCostingResult,
    AdCostValuation,
    AdDeposit,
    AdFundTransfer,
    DailyAdCost,
    LedgerSnapshot,
)
from affiliate_ledger.domain.models.warnings import FALLBACK_RATE
from affiliate_ledger.domain.services.diagnostics import emit_warning
from affiliate_ledger.utils.decimal_utils import coerce_decimal

# Remaining USD below this is treated as fully consumed.
USD_EPSILON = Decimal("0.001")

_EVENT_DEPOSIT = 0
_EVENT_TRANSFER = 1
_EVENT_COST = 2


@dataclass
class _Chunk:
    amount: Decimal
    rate: Decimal


AccountKey = tuple[str, str]


def value_ad_costs(
    snapshot: LedgerSnapshot,
    fallback_rate: Decimal,
    *,
    logger: Logger | None = None,
) -> AdCostingResult:
    """Value every daily ad cost in VND using FIFO deposit chunks.

    Deposits, fund transfers and costs are replayed in date order (deposits
    first, then transfers, then costs on the same day). Each ad account,
    identified by platform and account number, holds a queue of USD chunks
    priced at their deposit rate. Transfers move chunks with their rates;
    costs consume them. Spend not covered by chunks is valued at the last
    deposit rate of the account known on the cost date, or at
    ``fallback_rate`` with a warning.

    Args:
        snapshot: Ledger snapshot holding deposits, transfers and costs.
        fallback_rate: VND per USD used when an account has no deposits.
        logger: Optional logger used for warnings.

    Returns:
        AdCostingResult: Valuation per cost id and VND moved per transfer.
    """
    fallback = coerce_decimal(fallback_rate)
    warnings = []
    ledgers: dict[AccountKey, list[_Chunk]] = {}
    last_rates: dict[str, Decimal] = {}
    platforms = _account_platforms(snapshot)

    costs: dict[str, AdCostValuation] = {}
    transfers: dict[str, Decimal] = {}

    for _, _, _, record in sorted(_events(snapshot), key=lambda item: item[:3]):
        if isinstance(record, AdDeposit):
            key = (record.ads_platform, record.ad_account_number)
            rate = coerce_decimal(record.rate)
            ledgers.setdefault(key, []).append(
                _Chunk(amount=coerce_decimal(record.usd_amount), rate=rate)
            )
            if rate > 0:
                last_rates[record.ad_account_number] = rate
        elif isinstance(record, AdFundTransfer):
            transfers[record.id] = _apply_transfer(
                record, ledgers, last_rates, fallback, warnings, logger
            )
        else:
            costs[record.id] = _value_cost(
                record, ledgers, platforms, last_rates, fallback, warnings, logger
            )

    return AdCostingResult(
        costs=costs,
        transfers=transfers,
        warnings=tuple(warnings),
    )


def _events(snapshot: LedgerSnapshot):
    for deposit in snapshot.ad_deposits:
        yield (deposit.date, _EVENT_DEPOSIT, deposit.id, deposit)
    for transfer in snapshot.ad_fund_transfers:
        yield (transfer.date, _EVENT_TRANSFER, transfer.id, transfer)
    for cost in snapshot.daily_ad_costs:
        yield (cost.date, _EVENT_COST, cost.id, cost)


def _account_platforms(snapshot: LedgerSnapshot) -> dict[str, str]:
    """Map ad account numbers to the platform that first funded them."""
    platforms: dict[str, str] = {}
    for deposit in sorted(
        snapshot.ad_deposits, key=lambda item: (item.date, item.id)
    ):
        platforms.setdefault(deposit.ad_account_number, deposit.ads_platform)
    for transfer in sorted(
        snapshot.ad_fund_transfers, key=lambda item: (item.date, item.id)
    ):
        platforms.setdefault(transfer.to_ad_account_number, transfer.ads_platform)
    return platforms


def _consume(chunks: list[_Chunk], amount: Decimal) -> tuple[list[_Chunk], Decimal]:
    """Take up to ``amount`` USD from the head of ``chunks``.

    Returns:
        tuple[list[_Chunk], Decimal]: Chunks taken and the uncovered remainder.
    """
    taken: list[_Chunk] = []
    remaining = amount
    while remaining > USD_EPSILON and chunks:
        head = chunks[0]
        portion = min(remaining, head.amount)
        taken.append(_Chunk(amount=portion, rate=head.rate))
        head.amount -= portion
        remaining -= portion
        if head.amount <= USD_EPSILON:
            chunks.pop(0)
    if remaining <= USD_EPSILON:
        remaining = Decimal("0")
    return taken, remaining


def _remainder_rate(
    account_number: str,
    record_id: str,
    last_rates: dict[str, Decimal],
    fallback: Decimal,
    warnings: list,
    logger: Logger | None,
) -> Decimal:
    rate = last_rates.get(account_number)
    if rate is not None and rate > 0:
        return rate
    emit_warning(
        warnings,
        FALLBACK_RATE,
        f"Ad account {account_number} has no deposits yet; "
        f"valuing {record_id} at fallback rate {fallback}",
        record_id=record_id,
        logger=logger,
    )
    return fallback


def _apply_transfer(
    transfer: AdFundTransfer,
    ledgers: dict[AccountKey, list[_Chunk]],
    last_rates: dict[str, Decimal],
    fallback: Decimal,
    warnings: list,
    logger: Logger | None,
) -> Decimal:
    """Move FIFO chunks between ad accounts and return the VND value moved."""
    amount = coerce_decimal(transfer.amount)
    source = ledgers.setdefault(
        (transfer.ads_platform, transfer.from_ad_account_number), []
    )
    target = ledgers.setdefault(
        (transfer.ads_platform, transfer.to_ad_account_number), []
    )
    moved, remaining = _consume(source, amount)
    if remaining > 0:
        rate = _remainder_rate(
            transfer.from_ad_account_number,
            transfer.id,
            last_rates,
            fallback,
            warnings,
            logger,
        )
        moved.append(_Chunk(amount=remaining, rate=rate))
    target.extend(moved)
    return sum((chunk.amount * chunk.rate for chunk in moved), Decimal("0"))


def _value_cost(
    cost: DailyAdCost,
    ledgers: dict[AccountKey, list[_Chunk]],
    platforms: dict[str, str],
    last_rates: dict[str, Decimal],
    fallback: Decimal,
    warnings: list,
    logger: Logger | None,
) -> AdCostValuation:
    amount = coerce_decimal(cost.amount)
    platform = platforms.get(cost.ad_account_number)
    chunks = ledgers.get((platform, cost.ad_account_number), []) if platform else []
    used, remaining = _consume(chunks, amount)
    vnd_cost = sum((chunk.amount * chunk.rate for chunk in used), Decimal("0"))
    if remaining > 0:
        rate = _remainder_rate(
            cost.ad_account_number,
            cost.id,
            last_rates,
            fallback,
            warnings,
            logger,
        )
        vnd_cost += remaining * rate
    effective_rate = vnd_cost / amount if amount > 0 else Decimal("0")
    return AdCostValuation(
        cost_id=cost.id,
        vnd_cost=vnd_cost,
        effective_rate=effective_rate,
    )


__all__ = ["value_ad_costs", "USD_EPSILON"]
