"""Domain service summarising liability and receivable positions."""

from decimal import Decimal

from affiliate_ledger.domain.models import (
    LIABILITY,
    RECEIVABLE,
    DebtPosition,
    LedgerSnapshot,
)
from affiliate_ledger.utils.decimal_utils import coerce_decimal

_ZERO = Decimal("0")


def _paid(payments, key: str, record_id: str, as_of: str | None) -> Decimal:
    total = _ZERO
    for payment in payments:
        if getattr(payment, key) != record_id:
            continue
        if as_of is not None and payment.date > as_of:
            continue
        total += coerce_decimal(payment.amount)
    return total


def _position(record, kind: str, paid: Decimal) -> DebtPosition:
    total = coerce_decimal(record.total_amount)
    return DebtPosition(
        id=record.id,
        kind=kind,
        description=record.description,
        currency=record.currency,
        total_amount=total,
        paid_amount=paid,
        remaining_amount=max(_ZERO, total - paid),
        is_settled=paid >= total,
    )


def compute_debt_positions(
    snapshot: LedgerSnapshot,
    as_of: str | None = None,
) -> tuple[DebtPosition, ...]:
    """Return paid and remaining amounts per liability and receivable.

    Args:
        snapshot: Ledger snapshot.
        as_of: Inclusive ISO date bound; records created later are skipped.

    Returns:
        tuple[DebtPosition, ...]: Liabilities first, then receivables.
    """
    positions = []
    for liability in snapshot.liabilities:
        if as_of is not None and liability.creation_date > as_of:
            continue
        paid = _paid(snapshot.debt_payments, "liability_id", liability.id, as_of)
        positions.append(_position(liability, LIABILITY, paid))
    for receivable in snapshot.receivables:
        if as_of is not None and receivable.creation_date > as_of:
            continue
        paid = _paid(
            snapshot.receivable_payments, "receivable_id", receivable.id, as_of
        )
        positions.append(_position(receivable, RECEIVABLE, paid))
    return tuple(positions)


__all__ = ["compute_debt_positions"]
