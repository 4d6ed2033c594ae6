"""Tests for liability and receivable positions."""

from decimal import Decimal

from affiliate_ledger.domain.models import (
    DebtPayment,
    LedgerSnapshot,
    Liability,
    Receivable,
    ReceivablePayment,
)
from affiliate_ledger.domain.services.debts import compute_debt_positions


def _snapshot() -> LedgerSnapshot:
    return LedgerSnapshot(
        liabilities=(
            Liability(
                id="l1",
                description="Bank loan",
                total_amount=Decimal("10000000"),
                currency="VND",
                creation_date="2024-03-01",
            ),
        ),
        debt_payments=(
            DebtPayment(
                id="dp1",
                liability_id="l1",
                date="2024-04-01",
                amount=Decimal("4000000"),
                asset_id="bank",
            ),
            DebtPayment(
                id="dp2",
                liability_id="l1",
                date="2024-05-01",
                amount=Decimal("7000000"),
                asset_id="bank",
            ),
        ),
        receivables=(
            Receivable(
                id="r1",
                description="Loan to Minh",
                total_amount=Decimal("500"),
                currency="USD",
                creation_date="2024-04-15",
            ),
        ),
        receivable_payments=(
            ReceivablePayment(
                id="rp1",
                receivable_id="r1",
                date="2024-04-20",
                amount=Decimal("200"),
                asset_id="wallet",
            ),
        ),
    )


def test_positions_track_paid_and_remaining_amounts():
    liability, receivable = compute_debt_positions(_snapshot())

    assert liability.kind == "liability"
    assert liability.paid_amount == Decimal("11000000")
    assert liability.remaining_amount == 0
    assert liability.is_settled
    assert receivable.kind == "receivable"
    assert receivable.remaining_amount == Decimal("300")
    assert not receivable.is_settled


def test_as_of_limits_payments_and_records():
    positions = compute_debt_positions(_snapshot(), as_of="2024-04-10")

    assert len(positions) == 1
    assert positions[0].paid_amount == Decimal("4000000")
    assert positions[0].remaining_amount == Decimal("6000000")
