"""Domain models for liability and receivable positions."""

from dataclasses import dataclass
from decimal import Decimal

LIABILITY = "liability"
RECEIVABLE = "receivable"


@dataclass(frozen=True)
class DebtPosition:
    """Outstanding position of a liability or receivable."""

    id: str
    kind: str
    description: str
    currency: str
    total_amount: Decimal
    paid_amount: Decimal
    remaining_amount: Decimal
    is_settled: bool


__all__ = ["DebtPosition", "LIABILITY", "RECEIVABLE"]
