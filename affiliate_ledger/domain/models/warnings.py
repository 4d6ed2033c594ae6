"""Recoverable data-quality warnings returned alongside computations."""

from dataclasses import dataclass


@dataclass(frozen=True)
class LedgerWarning:
    """A condition that was worked around rather than failing the result.

    Attributes:
        code: Stable machine-readable code (e.g. ``unknown_project``).
        message: Human-readable description.
        record_id: Identifier of the offending record, when there is one.
    """

    code: str
    message: str
    record_id: str | None = None


UNKNOWN_PROJECT = "unknown_project"
UNKNOWN_PARTNER = "unknown_partner"
UNKNOWN_ASSET = "unknown_asset"
INVALID_SHARES = "invalid_shares"
MISSING_OWNER = "missing_owner"
DUPLICATE_OWNER = "duplicate_owner"
FALLBACK_RATE = "fallback_rate"
CURRENCY_MISMATCH = "currency_mismatch"
INVALID_ENTRY_TYPE = "invalid_entry_type"


__all__ = [
    "LedgerWarning",
    "UNKNOWN_PROJECT",
    "UNKNOWN_PARTNER",
    "UNKNOWN_ASSET",
    "INVALID_SHARES",
    "MISSING_OWNER",
    "DUPLICATE_OWNER",
    "FALLBACK_RATE",
    "CURRENCY_MISMATCH",
    "INVALID_ENTRY_TYPE",
]
