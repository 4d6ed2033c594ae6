"""Domain policies package."""

from .write_guards import (
    ensure_date_writable,
    ensure_partner_deletable,
    validate_partner_shares,
)

__all__ = [
    "ensure_date_writable",
    "ensure_partner_deletable",
    "validate_partner_shares",
]
