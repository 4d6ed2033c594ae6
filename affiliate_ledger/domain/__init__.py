"""Domain package for bookkeeping rules and core models."""

from .exceptions import (
    ClosedPeriodError,
    CurrencyConversionError,
    InvalidPartnerSharesError,
    InvalidPeriodError,
    LedgerError,
    PartnerDeletionError,
    PeriodStateError,
    TaxConfigurationError,
)
from .models import (
    LedgerSnapshot,
    LedgerWarning,
    PeriodFinancials,
    PeriodState,
    PnlSummary,
    TaxSettings,
)

__all__ = [
    "ClosedPeriodError",
    "CurrencyConversionError",
    "InvalidPartnerSharesError",
    "InvalidPeriodError",
    "LedgerError",
    "PartnerDeletionError",
    "PeriodStateError",
    "TaxConfigurationError",
    "LedgerSnapshot",
    "LedgerWarning",
    "PeriodFinancials",
    "PeriodState",
    "PnlSummary",
    "TaxSettings",
]
