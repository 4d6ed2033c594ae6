"""Domain exceptions raised at the boundary of ledger computations."""


class LedgerError(Exception):
    """Base class for ledger domain errors."""


class InvalidPeriodError(LedgerError, ValueError):
    """Raised when a period string is not in YYYY-MM form."""


class PeriodStateError(LedgerError):
    """Raised when a period lifecycle precondition does not hold."""


class ClosedPeriodError(PeriodStateError):
    """Raised when a write targets a date inside a closed period."""


class TaxConfigurationError(LedgerError):
    """Raised when tax settings lack fields required by the selected method."""


class CurrencyConversionError(LedgerError, ValueError):
    """Raised when an amount cannot be converted to VND."""


class InvalidPartnerSharesError(LedgerError, ValueError):
    """Raised when partner shares are duplicated, negative, or exceed 100."""


class PartnerDeletionError(LedgerError):
    """Raised when a partner cannot be deleted."""


__all__ = [
    "LedgerError",
    "InvalidPeriodError",
    "PeriodStateError",
    "ClosedPeriodError",
    "TaxConfigurationError",
    "CurrencyConversionError",
    "InvalidPartnerSharesError",
    "PartnerDeletionError",
]
