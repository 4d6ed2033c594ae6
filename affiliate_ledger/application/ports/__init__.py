"""Application ports package."""

from .database import DatabaseEnginePort
from .ledger_repository import LedgerRepositoryPort, LedgerWriterPort
from .period_repository import PeriodRepositoryPort
from .tax_settings_repository import TaxSettingsRepositoryPort

__all__ = [
    "DatabaseEnginePort",
    "LedgerRepositoryPort",
    "LedgerWriterPort",
    "PeriodRepositoryPort",
    "TaxSettingsRepositoryPort",
]
