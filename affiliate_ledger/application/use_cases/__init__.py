"""Application use cases package."""

from .close_period import ClosePeriodUseCase
from .get_debt_positions import GetDebtPositionsUseCase
from .get_partner_ledgers import GetPartnerLedgersUseCase
from .get_period_asset_details import GetPeriodAssetDetailsUseCase
from .get_period_financials import (
    GetPeriodFinancialsUseCase,
    PeriodFinancials,
    compute_period_financials,
)
from .open_period import OpenPeriodUseCase
from .record_ledger_entries import RecordLedgerEntriesUseCase
from .view_period import ViewPeriodUseCase

__all__ = [
    "ClosePeriodUseCase",
    "GetDebtPositionsUseCase",
    "GetPartnerLedgersUseCase",
    "GetPeriodAssetDetailsUseCase",
    "GetPeriodFinancialsUseCase",
    "PeriodFinancials",
    "compute_period_financials",
    "OpenPeriodUseCase",
    "RecordLedgerEntriesUseCase",
    "ViewPeriodUseCase",
]
