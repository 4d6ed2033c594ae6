"""Domain models package."""

from .debts import LIABILITY, RECEIVABLE, DebtPosition
from .financials import (
    AdCostingResult,
    AdCostValuation,
    AmountLine,
    AssetBalance,
    CashFlowLine,
    CashFlowSection,
    CashFlowStatement,
    PartnerPnl,
    PeriodAssetDetail,
    PeriodFinancials,
    PnlSummary,
    TaxBases,
    TaxCalculationResult,
    TaxComputation,
)
from .partners import PartnerLedger, PartnerLedgerLine, PartnerLedgerReport
from .periods import ClosedPeriod, PeriodState
from .records import (
    LEDGER_COLLECTIONS,
    AdDeposit,
    AdFundTransfer,
    Asset,
    CapitalInflow,
    Commission,
    DailyAdCost,
    DebtPayment,
    ExchangeLog,
    LedgerSnapshot,
    Liability,
    MiscellaneousExpense,
    Partner,
    PartnerLedgerEntry,
    PartnerShare,
    Project,
    Receivable,
    ReceivablePayment,
    TaxPayment,
    Withdrawal,
    record_date,
)
from .tax_settings import TaxSettings, default_tax_settings
from .warnings import LedgerWarning

__all__ = [
    "AdCostingResult",
    "AdCostValuation",
    "AmountLine",
    "AssetBalance",
    "CashFlowLine",
    "CashFlowSection",
    "CashFlowStatement",
    "PartnerPnl",
    "PeriodAssetDetail",
    "PeriodFinancials",
    "PnlSummary",
    "TaxBases",
    "TaxCalculationResult",
    "TaxComputation",
    "PartnerLedger",
    "PartnerLedgerLine",
    "PartnerLedgerReport",
    "ClosedPeriod",
    "PeriodState",
    "DebtPosition",
    "LIABILITY",
    "RECEIVABLE",
    "LEDGER_COLLECTIONS",
    "AdDeposit",
    "AdFundTransfer",
    "Asset",
    "CapitalInflow",
    "Commission",
    "DailyAdCost",
    "DebtPayment",
    "ExchangeLog",
    "LedgerSnapshot",
    "Liability",
    "MiscellaneousExpense",
    "Partner",
    "PartnerLedgerEntry",
    "PartnerShare",
    "Project",
    "Receivable",
    "ReceivablePayment",
    "TaxPayment",
    "Withdrawal",
    "record_date",
    "TaxSettings",
    "default_tax_settings",
    "LedgerWarning",
]
