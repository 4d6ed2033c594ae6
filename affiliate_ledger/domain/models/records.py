"""Domain models for ledger records read by the period engine."""

from dataclasses import dataclass
from decimal import Decimal

from affiliate_ledger.domain.constants import ENTRY_INFLOW


@dataclass(frozen=True)
class PartnerShare:
    """Percentage of a project's or expense's outcome owned by a partner."""

    partner_id: str
    share_percentage: Decimal
    permission: str = "view"


@dataclass(frozen=True)
class Project:
    """Affiliate project opened in a reporting period.

    Attributes:
        id: Project identifier.
        name: Display name, unique per period.
        period: Reporting period (YYYY-MM) the project belongs to.
        is_partnership: Whether ``partner_shares`` apply.
        partner_shares: Shares of the project's outcome by partner.
    """

    id: str
    name: str
    period: str
    is_partnership: bool = False
    partner_shares: tuple[PartnerShare, ...] = ()


@dataclass(frozen=True)
class Partner:
    """Partner sharing in project outcomes."""

    id: str
    name: str
    login_email: str | None = None
    is_self: bool = False


@dataclass(frozen=True)
class Asset:
    """Cash store (bank account, wallet, platform balance)."""

    id: str
    name: str
    currency: str
    balance: Decimal = Decimal("0")
    type_id: str | None = None


@dataclass(frozen=True)
class AdDeposit:
    """Top-up of an ad account paid from an asset."""

    id: str
    date: str
    ads_platform: str
    ad_account_number: str
    asset_id: str
    usd_amount: Decimal
    rate: Decimal
    vnd_amount: Decimal
    project_id: str | None = None


@dataclass(frozen=True)
class AdFundTransfer:
    """USD moved between two ad accounts of the same platform."""

    id: str
    date: str
    ads_platform: str
    from_ad_account_number: str
    to_ad_account_number: str
    amount: Decimal
    description: str = ""


@dataclass(frozen=True)
class DailyAdCost:
    """Daily USD spend of an ad account on a project."""

    id: str
    project_id: str
    ad_account_number: str
    date: str
    amount: Decimal
    vat_rate: Decimal | None = None


@dataclass(frozen=True)
class Commission:
    """Affiliate commission received into an asset."""

    id: str
    project_id: str
    date: str
    asset_id: str
    usd_amount: Decimal
    predicted_rate: Decimal
    vnd_amount: Decimal


@dataclass(frozen=True)
class ExchangeLog:
    """Sale of USD from one asset into VND on another."""

    id: str
    date: str
    selling_asset_id: str
    receiving_asset_id: str
    usd_amount: Decimal
    rate: Decimal
    vnd_amount: Decimal


@dataclass(frozen=True)
class MiscellaneousExpense:
    """Expense paid from an asset, optionally tied to a project."""

    id: str
    date: str
    description: str
    asset_id: str
    amount: Decimal
    vnd_amount: Decimal
    project_id: str | None = None
    vat_rate: Decimal | None = None
    is_partnership: bool = False
    partner_shares: tuple[PartnerShare, ...] = ()


@dataclass(frozen=True)
class Withdrawal:
    """Cash taken out of the business by a partner."""

    id: str
    date: str
    asset_id: str
    amount: Decimal
    vnd_amount: Decimal
    withdrawn_by: str
    description: str = ""


@dataclass(frozen=True)
class CapitalInflow:
    """Capital put into the business."""

    id: str
    date: str
    asset_id: str
    amount: Decimal
    description: str = ""
    contributed_by_partner_id: str | None = None
    external_investor_name: str | None = None


@dataclass(frozen=True)
class Liability:
    """Debt owed by the business."""

    id: str
    description: str
    total_amount: Decimal
    currency: str
    creation_date: str
    inflow_asset_id: str | None = None
    type: str = "short-term"


@dataclass(frozen=True)
class DebtPayment:
    """Principal repayment against a liability."""

    id: str
    liability_id: str
    date: str
    amount: Decimal
    asset_id: str


@dataclass(frozen=True)
class Receivable:
    """Money lent out or otherwise owed to the business."""

    id: str
    description: str
    total_amount: Decimal
    currency: str
    creation_date: str
    outflow_asset_id: str | None = None
    type: str = "short-term"


@dataclass(frozen=True)
class ReceivablePayment:
    """Collection against a receivable."""

    id: str
    receivable_id: str
    date: str
    amount: Decimal
    asset_id: str


@dataclass(frozen=True)
class TaxPayment:
    """Tax paid for a reporting period."""

    id: str
    period: str
    date: str
    amount: Decimal
    asset_id: str


@dataclass(frozen=True)
class PartnerLedgerEntry:
    """Dated movement on a partner's running balance."""

    id: str
    date: str
    partner_id: str
    amount: Decimal
    type: str = ENTRY_INFLOW
    description: str = ""


@dataclass(frozen=True)
class LedgerSnapshot:
    """Immutable, de-duplicated view of one workspace's ledger.

    Every collection is a tuple so the snapshot can be shared between
    computations without copying.
    """

    projects: tuple[Project, ...] = ()
    partners: tuple[Partner, ...] = ()
    assets: tuple[Asset, ...] = ()
    ad_deposits: tuple[AdDeposit, ...] = ()
    ad_fund_transfers: tuple[AdFundTransfer, ...] = ()
    daily_ad_costs: tuple[DailyAdCost, ...] = ()
    commissions: tuple[Commission, ...] = ()
    exchange_logs: tuple[ExchangeLog, ...] = ()
    miscellaneous_expenses: tuple[MiscellaneousExpense, ...] = ()
    withdrawals: tuple[Withdrawal, ...] = ()
    capital_inflows: tuple[CapitalInflow, ...] = ()
    liabilities: tuple[Liability, ...] = ()
    debt_payments: tuple[DebtPayment, ...] = ()
    receivables: tuple[Receivable, ...] = ()
    receivable_payments: tuple[ReceivablePayment, ...] = ()
    tax_payments: tuple[TaxPayment, ...] = ()
    partner_ledger_entries: tuple[PartnerLedgerEntry, ...] = ()

    def project_by_id(self) -> dict[str, Project]:
        return {project.id: project for project in self.projects}

    def partner_by_id(self) -> dict[str, Partner]:
        return {partner.id: partner for partner in self.partners}

    def asset_by_id(self) -> dict[str, Asset]:
        return {asset.id: asset for asset in self.assets}

    def record_count(self) -> int:
        """Return the number of records across all collections."""
        return sum(
            len(getattr(self, name)) for name in LEDGER_COLLECTIONS
        )


# Collection name -> record type. Names double as table names.
LEDGER_COLLECTIONS: dict[str, type] = {
    "projects": Project,
    "partners": Partner,
    "assets": Asset,
    "ad_deposits": AdDeposit,
    "ad_fund_transfers": AdFundTransfer,
    "daily_ad_costs": DailyAdCost,
    "commissions": Commission,
    "exchange_logs": ExchangeLog,
    "miscellaneous_expenses": MiscellaneousExpense,
    "withdrawals": Withdrawal,
    "capital_inflows": CapitalInflow,
    "liabilities": Liability,
    "debt_payments": DebtPayment,
    "receivables": Receivable,
    "receivable_payments": ReceivablePayment,
    "tax_payments": TaxPayment,
    "partner_ledger_entries": PartnerLedgerEntry,
}


def record_date(record) -> str | None:
    """Return the date that places a record inside a period.

    Liabilities and receivables are dated by their creation date; projects
    carry a period rather than a date.
    """
    if isinstance(record, (Liability, Receivable)):
        return record.creation_date
    if isinstance(record, Project):
        return record.period
    return getattr(record, "date", None)


__all__ = [
    "PartnerShare",
    "Project",
    "Partner",
    "Asset",
    "AdDeposit",
    "AdFundTransfer",
    "DailyAdCost",
    "Commission",
    "ExchangeLog",
    "MiscellaneousExpense",
    "Withdrawal",
    "CapitalInflow",
    "Liability",
    "DebtPayment",
    "Receivable",
    "ReceivablePayment",
    "TaxPayment",
    "PartnerLedgerEntry",
    "LedgerSnapshot",
    "LEDGER_COLLECTIONS",
    "record_date",
]
