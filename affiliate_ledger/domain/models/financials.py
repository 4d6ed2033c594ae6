"""Domain models for computed period financials."""

from dataclasses import dataclass
from decimal import Decimal

from affiliate_ledger.domain.constants import CURRENCY_VND
from affiliate_ledger.domain.models.warnings import LedgerWarning


@dataclass(frozen=True)
class AmountLine:
    """Named amount used in revenue and cost breakdowns."""

    name: str
    amount: Decimal


@dataclass(frozen=True)
class PartnerPnl:
    """Profit and loss apportioned to one partner for a period."""

    partner_id: str
    name: str
    revenue: Decimal
    cost: Decimal
    profit: Decimal
    input_vat: Decimal = Decimal("0")
    tax_payable: Decimal = Decimal("0")


@dataclass(frozen=True)
class PnlSummary:
    """Aggregated profit and loss for a period, split by partner.

    Attributes:
        period: Reporting period (YYYY-MM).
        total_revenue: Revenue across all partners, in VND.
        total_ad_cost: Ad spend valued in VND.
        total_misc_cost: Miscellaneous expenses in VND.
        total_cost: Ad cost plus miscellaneous cost.
        total_profit: Revenue minus cost.
        total_input_vat: Input VAT carried by cost records.
        my_revenue: Owner's apportioned revenue.
        my_cost: Owner's apportioned cost.
        my_profit: Owner's apportioned profit.
        my_input_vat: Owner's apportioned input VAT.
        exchange_rate_gain_loss: Realised FX gain (loss when negative)
            included in revenue.
        partner_pnl: Per-partner figures, owner first.
        revenue_details: Revenue by project name.
        ad_cost_details: Ad cost by project name.
        misc_cost_details: Miscellaneous cost by description.
        warnings: Recoverable issues met while aggregating.
    """

    period: str
    total_revenue: Decimal
    total_ad_cost: Decimal
    total_misc_cost: Decimal
    total_cost: Decimal
    total_profit: Decimal
    total_input_vat: Decimal
    my_revenue: Decimal
    my_cost: Decimal
    my_profit: Decimal
    my_input_vat: Decimal
    exchange_rate_gain_loss: Decimal
    partner_pnl: tuple[PartnerPnl, ...]
    revenue_details: tuple[AmountLine, ...] = ()
    ad_cost_details: tuple[AmountLine, ...] = ()
    misc_cost_details: tuple[AmountLine, ...] = ()
    warnings: tuple[LedgerWarning, ...] = ()


@dataclass(frozen=True)
class TaxCalculationResult:
    """Tax payable and its components."""

    tax_payable: Decimal
    income_tax: Decimal
    net_vat: Decimal
    output_vat: Decimal
    input_vat: Decimal = Decimal("0")


@dataclass(frozen=True)
class TaxBases:
    """Intermediate bases kept for audit display."""

    initial_revenue_base: Decimal
    tax_separation_amount: Decimal
    revenue_base: Decimal
    cost_base: Decimal
    profit_base: Decimal
    vat_output_base: Decimal
    vat_input_base: Decimal


@dataclass(frozen=True)
class TaxComputation:
    """Tax result together with the bases it was computed from."""

    method: str
    result: TaxCalculationResult
    bases: TaxBases


@dataclass(frozen=True)
class CashFlowLine:
    """Labelled cash flow line item."""

    label: str
    amount: Decimal


@dataclass(frozen=True)
class CashFlowSection:
    """Inflows and outflows of one cash flow activity."""

    inflows: tuple[CashFlowLine, ...] = ()
    outflows: tuple[CashFlowLine, ...] = ()

    @property
    def total_in(self) -> Decimal:
        return sum((line.amount for line in self.inflows), Decimal("0"))

    @property
    def total_out(self) -> Decimal:
        return sum((line.amount for line in self.outflows), Decimal("0"))

    @property
    def net(self) -> Decimal:
        """Return total inflows minus total outflows."""
        return self.total_in - self.total_out


@dataclass(frozen=True)
class CashFlowStatement:
    """Statement of cash flows for a period, in VND."""

    period: str
    operating: CashFlowSection
    investing: CashFlowSection
    financing: CashFlowSection
    beginning_balance: Decimal
    end_balance: Decimal
    currency_code: str = CURRENCY_VND
    warnings: tuple[LedgerWarning, ...] = ()

    @property
    def net_change(self) -> Decimal:
        """Return the sum of the three activity nets."""
        return self.operating.net + self.investing.net + self.financing.net


@dataclass(frozen=True)
class PeriodAssetDetail:
    """Opening and closing balance of one asset for a period."""

    id: str
    name: str
    currency: str
    opening_balance: Decimal
    change: Decimal
    closing_balance: Decimal


@dataclass(frozen=True)
class AssetBalance:
    """Running balance of an asset in its own currency and in VND."""

    id: str
    name: str
    currency: str
    balance: Decimal
    vnd_balance: Decimal


@dataclass(frozen=True)
class AdCostValuation:
    """VND value of one daily ad cost."""

    cost_id: str
    vnd_cost: Decimal
    effective_rate: Decimal


@dataclass(frozen=True)
class AdCostingResult:
    """Valuations of ad costs and fund transfers from FIFO deposits.

    Attributes:
        costs: Valuation by daily ad cost id.
        transfers: VND value moved by each ad fund transfer id.
        warnings: Costs or transfers valued without deposit history.
    """

    costs: dict[str, AdCostValuation]
    transfers: dict[str, Decimal]
    warnings: tuple[LedgerWarning, ...] = ()

    def vnd_cost(self, cost_id: str) -> Decimal:
        valuation = self.costs.get(cost_id)
        return valuation.vnd_cost if valuation else Decimal("0")


@dataclass(frozen=True)
class PeriodFinancials:
    """Complete computed financials of a reporting period."""

    period: str
    total_revenue: Decimal
    total_ad_cost: Decimal
    total_misc_cost: Decimal
    total_cost: Decimal
    total_profit: Decimal
    total_input_vat: Decimal
    my_revenue: Decimal
    my_cost: Decimal
    my_profit: Decimal
    my_input_vat: Decimal
    exchange_rate_gain_loss: Decimal
    profit_before_tax: Decimal
    net_profit: Decimal
    tax: TaxCalculationResult
    tax_bases: TaxBases
    partner_pnl_details: tuple[PartnerPnl, ...]
    revenue_details: tuple[AmountLine, ...]
    ad_cost_details: tuple[AmountLine, ...]
    misc_cost_details: tuple[AmountLine, ...]
    cash_flow: CashFlowStatement
    warnings: tuple[LedgerWarning, ...] = ()


__all__ = [
    "AmountLine",
    "PartnerPnl",
    "PnlSummary",
    "TaxCalculationResult",
    "TaxBases",
    "TaxComputation",
    "CashFlowLine",
    "CashFlowSection",
    "CashFlowStatement",
    "PeriodAssetDetail",
    "AssetBalance",
    "AdCostValuation",
    "AdCostingResult",
    "PeriodFinancials",
]
