"""Domain model for the per-workspace tax configuration."""

from dataclasses import dataclass
from decimal import Decimal

from affiliate_ledger.domain.constants import (
    TAX_BASE_PERSONAL,
    TAX_BASE_TOTAL,
    TAX_METHOD_REVENUE,
    VAT_INPUT_AUTO_SUM,
)


@dataclass(frozen=True)
class TaxSettings:
    """Tax method and parameters for a workspace.

    Rates are percentages. Fields left as ``None`` are treated as missing
    and are only an error when the selected method needs them.

    Attributes:
        method: ``revenue`` or ``profit_vat``.
        revenue_rate: Rate applied to the revenue base (revenue method).
        vat_rate: Output VAT rate (profit_vat method).
        income_rate: Income tax rate on the profit base (profit_vat method).
        vat_input_method: ``auto_sum`` of cost VAT or ``manual`` figure.
        manual_input_vat: Input VAT entered by hand.
        income_tax_base: ``personal`` (owner share) or ``total``.
        vat_output_base: ``personal`` or ``total`` for output VAT.
        vat_input_base: ``personal`` or ``total`` for auto-summed input VAT.
        tax_separation_amount: Revenue excluded from the taxable base.
        period_closing_day: Day of the following month from which a period
            may be closed.
    """

    method: str = TAX_METHOD_REVENUE
    revenue_rate: Decimal | None = None
    vat_rate: Decimal | None = None
    income_rate: Decimal | None = None
    vat_input_method: str | None = VAT_INPUT_AUTO_SUM
    manual_input_vat: Decimal | None = None
    income_tax_base: str = TAX_BASE_PERSONAL
    vat_output_base: str = TAX_BASE_PERSONAL
    vat_input_base: str = TAX_BASE_TOTAL
    tax_separation_amount: Decimal = Decimal("0")
    period_closing_day: int = 1


def default_tax_settings() -> TaxSettings:
    """Return the settings a new workspace starts with."""
    return TaxSettings(
        method=TAX_METHOD_REVENUE,
        revenue_rate=Decimal("1.5"),
        vat_rate=Decimal("10"),
        income_rate=Decimal("20"),
        vat_input_method=VAT_INPUT_AUTO_SUM,
        manual_input_vat=Decimal("0"),
    )


__all__ = ["TaxSettings", "default_tax_settings"]
