"""Domain service computing tax payable for a period."""

from decimal import Decimal

from affiliate_ledger.domain.constants import (
    FULL_SHARE,
    TAX_BASE_TOTAL,
    TAX_BASES,
    TAX_METHOD_PROFIT_VAT,
    TAX_METHOD_REVENUE,
    TAX_METHODS,
    VAT_INPUT_MANUAL,
    VAT_INPUT_METHODS,
)
from affiliate_ledger.domain.exceptions import TaxConfigurationError
from affiliate_ledger.domain.models import (
    PartnerPnl,
    PnlSummary,
    TaxBases,
    TaxCalculationResult,
    TaxComputation,
    TaxSettings,
)
from affiliate_ledger.utils.decimal_utils import coerce_decimal

_ZERO = Decimal("0")


def validate_tax_settings(settings: TaxSettings) -> None:
    """Raise when the settings cannot drive the selected method.

    Args:
        settings: Workspace tax settings.

    Raises:
        TaxConfigurationError: If the method or a base selector is unknown,
            or a rate required by the method is missing.
    """
    if settings.method not in TAX_METHODS:
        raise TaxConfigurationError(f"Unknown tax method: {settings.method!r}")
    for name in ("income_tax_base", "vat_output_base", "vat_input_base"):
        value = getattr(settings, name)
        if value not in TAX_BASES:
            raise TaxConfigurationError(f"Unknown {name}: {value!r}")
    if settings.method == TAX_METHOD_REVENUE:
        _require(settings, "revenue_rate")
        return
    _require(settings, "vat_rate")
    _require(settings, "income_rate")
    if settings.vat_input_method not in VAT_INPUT_METHODS:
        raise TaxConfigurationError(
            f"Unknown vat_input_method: {settings.vat_input_method!r}"
        )
    if settings.vat_input_method == VAT_INPUT_MANUAL:
        _require(settings, "manual_input_vat")


def _require(settings: TaxSettings, name: str) -> None:
    if getattr(settings, name) is None:
        raise TaxConfigurationError(
            f"Tax method {settings.method!r} requires {name}"
        )


def _percent(amount: Decimal, rate) -> Decimal:
    return amount * coerce_decimal(rate) / FULL_SHARE


def _apply_method(
    settings: TaxSettings,
    revenue_base: Decimal,
    vat_output_base: Decimal,
    profit_base: Decimal,
    input_vat: Decimal,
) -> TaxCalculationResult:
    if settings.method == TAX_METHOD_REVENUE:
        tax = _percent(revenue_base, settings.revenue_rate)
        return TaxCalculationResult(
            tax_payable=tax,
            income_tax=tax,
            net_vat=_ZERO,
            output_vat=_ZERO,
        )
    output_vat = _percent(vat_output_base, settings.vat_rate)
    net_vat = max(_ZERO, output_vat - input_vat)
    income_tax = _percent(max(_ZERO, profit_base), settings.income_rate)
    return TaxCalculationResult(
        tax_payable=net_vat + income_tax,
        income_tax=income_tax,
        net_vat=net_vat,
        output_vat=output_vat,
        input_vat=input_vat,
    )


def calculate_tax(pnl: PnlSummary, settings: TaxSettings) -> TaxComputation:
    """Compute tax payable for a period from its P&L and the tax settings.

    Revenue and cost bases follow ``income_tax_base``; the output VAT base
    follows ``vat_output_base`` and auto-summed input VAT follows
    ``vat_input_base``. The separation amount is removed from the revenue
    and output VAT bases, each floored at zero.

    Args:
        pnl: Aggregated profit and loss of the period.
        settings: Workspace tax settings.

    Returns:
        TaxComputation: Tax result and the bases it was derived from.

    Raises:
        TaxConfigurationError: If the settings are incomplete for the method.
    """
    validate_tax_settings(settings)
    use_total = settings.income_tax_base == TAX_BASE_TOTAL
    initial_revenue_base = pnl.total_revenue if use_total else pnl.my_revenue
    cost_base = pnl.total_cost if use_total else pnl.my_cost
    initial_vat_output_base = (
        pnl.total_revenue
        if settings.vat_output_base == TAX_BASE_TOTAL
        else pnl.my_revenue
    )
    vat_input_base = (
        pnl.total_input_vat
        if settings.vat_input_base == TAX_BASE_TOTAL
        else pnl.my_input_vat
    )
    separation = coerce_decimal(settings.tax_separation_amount)
    revenue_base = max(_ZERO, initial_revenue_base - separation)
    profit_base = revenue_base - cost_base
    vat_output_base = max(_ZERO, initial_vat_output_base - separation)

    input_vat = vat_input_base
    if (
        settings.method == TAX_METHOD_PROFIT_VAT
        and settings.vat_input_method == VAT_INPUT_MANUAL
    ):
        input_vat = coerce_decimal(settings.manual_input_vat)

    result = _apply_method(
        settings,
        revenue_base,
        vat_output_base,
        profit_base,
        input_vat,
    )
    bases = TaxBases(
        initial_revenue_base=initial_revenue_base,
        tax_separation_amount=separation,
        revenue_base=revenue_base,
        cost_base=cost_base,
        profit_base=profit_base,
        vat_output_base=vat_output_base,
        vat_input_base=vat_input_base,
    )
    return TaxComputation(method=settings.method, result=result, bases=bases)


def calculate_partner_tax(
    partner_pnl: PartnerPnl,
    settings: TaxSettings,
    *,
    is_owner: bool = False,
) -> TaxCalculationResult:
    """Apply the tax method to one partner's share of the period.

    No separation amount is applied. A manual input VAT figure is credited
    to the owner only; other partners use their own input VAT.
    """
    validate_tax_settings(settings)
    revenue_base = max(_ZERO, partner_pnl.revenue)
    input_vat = partner_pnl.input_vat
    if (
        settings.method == TAX_METHOD_PROFIT_VAT
        and settings.vat_input_method == VAT_INPUT_MANUAL
        and is_owner
    ):
        input_vat = coerce_decimal(settings.manual_input_vat)
    return _apply_method(
        settings,
        revenue_base,
        revenue_base,
        partner_pnl.profit,
        input_vat,
    )


__all__ = ["calculate_tax", "calculate_partner_tax", "validate_tax_settings"]
