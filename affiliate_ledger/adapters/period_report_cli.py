"""CLI adapter printing the financial report of a period.

The period comes from ``LEDGER_PERIOD`` (YYYY-MM); without it the viewed
or open period is reported.
"""

import os
from decimal import Decimal

from affiliate_ledger.domain.exceptions import (
    InvalidPeriodError,
    PeriodStateError,
    TaxConfigurationError,
)
from affiliate_ledger.domain.models import CashFlowSection, PeriodFinancials
from affiliate_ledger.infrastructure.container import (
    build_period_financials_use_case,
)
from affiliate_ledger.infrastructure.logging.logger import get_app_logger


def _money(value: Decimal) -> str:
    return f"{value:,.0f}"


def _print_section(title: str, section: CashFlowSection) -> None:
    print(f"  {title}")
    for line in section.inflows:
        print(f"    + {line.label}: {_money(line.amount)}")
    for line in section.outflows:
        print(f"    - {line.label}: {_money(line.amount)}")
    print(f"    Net: {_money(section.net)}")


def print_report(financials: PeriodFinancials) -> None:
    """Print profit and loss, tax and cash flow of a period."""
    print(f"Period {financials.period}")
    print("Profit and loss (VND)")
    print(f"  Revenue: {_money(financials.total_revenue)}")
    print(f"  Ad cost: {_money(financials.total_ad_cost)}")
    print(f"  Misc cost: {_money(financials.total_misc_cost)}")
    gain = financials.exchange_rate_gain_loss
    print(f"  Exchange gain/loss: {_money(gain)}")
    print(f"  Profit before tax: {_money(financials.profit_before_tax)}")
    print(f"  Tax payable: {_money(financials.tax.tax_payable)}")
    print(f"  Net profit: {_money(financials.net_profit)}")
    print("Partners")
    for share in financials.partner_pnl_details:
        print(
            f"  {share.name}: revenue={_money(share.revenue)}, "
            f"cost={_money(share.cost)}, profit={_money(share.profit)}, "
            f"tax={_money(share.tax_payable)}"
        )
    cash_flow = financials.cash_flow
    print("Cash flow (VND)")
    print(f"  Beginning balance: {_money(cash_flow.beginning_balance)}")
    _print_section("Operating", cash_flow.operating)
    _print_section("Investing", cash_flow.investing)
    _print_section("Financing", cash_flow.financing)
    print(f"  End balance: {_money(cash_flow.end_balance)}")
    if financials.warnings:
        print(f"Warnings ({len(financials.warnings)})")
        for warning in financials.warnings:
            print(f"  [{warning.code}] {warning.message}")


def main() -> None:
    """Compute and print the financials of the selected period."""
    logger = get_app_logger()
    period = os.getenv("LEDGER_PERIOD", "").strip() or None
    use_case = build_period_financials_use_case()
    try:
        financials = use_case.execute(period=period)
    except (
        InvalidPeriodError,
        PeriodStateError,
        TaxConfigurationError,
    ) as exc:
        logger.error(str(exc))
        return
    print_report(financials)


if __name__ == "__main__":  # pragma: no cover
    main()
