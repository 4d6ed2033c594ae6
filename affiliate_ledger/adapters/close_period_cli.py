"""CLI adapter closing the open reporting period."""

from affiliate_ledger.domain.exceptions import (
    PeriodStateError,
    TaxConfigurationError,
)
from affiliate_ledger.infrastructure.container import (
    build_close_period_use_case,
)
from affiliate_ledger.infrastructure.logging.logger import get_app_logger


def main() -> None:
    """Close the open period and print its snapshot headline."""
    logger = get_app_logger()
    use_case = build_close_period_use_case()
    try:
        closed = use_case.execute()
    except (PeriodStateError, TaxConfigurationError) as exc:
        logger.error(str(exc))
        return
    financials = closed.financials
    print(
        f"Closed period {closed.period} "
        f"at {closed.closed_at:%Y-%m-%d %H:%M}."
    )
    if financials is not None:
        print(
            f"Net profit: {financials.net_profit:,.0f} VND, "
            f"end balance: {financials.cash_flow.end_balance:,.0f} VND"
        )


if __name__ == "__main__":  # pragma: no cover
    main()
