"""Use case to compute the financials of a reporting period."""

from dataclasses import replace
from decimal import Decimal

from affiliate_ledger.application.ports.ledger_repository import (
    LedgerRepositoryPort,
)
from affiliate_ledger.application.ports.period_repository import (
    PeriodRepositoryPort,
)
from affiliate_ledger.application.ports.tax_settings_repository import (
    TaxSettingsRepositoryPort,
)
from affiliate_ledger.domain.constants import DEFAULT_FALLBACK_USD_RATE
from affiliate_ledger.domain.exceptions import PeriodStateError
from affiliate_ledger.domain.models import (
    LedgerSnapshot,
    PeriodFinancials,
    PeriodState,
    TaxSettings,
)
from affiliate_ledger.domain.services.ad_costing import value_ad_costs
from affiliate_ledger.domain.services.cash_flow import build_cash_flow
from affiliate_ledger.domain.services.periods import (
    previous_period,
    validate_period,
)
from affiliate_ledger.domain.services.pnl import aggregate_pnl
from affiliate_ledger.domain.services.tax import (
    calculate_partner_tax,
    calculate_tax,
)
from affiliate_ledger.infrastructure.logging.logger import get_app_logger


def prior_end_balance(state: PeriodState, period: str) -> Decimal | None:
    """Return the end balance snapshotted when the previous period closed."""
    closed = state.find_closed(previous_period(period))
    if closed is None or closed.financials is None:
        return None
    return closed.financials.cash_flow.end_balance


def compute_period_financials(
    snapshot: LedgerSnapshot,
    period: str,
    settings: TaxSettings,
    *,
    state: PeriodState | None = None,
    fallback_rate: Decimal = DEFAULT_FALLBACK_USD_RATE,
    logger=None,
) -> PeriodFinancials:
    """Run ad costing, P&L, tax and cash flow for one period.

    Args:
        snapshot: Ledger snapshot.
        period: Reporting period (YYYY-MM).
        settings: Workspace tax settings.
        state: Period state providing the previous closed snapshot.
        fallback_rate: VND per USD when a record carries no rate.
        logger: Optional logger used for warnings.

    Returns:
        PeriodFinancials: Combined financials of the period.
    """
    validate_period(period)
    ad_costs = value_ad_costs(snapshot, fallback_rate, logger=logger)
    pnl = aggregate_pnl(
        snapshot, period, ad_costs, fallback_rate, logger=logger
    )
    tax = calculate_tax(pnl, settings)
    owner_id = pnl.partner_pnl[0].partner_id
    partner_details = tuple(
        replace(
            item,
            tax_payable=calculate_partner_tax(
                item, settings, is_owner=item.partner_id == owner_id
            ).tax_payable,
        )
        for item in pnl.partner_pnl
    )
    beginning = prior_end_balance(state, period) if state else None
    cash_flow = build_cash_flow(
        snapshot,
        period,
        beginning,
        fallback_rate=fallback_rate,
        ad_costs=ad_costs,
        logger=logger,
    )
    profit_before_tax = pnl.total_revenue - pnl.total_cost
    return PeriodFinancials(
        period=period,
        total_revenue=pnl.total_revenue,
        total_ad_cost=pnl.total_ad_cost,
        total_misc_cost=pnl.total_misc_cost,
        total_cost=pnl.total_cost,
        total_profit=pnl.total_profit,
        total_input_vat=pnl.total_input_vat,
        my_revenue=pnl.my_revenue,
        my_cost=pnl.my_cost,
        my_profit=pnl.my_profit,
        my_input_vat=pnl.my_input_vat,
        exchange_rate_gain_loss=pnl.exchange_rate_gain_loss,
        profit_before_tax=profit_before_tax,
        net_profit=profit_before_tax - tax.result.tax_payable,
        tax=tax.result,
        tax_bases=tax.bases,
        partner_pnl_details=partner_details,
        revenue_details=pnl.revenue_details,
        ad_cost_details=pnl.ad_cost_details,
        misc_cost_details=pnl.misc_cost_details,
        cash_flow=cash_flow,
        warnings=pnl.warnings + cash_flow.warnings,
    )


class GetPeriodFinancialsUseCase:
    """Compute P&L, tax and cash flow for a period from the ledger."""

    def __init__(
        self,
        ledger_repository: LedgerRepositoryPort,
        period_repository: PeriodRepositoryPort,
        tax_settings_repository: TaxSettingsRepositoryPort,
        logger=None,
        fallback_rate: Decimal = DEFAULT_FALLBACK_USD_RATE,
    ) -> None:
        """Initialize the use case.

        Args:
            ledger_repository: Port providing the ledger snapshot.
            period_repository: Port providing the period state.
            tax_settings_repository: Port providing tax settings.
            logger: Optional logger compatible with logging.Logger-like API.
            fallback_rate: VND per USD when a record carries no rate.
        """
        self._ledger_repository = ledger_repository
        self._period_repository = period_repository
        self._tax_settings_repository = tax_settings_repository
        self._logger = logger or get_app_logger()
        self._fallback_rate = fallback_rate

    def execute(self, period: str | None = None) -> PeriodFinancials:
        """Return the financials of ``period`` or of the current period.

        Args:
            period: Optional period (YYYY-MM); defaults to the viewed or
                open period.

        Returns:
            PeriodFinancials: Stored snapshot of a closed period, else
                freshly computed financials.

        Raises:
            PeriodStateError: If no period is given and none is current.
        """
        state = self._period_repository.load_state()
        resolved = period or state.current_period
        if resolved is None:
            raise PeriodStateError("No period is open or being viewed")
        closed = state.find_closed(resolved)
        if closed is not None and closed.financials is not None:
            self._logger.info(f"Period {resolved} is closed; using its snapshot")
            return closed.financials
        snapshot = self._ledger_repository.fetch_snapshot()
        settings = self._tax_settings_repository.load_settings()
        self._logger.info(
            f"Fetched {snapshot.record_count()} ledger records for {resolved}"
        )
        financials = compute_period_financials(
            snapshot,
            resolved,
            settings,
            state=state,
            fallback_rate=self._fallback_rate,
            logger=self._logger,
        )
        self._logger.info(
            f"Period {resolved} computed: revenue={financials.total_revenue}, "
            f"cost={financials.total_cost}, "
            f"tax={financials.tax.tax_payable}, "
            f"net_profit={financials.net_profit}"
        )
        if financials.warnings:
            self._logger.warning(
                f"Period {resolved} has {len(financials.warnings)} warnings"
            )
        return financials


__all__ = [
    "GetPeriodFinancialsUseCase",
    "compute_period_financials",
    "prior_end_balance",
    "PeriodFinancials",
]
