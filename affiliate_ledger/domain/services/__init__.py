"""Domain services package."""

from .ad_costing import value_ad_costs
from .apportionment import apportion, effective_shares, resolve_owner
from .cash_flow import (
    build_cash_flow,
    build_period_asset_details,
    collect_cash_movements,
    compute_asset_balances,
)
from .debts import compute_debt_positions
from .fx import resolve_rate, to_vnd
from .partner_ledger import build_partner_ledgers
from .period_lifecycle import (
    clear_viewing_period,
    close_period,
    open_period,
    suggest_next_period,
    view_period,
)
from .periods import (
    is_date_in_period,
    next_period,
    period_end,
    period_of,
    period_start,
    previous_period,
    select_in_period,
    validate_period,
)
from .pnl import aggregate_pnl
from .tax import calculate_partner_tax, calculate_tax, validate_tax_settings

__all__ = [
    "value_ad_costs",
    "apportion",
    "effective_shares",
    "resolve_owner",
    "build_cash_flow",
    "build_period_asset_details",
    "collect_cash_movements",
    "compute_asset_balances",
    "compute_debt_positions",
    "resolve_rate",
    "to_vnd",
    "build_partner_ledgers",
    "clear_viewing_period",
    "close_period",
    "open_period",
    "suggest_next_period",
    "view_period",
    "is_date_in_period",
    "next_period",
    "period_end",
    "period_of",
    "period_start",
    "previous_period",
    "select_in_period",
    "validate_period",
    "aggregate_pnl",
    "calculate_partner_tax",
    "calculate_tax",
    "validate_tax_settings",
]
