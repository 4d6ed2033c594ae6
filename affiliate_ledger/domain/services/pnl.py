"""Domain service aggregating period profit and loss by partner."""

from dataclasses import dataclass, field
from decimal import Decimal
from logging import Logger

from affiliate_ledger.domain.constants import (
    CURRENCY_USD,
    DEFAULT_FALLBACK_USD_RATE,
    UNKNOWN_PROJECT_NAME,
)
from affiliate_ledger.domain.models import (
    AdCostingResult,
    AmountLine,
    Commission,
    ExchangeLog,
    LedgerSnapshot,
    PartnerPnl,
    PnlSummary,
)
from affiliate_ledger.domain.models.warnings import UNKNOWN_PROJECT
from affiliate_ledger.domain.services.ad_costing import (
    USD_EPSILON,
    value_ad_costs,
)
from affiliate_ledger.domain.services.apportionment import (
    apportion,
    effective_shares,
    resolve_owner,
)
from affiliate_ledger.domain.services.diagnostics import emit_warning
from affiliate_ledger.domain.services.periods import (
    is_date_in_period,
    select_in_period,
    validate_period,
)
from affiliate_ledger.utils.decimal_utils import coerce_decimal

_ZERO = Decimal("0")


@dataclass
class _Figures:
    revenue: Decimal = _ZERO
    cost: Decimal = _ZERO
    input_vat: Decimal = _ZERO

    def add(self, revenue=_ZERO, cost=_ZERO, input_vat=_ZERO) -> None:
        self.revenue += revenue
        self.cost += cost
        self.input_vat += input_vat


@dataclass
class _CommissionChunk:
    project_id: str
    amount: Decimal
    predicted_rate: Decimal


@dataclass
class _Breakdown:
    order: list[str] = field(default_factory=list)
    amounts: dict[str, Decimal] = field(default_factory=dict)

    def add(self, name: str, amount: Decimal) -> None:
        if name not in self.amounts:
            self.order.append(name)
            self.amounts[name] = _ZERO
        self.amounts[name] += amount

    def lines(self) -> tuple[AmountLine, ...]:
        return tuple(
            AmountLine(name=name, amount=self.amounts[name])
            for name in self.order
        )


def _input_vat(amount: Decimal, vat_rate) -> Decimal:
    if vat_rate is None:
        return _ZERO
    return amount * coerce_decimal(vat_rate) / Decimal("100")


def realised_exchange_gains(
    snapshot: LedgerSnapshot,
    period: str,
) -> dict[str, Decimal]:
    """Return realised FX gain or loss per project for a period.

    USD commissions received into USD assets form a FIFO queue per asset
    at their predicted rate. Exchange logs selling from that asset consume
    the queue in date order; sales inside ``period`` realise
    ``usd * (rate - predicted_rate)`` for the project that earned the USD.

    Args:
        snapshot: Ledger snapshot.
        period: Reporting period (YYYY-MM).

    Returns:
        dict[str, Decimal]: Gain (positive) or loss by project id.
    """
    usd_assets = {
        asset.id for asset in snapshot.assets if asset.currency == CURRENCY_USD
    }
    events = [
        (commission.date, 0, commission.id, commission)
        for commission in snapshot.commissions
        if commission.asset_id in usd_assets
    ]
    events.extend(
        (log.date, 1, log.id, log)
        for log in snapshot.exchange_logs
        if log.selling_asset_id in usd_assets
    )
    ledgers: dict[str, list[_CommissionChunk]] = {}
    gains: dict[str, Decimal] = {}
    for _, _, _, record in sorted(events, key=lambda item: item[:3]):
        if isinstance(record, Commission):
            ledgers.setdefault(record.asset_id, []).append(
                _CommissionChunk(
                    project_id=record.project_id,
                    amount=coerce_decimal(record.usd_amount),
                    predicted_rate=coerce_decimal(record.predicted_rate),
                )
            )
            continue
        if record.date[:7] > period:
            break
        _sell(record, ledgers, gains, realise=is_date_in_period(record.date, period))
    return gains


def _sell(
    log: ExchangeLog,
    ledgers: dict[str, list[_CommissionChunk]],
    gains: dict[str, Decimal],
    *,
    realise: bool,
) -> None:
    ledger = ledgers.get(log.selling_asset_id, [])
    rate = coerce_decimal(log.rate)
    remaining = coerce_decimal(log.usd_amount)
    while remaining > USD_EPSILON and ledger:
        chunk = ledger[0]
        portion = min(remaining, chunk.amount)
        if realise:
            gain = portion * (rate - chunk.predicted_rate)
            gains[chunk.project_id] = gains.get(chunk.project_id, _ZERO) + gain
        chunk.amount -= portion
        remaining -= portion
        if chunk.amount <= USD_EPSILON:
            ledger.pop(0)


def aggregate_pnl(
    snapshot: LedgerSnapshot,
    period: str,
    ad_costs: AdCostingResult | None = None,
    fallback_rate: Decimal = DEFAULT_FALLBACK_USD_RATE,
    *,
    logger: Logger | None = None,
) -> PnlSummary:
    """Aggregate revenue, cost and input VAT for a period and split by partner.

    Args:
        snapshot: Ledger snapshot.
        period: Reporting period (YYYY-MM).
        ad_costs: FIFO valuation of daily ad costs; computed from the
            snapshot when omitted.
        fallback_rate: VND per USD for ad spend without deposit history.
        logger: Optional logger used for warnings.

    Returns:
        PnlSummary: Totals, owner figures and per-partner figures.
    """
    validate_period(period)
    if ad_costs is None:
        ad_costs = value_ad_costs(snapshot, fallback_rate, logger=logger)
    period_costs = select_in_period(snapshot.daily_ad_costs, period)
    period_cost_ids = {cost.id for cost in period_costs}
    warnings = [
        warning
        for warning in ad_costs.warnings
        if warning.record_id in period_cost_ids
    ]
    owner = resolve_owner(snapshot.partners, warnings, logger)
    partners = [partner for partner in snapshot.partners if partner.id != owner.id]
    known_partner_ids = {partner.id for partner in snapshot.partners}
    projects = snapshot.project_by_id()

    by_project: dict[str, _Figures] = {}
    project_order: list[str] = []

    def project_figures(project_id: str) -> _Figures:
        if project_id not in by_project:
            project_order.append(project_id)
            by_project[project_id] = _Figures()
        return by_project[project_id]

    revenue_details = _Breakdown()
    ad_cost_details = _Breakdown()
    misc_cost_details = _Breakdown()

    def project_name(project_id: str | None) -> str:
        project = projects.get(project_id) if project_id else None
        return project.name if project else UNKNOWN_PROJECT_NAME

    for commission in select_in_period(snapshot.commissions, period):
        amount = coerce_decimal(commission.vnd_amount)
        project_figures(commission.project_id).add(revenue=amount)
        revenue_details.add(project_name(commission.project_id), amount)

    total_ad_cost = _ZERO
    for cost in period_costs:
        vnd_cost = ad_costs.vnd_cost(cost.id)
        total_ad_cost += vnd_cost
        project_figures(cost.project_id).add(
            cost=vnd_cost,
            input_vat=_input_vat(vnd_cost, cost.vat_rate),
        )
        ad_cost_details.add(project_name(cost.project_id), vnd_cost)

    gains = realised_exchange_gains(snapshot, period)
    exchange_gain_loss = sum(gains.values(), _ZERO)
    for project_id, gain in gains.items():
        project_figures(project_id).add(revenue=gain)
        revenue_details.add(project_name(project_id), gain)

    partner_figures: dict[str, _Figures] = {owner.id: _Figures()}
    for partner in partners:
        partner_figures[partner.id] = _Figures()

    def distribute(figures: _Figures, shares: dict[str, Decimal]) -> None:
        revenue = apportion(figures.revenue, shares)
        cost = apportion(figures.cost, shares)
        input_vat = apportion(figures.input_vat, shares)
        for partner_id in shares:
            partner_figures[partner_id].add(
                revenue=revenue[partner_id],
                cost=cost[partner_id],
                input_vat=input_vat[partner_id],
            )

    total_misc_cost = _ZERO
    for expense in select_in_period(snapshot.miscellaneous_expenses, period):
        amount = coerce_decimal(expense.vnd_amount)
        total_misc_cost += amount
        misc_cost_details.add(expense.description, amount)
        vat = _input_vat(amount, expense.vat_rate)
        if expense.project_id:
            project_figures(expense.project_id).add(cost=amount, input_vat=vat)
            continue
        shares = effective_shares(
            None,
            expense,
            owner_id=owner.id,
            known_partner_ids=known_partner_ids,
            warnings=warnings,
            record_id=expense.id,
            logger=logger,
        )
        distribute(_Figures(cost=amount, input_vat=vat), shares)

    for project_id in project_order:
        project = projects.get(project_id)
        if project is None:
            emit_warning(
                warnings,
                UNKNOWN_PROJECT,
                f"Records reference unknown project {project_id}; "
                "attributing to the owner",
                record_id=project_id,
                logger=logger,
            )
        shares = effective_shares(
            project,
            None,
            owner_id=owner.id,
            known_partner_ids=known_partner_ids,
            warnings=warnings,
            record_id=project_id,
            logger=logger,
        )
        distribute(by_project[project_id], shares)

    partner_pnl = tuple(
        PartnerPnl(
            partner_id=partner.id,
            name=partner.name,
            revenue=partner_figures[partner.id].revenue,
            cost=partner_figures[partner.id].cost,
            profit=partner_figures[partner.id].revenue
            - partner_figures[partner.id].cost,
            input_vat=partner_figures[partner.id].input_vat,
        )
        for partner in [owner, *partners]
    )
    total_revenue = sum((item.revenue for item in partner_pnl), _ZERO)
    total_cost = sum((item.cost for item in partner_pnl), _ZERO)
    total_input_vat = sum((item.input_vat for item in partner_pnl), _ZERO)
    mine = partner_figures[owner.id]

    return PnlSummary(
        period=period,
        total_revenue=total_revenue,
        total_ad_cost=total_ad_cost,
        total_misc_cost=total_misc_cost,
        total_cost=total_cost,
        total_profit=total_revenue - total_cost,
        total_input_vat=total_input_vat,
        my_revenue=mine.revenue,
        my_cost=mine.cost,
        my_profit=mine.revenue - mine.cost,
        my_input_vat=mine.input_vat,
        exchange_rate_gain_loss=exchange_gain_loss,
        partner_pnl=partner_pnl,
        revenue_details=revenue_details.lines(),
        ad_cost_details=ad_cost_details.lines(),
        misc_cost_details=misc_cost_details.lines(),
        warnings=tuple(warnings),
    )


__all__ = ["aggregate_pnl", "realised_exchange_gains"]
