"""Domain service building the statement of cash flows and asset balances."""

from dataclasses import dataclass
from decimal import Decimal
from logging import Logger

from affiliate_ledger.domain.constants import (
    CURRENCY_USD,
    CURRENCY_VND,
    DEFAULT_FALLBACK_USD_RATE,
)
from affiliate_ledger.domain.exceptions import CurrencyConversionError
from affiliate_ledger.domain.models import (
    AdCostingResult,
    Asset,
    AssetBalance,
    CashFlowLine,
    CashFlowSection,
    CashFlowStatement,
    LedgerSnapshot,
    PeriodAssetDetail,
)
from affiliate_ledger.domain.models.warnings import (
    CURRENCY_MISMATCH,
    UNKNOWN_ASSET,
)
from affiliate_ledger.domain.services.ad_costing import value_ad_costs
from affiliate_ledger.domain.services.diagnostics import emit_warning
from affiliate_ledger.domain.services.fx import resolve_rate, to_vnd
from affiliate_ledger.domain.services.periods import validate_period
from affiliate_ledger.utils.decimal_utils import coerce_decimal

OPERATING = "operating"
INVESTING = "investing"
FINANCING = "financing"

LABEL_COMMISSIONS = "Commission receipts"
LABEL_AD_TOP_UPS = "Ad account top-ups"
LABEL_MISC_EXPENSES = "Miscellaneous expenses"
LABEL_TAX_PAYMENTS = "Tax payments"
LABEL_USD_SOLD = "USD sold"
LABEL_USD_SALE_PROCEEDS = "Proceeds from USD sales"
LABEL_AD_TRANSFERS_IN = "Ad fund transfers in"
LABEL_AD_TRANSFERS_OUT = "Ad fund transfers out"
LABEL_CAPITAL = "Capital contributions"
LABEL_BORROWINGS = "Borrowings received"
LABEL_WITHDRAWALS = "Owner and partner withdrawals"
LABEL_DEBT_PAYMENTS = "Debt principal repayments"
LABEL_COLLECTIONS = "Receivable collections"
LABEL_LOANS_GRANTED = "Loans granted"

_ZERO = Decimal("0")


@dataclass(frozen=True)
class CashMovement:
    """One asset leg of a cash-moving record.

    Attributes:
        asset_id: Asset moved, or None for ad-account transfers that never
            touch a cash asset.
        date: ISO date of the movement.
        amount: Signed amount in the asset's currency.
        vnd_amount: Signed VND value.
        bucket: Cash flow activity.
        label: Line label inside the activity.
        record_id: Source record identifier.
    """

    asset_id: str | None
    date: str
    amount: Decimal
    vnd_amount: Decimal
    bucket: str
    label: str
    record_id: str


class _Collector:
    """Turn records into movements, skipping legs on unknown assets."""

    def __init__(
        self,
        assets: dict[str, Asset],
        fallback_rate: Decimal,
        through_period: str | None,
        logger: Logger | None,
    ) -> None:
        self.assets = assets
        self.fallback_rate = fallback_rate
        self.through_period = through_period
        self.logger = logger
        self.movements: list[CashMovement] = []
        self.warnings: list = []

    def in_scope(self, date: str | None) -> bool:
        if not date:
            return False
        return self.through_period is None or date[:7] <= self.through_period

    def leg(
        self,
        record_id: str,
        asset_id: str | None,
        date: str,
        bucket: str,
        label: str,
        *,
        sign: int,
        usd_amount=None,
        vnd_amount=None,
        amount=None,
        rate=None,
        currency: str | None = None,
    ) -> None:
        """Record one leg, valued in the asset's own currency and in VND.

        ``amount`` is the record amount in the asset's currency. When the
        record carries separate USD and VND figures they are given as
        ``usd_amount`` and ``vnd_amount`` and picked by asset currency.
        """
        if not self.in_scope(date):
            return
        asset = self.assets.get(asset_id) if asset_id else None
        if asset is None:
            emit_warning(
                self.warnings,
                UNKNOWN_ASSET,
                f"Record {record_id} references unknown asset {asset_id}; "
                "excluded from cash flow",
                record_id=record_id,
                logger=self.logger,
            )
            return
        if currency and currency != asset.currency:
            emit_warning(
                self.warnings,
                CURRENCY_MISMATCH,
                f"Record {record_id} is in {currency} but asset {asset.id} "
                f"holds {asset.currency}",
                record_id=record_id,
                logger=self.logger,
            )
        if amount is None:
            amount = usd_amount if asset.currency == CURRENCY_USD else vnd_amount
        native = coerce_decimal(amount)
        own_vnd = coerce_decimal(vnd_amount)
        if asset.currency != CURRENCY_VND and own_vnd > 0:
            vnd = own_vnd
        else:
            try:
                vnd = to_vnd(
                    native,
                    asset.currency,
                    resolve_rate(rate, self.fallback_rate),
                )
            except CurrencyConversionError as exc:
                emit_warning(
                    self.warnings,
                    CURRENCY_MISMATCH,
                    f"Record {record_id} excluded from cash flow: {exc}",
                    record_id=record_id,
                    logger=self.logger,
                )
                return
        if native == 0 and vnd == 0:
            return
        self.movements.append(
            CashMovement(
                asset_id=asset.id,
                date=date,
                amount=sign * native,
                vnd_amount=sign * vnd,
                bucket=bucket,
                label=label,
                record_id=record_id,
            )
        )

    def off_balance(
        self,
        record_id: str,
        date: str,
        bucket: str,
        label: str,
        vnd_amount: Decimal,
        sign: int,
    ) -> None:
        if not self.in_scope(date) or vnd_amount == 0:
            return
        self.movements.append(
            CashMovement(
                asset_id=None,
                date=date,
                amount=_ZERO,
                vnd_amount=sign * vnd_amount,
                bucket=bucket,
                label=label,
                record_id=record_id,
            )
        )


def _by_date(records, date_field: str = "date"):
    return sorted(
        records, key=lambda item: (getattr(item, date_field) or "", item.id)
    )


def collect_cash_movements(
    snapshot: LedgerSnapshot,
    *,
    fallback_rate: Decimal = DEFAULT_FALLBACK_USD_RATE,
    through_period: str | None = None,
    ad_costs: AdCostingResult | None = None,
    logger: Logger | None = None,
) -> tuple[list[CashMovement], list]:
    """Expand every cash-moving record into signed asset movements.

    Args:
        snapshot: Ledger snapshot.
        fallback_rate: VND per USD for USD legs without their own figure.
        through_period: Ignore records dated after this period.
        ad_costs: FIFO valuation supplying ad fund transfer values.
        logger: Optional logger used for warnings.

    Returns:
        tuple[list[CashMovement], list]: Movements and warnings.
    """
    fallback = coerce_decimal(fallback_rate)
    if ad_costs is None:
        ad_costs = value_ad_costs(snapshot, fallback)
    collector = _Collector(
        snapshot.asset_by_id(), fallback, through_period, logger
    )

    for commission in _by_date(snapshot.commissions):
        collector.leg(
            commission.id,
            commission.asset_id,
            commission.date,
            OPERATING,
            LABEL_COMMISSIONS,
            sign=1,
            usd_amount=commission.usd_amount,
            vnd_amount=commission.vnd_amount,
            rate=commission.predicted_rate,
        )
    for deposit in _by_date(snapshot.ad_deposits):
        collector.leg(
            deposit.id,
            deposit.asset_id,
            deposit.date,
            OPERATING,
            LABEL_AD_TOP_UPS,
            sign=-1,
            usd_amount=deposit.usd_amount,
            vnd_amount=deposit.vnd_amount,
            rate=deposit.rate,
        )
    for expense in _by_date(snapshot.miscellaneous_expenses):
        collector.leg(
            expense.id,
            expense.asset_id,
            expense.date,
            OPERATING,
            LABEL_MISC_EXPENSES,
            sign=-1,
            amount=expense.amount,
            vnd_amount=expense.vnd_amount,
        )
    for payment in _by_date(snapshot.tax_payments):
        collector.leg(
            payment.id,
            payment.asset_id,
            payment.date,
            OPERATING,
            LABEL_TAX_PAYMENTS,
            sign=-1,
            amount=payment.amount,
        )

    for log in _by_date(snapshot.exchange_logs):
        collector.leg(
            log.id,
            log.selling_asset_id,
            log.date,
            INVESTING,
            LABEL_USD_SOLD,
            sign=-1,
            usd_amount=log.usd_amount,
            vnd_amount=log.vnd_amount,
            rate=log.rate,
        )
        collector.leg(
            log.id,
            log.receiving_asset_id,
            log.date,
            INVESTING,
            LABEL_USD_SALE_PROCEEDS,
            sign=1,
            usd_amount=log.usd_amount,
            vnd_amount=log.vnd_amount,
            rate=log.rate,
        )
    for transfer in _by_date(snapshot.ad_fund_transfers):
        value = ad_costs.transfers.get(transfer.id, _ZERO)
        collector.off_balance(
            transfer.id, transfer.date, INVESTING, LABEL_AD_TRANSFERS_IN, value, 1
        )
        collector.off_balance(
            transfer.id, transfer.date, INVESTING, LABEL_AD_TRANSFERS_OUT, value, -1
        )

    for inflow in _by_date(snapshot.capital_inflows):
        collector.leg(
            inflow.id,
            inflow.asset_id,
            inflow.date,
            FINANCING,
            LABEL_CAPITAL,
            sign=1,
            amount=inflow.amount,
        )
    for liability in _by_date(snapshot.liabilities, "creation_date"):
        if not liability.inflow_asset_id:
            continue
        collector.leg(
            liability.id,
            liability.inflow_asset_id,
            liability.creation_date,
            FINANCING,
            LABEL_BORROWINGS,
            sign=1,
            amount=liability.total_amount,
            currency=liability.currency,
        )
    for withdrawal in _by_date(snapshot.withdrawals):
        collector.leg(
            withdrawal.id,
            withdrawal.asset_id,
            withdrawal.date,
            FINANCING,
            LABEL_WITHDRAWALS,
            sign=-1,
            amount=withdrawal.amount,
            vnd_amount=withdrawal.vnd_amount,
        )
    for payment in _by_date(snapshot.debt_payments):
        collector.leg(
            payment.id,
            payment.asset_id,
            payment.date,
            FINANCING,
            LABEL_DEBT_PAYMENTS,
            sign=-1,
            amount=payment.amount,
        )
    for payment in _by_date(snapshot.receivable_payments):
        collector.leg(
            payment.id,
            payment.asset_id,
            payment.date,
            FINANCING,
            LABEL_COLLECTIONS,
            sign=1,
            amount=payment.amount,
        )
    for receivable in _by_date(snapshot.receivables, "creation_date"):
        if not receivable.outflow_asset_id:
            continue
        collector.leg(
            receivable.id,
            receivable.outflow_asset_id,
            receivable.creation_date,
            FINANCING,
            LABEL_LOANS_GRANTED,
            sign=-1,
            amount=receivable.total_amount,
            currency=receivable.currency,
        )
    return collector.movements, collector.warnings


def _initial_vnd(
    asset: Asset, fallback: Decimal, warnings: list, logger
) -> Decimal:
    try:
        return to_vnd(asset.balance, asset.currency, fallback)
    except CurrencyConversionError as exc:
        emit_warning(
            warnings,
            CURRENCY_MISMATCH,
            f"Opening balance of asset {asset.id} not valued: {exc}",
            record_id=asset.id,
            logger=logger,
        )
        return _ZERO


def _section(movements: list[CashMovement]) -> CashFlowSection:
    inflows: dict[str, Decimal] = {}
    outflows: dict[str, Decimal] = {}
    for movement in movements:
        if movement.vnd_amount > 0:
            inflows[movement.label] = (
                inflows.get(movement.label, _ZERO) + movement.vnd_amount
            )
        elif movement.vnd_amount < 0:
            outflows[movement.label] = (
                outflows.get(movement.label, _ZERO) - movement.vnd_amount
            )
    return CashFlowSection(
        inflows=tuple(
            CashFlowLine(label=label, amount=amount)
            for label, amount in inflows.items()
        ),
        outflows=tuple(
            CashFlowLine(label=label, amount=amount)
            for label, amount in outflows.items()
        ),
    )


def build_cash_flow(
    snapshot: LedgerSnapshot,
    period: str,
    prior_end_balance: Decimal | None = None,
    *,
    fallback_rate: Decimal = DEFAULT_FALLBACK_USD_RATE,
    ad_costs: AdCostingResult | None = None,
    logger: Logger | None = None,
) -> CashFlowStatement:
    """Build the statement of cash flows for a period, in VND.

    Args:
        snapshot: Ledger snapshot.
        period: Reporting period (YYYY-MM).
        prior_end_balance: End balance of the previous closed period; when
            omitted the beginning balance is rebuilt from initial asset
            balances and earlier movements.
        fallback_rate: VND per USD for USD legs without their own figure.
        ad_costs: FIFO valuation supplying ad fund transfer values.
        logger: Optional logger used for warnings.

    Returns:
        CashFlowStatement: Operating, investing and financing sections with
        beginning and end balances.
    """
    validate_period(period)
    fallback = coerce_decimal(fallback_rate)
    movements, warnings = collect_cash_movements(
        snapshot,
        fallback_rate=fallback,
        through_period=period,
        ad_costs=ad_costs,
        logger=logger,
    )
    in_period = [m for m in movements if m.date[:7] == period]

    if prior_end_balance is None:
        beginning = sum(
            (
                _initial_vnd(asset, fallback, warnings, logger)
                for asset in snapshot.assets
            ),
            _ZERO,
        )
        beginning += sum(
            (m.vnd_amount for m in movements if m.date[:7] < period), _ZERO
        )
    else:
        beginning = coerce_decimal(prior_end_balance)

    operating = _section([m for m in in_period if m.bucket == OPERATING])
    investing = _section([m for m in in_period if m.bucket == INVESTING])
    financing = _section([m for m in in_period if m.bucket == FINANCING])
    net_change = operating.net + investing.net + financing.net
    return CashFlowStatement(
        period=period,
        operating=operating,
        investing=investing,
        financing=financing,
        beginning_balance=beginning,
        end_balance=beginning + net_change,
        warnings=tuple(warnings),
    )


def build_period_asset_details(
    snapshot: LedgerSnapshot,
    period: str,
    *,
    fallback_rate: Decimal = DEFAULT_FALLBACK_USD_RATE,
    logger: Logger | None = None,
) -> tuple[PeriodAssetDetail, ...]:
    """Return opening balance, change and closing balance per asset.

    Balances are in each asset's own currency and computed as of the end
    of ``period``, so later activity does not leak into past periods.
    """
    validate_period(period)
    movements, warnings = collect_cash_movements(
        snapshot,
        fallback_rate=fallback_rate,
        through_period=period,
        logger=logger,
    )
    details = []
    for asset in snapshot.assets:
        opening = coerce_decimal(asset.balance)
        change = _ZERO
        for movement in movements:
            if movement.asset_id != asset.id:
                continue
            if movement.date[:7] < period:
                opening += movement.amount
            else:
                change += movement.amount
        details.append(
            PeriodAssetDetail(
                id=asset.id,
                name=asset.name,
                currency=asset.currency,
                opening_balance=opening,
                change=change,
                closing_balance=opening + change,
            )
        )
    return tuple(details)


def compute_asset_balances(
    snapshot: LedgerSnapshot,
    as_of: str | None = None,
    *,
    fallback_rate: Decimal = DEFAULT_FALLBACK_USD_RATE,
    logger: Logger | None = None,
) -> tuple[AssetBalance, ...]:
    """Return each asset's balance including movements up to ``as_of``.

    Args:
        snapshot: Ledger snapshot.
        as_of: Inclusive ISO date bound; all movements when omitted.
        fallback_rate: VND per USD for initial USD balances and USD legs
            without their own figure.
        logger: Optional logger used for warnings.

    Returns:
        tuple[AssetBalance, ...]: Balance in asset currency and VND book value.
    """
    fallback = coerce_decimal(fallback_rate)
    movements, warnings = collect_cash_movements(
        snapshot, fallback_rate=fallback, logger=logger
    )
    balances = []
    for asset in snapshot.assets:
        balance = coerce_decimal(asset.balance)
        vnd_balance = _initial_vnd(asset, fallback, warnings, logger)
        for movement in movements:
            if movement.asset_id != asset.id:
                continue
            if as_of is not None and movement.date > as_of:
                continue
            balance += movement.amount
            vnd_balance += movement.vnd_amount
        balances.append(
            AssetBalance(
                id=asset.id,
                name=asset.name,
                currency=asset.currency,
                balance=balance,
                vnd_balance=vnd_balance,
            )
        )
    return tuple(balances)


__all__ = [
    "CashMovement",
    "collect_cash_movements",
    "build_cash_flow",
    "build_period_asset_details",
    "compute_asset_balances",
    "OPERATING",
    "INVESTING",
    "FINANCING",
]
