"""Tests for FIFO ad cost valuation."""

from decimal import Decimal

from affiliate_ledger.domain.models import (
    AdDeposit,
    AdFundTransfer,
    DailyAdCost,
    LedgerSnapshot,
)
from affiliate_ledger.domain.models.warnings import FALLBACK_RATE
from affiliate_ledger.domain.services.ad_costing import value_ad_costs

FALLBACK = Decimal("25000")


def _deposit(deposit_id, date, usd, rate, account="acc-1", platform="facebook"):
    usd = Decimal(usd)
    rate = Decimal(rate)
    return AdDeposit(
        id=deposit_id,
        date=date,
        ads_platform=platform,
        ad_account_number=account,
        asset_id="bank",
        usd_amount=usd,
        rate=rate,
        vnd_amount=usd * rate,
    )


def _cost(cost_id, date, usd, account="acc-1"):
    return DailyAdCost(
        id=cost_id,
        project_id="p1",
        ad_account_number=account,
        date=date,
        amount=Decimal(usd),
    )


def test_costs_consume_deposits_first_in_first_out():
    snapshot = LedgerSnapshot(
        ad_deposits=(
            _deposit("d1", "2024-05-01", "100", "25000"),
            _deposit("d2", "2024-05-03", "100", "26000"),
        ),
        daily_ad_costs=(_cost("k1", "2024-05-05", "150"),),
    )

    result = value_ad_costs(snapshot, FALLBACK)

    assert result.vnd_cost("k1") == Decimal("3800000")
    assert result.costs["k1"].effective_rate == Decimal("3800000") / 150
    assert result.warnings == ()


def test_costs_only_see_deposits_made_by_their_date():
    snapshot = LedgerSnapshot(
        ad_deposits=(
            _deposit("d1", "2024-05-01", "100", "25000"),
            _deposit("d2", "2024-05-03", "100", "26000"),
        ),
        daily_ad_costs=(
            _cost("k1", "2024-05-02", "50"),
            _cost("k2", "2024-05-05", "100"),
        ),
    )

    result = value_ad_costs(snapshot, FALLBACK)

    assert result.vnd_cost("k1") == Decimal("1250000")
    assert result.vnd_cost("k2") == Decimal("2550000")


def test_same_day_deposit_is_available_to_cost():
    snapshot = LedgerSnapshot(
        ad_deposits=(_deposit("d1", "2024-05-05", "100", "25500"),),
        daily_ad_costs=(_cost("k1", "2024-05-05", "50.75"),),
    )

    result = value_ad_costs(snapshot, FALLBACK)

    assert result.vnd_cost("k1") == Decimal("1294125")


def test_uncovered_spend_uses_last_deposit_rate_of_account():
    snapshot = LedgerSnapshot(
        ad_deposits=(
            _deposit("d1", "2024-05-01", "10", "25000"),
            _deposit("d2", "2024-05-03", "10", "26000"),
        ),
        daily_ad_costs=(_cost("k1", "2024-05-05", "25"),),
    )

    result = value_ad_costs(snapshot, FALLBACK)

    assert result.vnd_cost("k1") == Decimal("640000")
    assert result.warnings == ()


def test_uncovered_spend_ignores_rates_of_later_deposits():
    snapshot = LedgerSnapshot(
        ad_deposits=(
            _deposit("d1", "2024-05-01", "10", "25000"),
            _deposit("d2", "2024-05-10", "10", "26000"),
        ),
        daily_ad_costs=(_cost("k1", "2024-05-05", "15"),),
    )

    result = value_ad_costs(snapshot, FALLBACK)

    assert result.vnd_cost("k1") == Decimal("375000")
    assert result.warnings == ()


def test_cost_before_first_deposit_uses_fallback_rate():
    snapshot = LedgerSnapshot(
        ad_deposits=(_deposit("d1", "2024-05-10", "10", "26000"),),
        daily_ad_costs=(_cost("k1", "2024-05-05", "4"),),
    )

    result = value_ad_costs(snapshot, FALLBACK)

    assert result.vnd_cost("k1") == Decimal("100000")
    assert [w.code for w in result.warnings] == [FALLBACK_RATE]


def test_account_without_deposits_uses_fallback_rate_with_warning():
    logger = _Logger()
    snapshot = LedgerSnapshot(
        daily_ad_costs=(_cost("k1", "2024-05-05", "10", account="acc-9"),),
    )

    result = value_ad_costs(snapshot, FALLBACK, logger=logger)

    assert result.vnd_cost("k1") == Decimal("250000")
    assert [w.code for w in result.warnings] == [FALLBACK_RATE]
    assert result.warnings[0].record_id == "k1"
    assert logger.warnings


def test_transfer_moves_chunks_with_their_rate():
    snapshot = LedgerSnapshot(
        ad_deposits=(_deposit("d1", "2024-05-01", "100", "25000"),),
        ad_fund_transfers=(
            AdFundTransfer(
                id="t1",
                date="2024-05-02",
                ads_platform="facebook",
                from_ad_account_number="acc-1",
                to_ad_account_number="acc-2",
                amount=Decimal("40"),
            ),
        ),
        daily_ad_costs=(
            _cost("k1", "2024-05-03", "40", account="acc-2"),
            _cost("k2", "2024-05-03", "60", account="acc-1"),
        ),
    )

    result = value_ad_costs(snapshot, FALLBACK)

    assert result.transfers["t1"] == Decimal("1000000")
    assert result.vnd_cost("k1") == Decimal("1000000")
    assert result.vnd_cost("k2") == Decimal("1500000")
    assert result.warnings == ()


def test_accounts_are_kept_apart_by_platform():
    snapshot = LedgerSnapshot(
        ad_deposits=(
            _deposit("d1", "2024-05-01", "100", "25000", platform="facebook"),
            _deposit(
                "d2", "2024-05-01", "100", "27000",
                account="acc-2", platform="google",
            ),
        ),
        daily_ad_costs=(_cost("k1", "2024-05-02", "10", account="acc-2"),),
    )

    result = value_ad_costs(snapshot, FALLBACK)

    assert result.vnd_cost("k1") == Decimal("270000")


class _Logger:
    def __init__(self) -> None:
        self.warnings: list[str] = []

    def warning(self, msg: str) -> None:
        self.warnings.append(msg)
