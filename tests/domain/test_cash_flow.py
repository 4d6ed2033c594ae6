"""Tests for the cash flow builder and asset balances."""

from decimal import Decimal

from affiliate_ledger.domain.models import (
    AdDeposit,
    AdFundTransfer,
    Asset,
    CapitalInflow,
    Commission,
    ExchangeLog,
    LedgerSnapshot,
    Liability,
    MiscellaneousExpense,
    TaxPayment,
    Withdrawal,
)
from affiliate_ledger.domain.models.warnings import (
    CURRENCY_MISMATCH,
    UNKNOWN_ASSET,
)
from affiliate_ledger.domain.services.cash_flow import (
    build_cash_flow,
    build_period_asset_details,
    compute_asset_balances,
)

BANK = Asset(id="bank", name="Bank", currency="VND", balance=Decimal("10000000"))
WALLET = Asset(id="wallet", name="Payoneer", currency="USD")


def _expense(expense_id, date, vnd, asset="bank"):
    return MiscellaneousExpense(
        id=expense_id,
        date=date,
        description="Office",
        asset_id=asset,
        amount=Decimal(vnd),
        vnd_amount=Decimal(vnd),
    )


def _snapshot(*extra_expenses) -> LedgerSnapshot:
    return LedgerSnapshot(
        assets=(BANK, WALLET),
        capital_inflows=(
            CapitalInflow(
                id="cap1",
                date="2024-04-01",
                asset_id="bank",
                amount=Decimal("5000000"),
                contributed_by_partner_id="me",
            ),
        ),
        commissions=(
            Commission(
                id="c1",
                project_id="p1",
                date="2024-05-02",
                asset_id="wallet",
                usd_amount=Decimal("100"),
                predicted_rate=Decimal("25000"),
                vnd_amount=Decimal("2500000"),
            ),
        ),
        ad_deposits=(
            AdDeposit(
                id="d1",
                date="2024-05-03",
                ads_platform="facebook",
                ad_account_number="acc-1",
                asset_id="bank",
                usd_amount=Decimal("40"),
                rate=Decimal("25500"),
                vnd_amount=Decimal("1020000"),
            ),
        ),
        exchange_logs=(
            ExchangeLog(
                id="x1",
                date="2024-05-10",
                selling_asset_id="wallet",
                receiving_asset_id="bank",
                usd_amount=Decimal("100"),
                rate=Decimal("25500"),
                vnd_amount=Decimal("2550000"),
            ),
        ),
        miscellaneous_expenses=(
            _expense("e1", "2024-05-12", "300000"),
            *extra_expenses,
        ),
        withdrawals=(
            Withdrawal(
                id="w1",
                date="2024-05-15",
                asset_id="bank",
                amount=Decimal("1000000"),
                vnd_amount=Decimal("1000000"),
                withdrawn_by="me",
            ),
        ),
        tax_payments=(
            TaxPayment(
                id="tax1",
                period="2024-04",
                date="2024-05-20",
                amount=Decimal("133350"),
                asset_id="bank",
            ),
        ),
    )


def _lines(lines):
    return {line.label: line.amount for line in lines}


def test_cash_flow_sections_for_period():
    statement = build_cash_flow(_snapshot(), "2024-05")

    assert _lines(statement.operating.inflows) == {
        "Commission receipts": Decimal("2500000")
    }
    assert _lines(statement.operating.outflows) == {
        "Ad account top-ups": Decimal("1020000"),
        "Miscellaneous expenses": Decimal("300000"),
        "Tax payments": Decimal("133350"),
    }
    assert _lines(statement.investing.inflows) == {
        "Proceeds from USD sales": Decimal("2550000")
    }
    assert _lines(statement.investing.outflows) == {
        "USD sold": Decimal("2550000")
    }
    assert statement.investing.net == 0
    assert _lines(statement.financing.outflows) == {
        "Owner and partner withdrawals": Decimal("1000000")
    }
    assert statement.beginning_balance == Decimal("15000000")
    assert statement.end_balance == Decimal("15046650")
    assert statement.net_change == Decimal("46650")
    assert statement.warnings == ()


def test_end_balance_reconciles_with_asset_balances():
    snapshot = _snapshot(_expense("e2", "2024-06-01", "500000"))

    statement = build_cash_flow(snapshot, "2024-05")
    balances = compute_asset_balances(snapshot, as_of="2024-05-31")

    assert sum(b.vnd_balance for b in balances) == statement.end_balance
    by_id = {b.id: b for b in balances}
    assert by_id["bank"].balance == Decimal("15096650")
    assert by_id["wallet"].balance == 0


def test_asset_balances_reconcile_with_each_period_end():
    snapshot = _snapshot()

    for period, as_of in (("2024-04", "2024-04-30"), ("2024-05", "2024-05-31")):
        statement = build_cash_flow(snapshot, period)
        balances = compute_asset_balances(snapshot, as_of=as_of)

        assert sum(b.vnd_balance for b in balances) == statement.end_balance
        assert statement.end_balance == (
            statement.beginning_balance + statement.net_change
        )


def test_asset_balances_skip_unsupported_opening_balance():
    euro = Asset(id="eur", name="Euro", currency="EUR", balance=Decimal("100"))
    snapshot = LedgerSnapshot(assets=(BANK, euro))

    balances = {b.id: b for b in compute_asset_balances(snapshot)}

    assert balances["bank"].vnd_balance == Decimal("10000000")
    assert balances["eur"].balance == Decimal("100")
    assert balances["eur"].vnd_balance == 0


def test_consecutive_periods_are_continuous():
    snapshot = _snapshot()

    april = build_cash_flow(snapshot, "2024-04")
    may = build_cash_flow(snapshot, "2024-05")
    may_from_close = build_cash_flow(snapshot, "2024-05", april.end_balance)

    assert april.end_balance == Decimal("15000000")
    assert _lines(april.financing.inflows) == {
        "Capital contributions": Decimal("5000000")
    }
    assert may.beginning_balance == april.end_balance
    assert may_from_close.end_balance == may.end_balance


def test_prior_end_balance_overrides_rebuilt_beginning():
    statement = build_cash_flow(_snapshot(), "2024-05", Decimal("1000"))

    assert statement.beginning_balance == Decimal("1000")
    assert statement.end_balance == Decimal("47650")


def test_unknown_asset_is_excluded_with_warning():
    snapshot = _snapshot(_expense("e9", "2024-05-13", "700000", "ghost"))

    statement = build_cash_flow(snapshot, "2024-05")

    assert statement.end_balance == Decimal("15046650")
    assert [(w.code, w.record_id) for w in statement.warnings] == [
        (UNKNOWN_ASSET, "e9")
    ]


def test_borrowing_in_other_currency_warns():
    snapshot = LedgerSnapshot(
        assets=(BANK,),
        liabilities=(
            Liability(
                id="l1",
                description="Loan",
                total_amount=Decimal("2000000"),
                currency="USD",
                creation_date="2024-05-01",
                inflow_asset_id="bank",
            ),
        ),
    )

    statement = build_cash_flow(snapshot, "2024-05")

    assert _lines(statement.financing.inflows) == {
        "Borrowings received": Decimal("2000000")
    }
    assert [w.code for w in statement.warnings] == [CURRENCY_MISMATCH]


def test_opening_balance_in_unsupported_currency_is_not_valued():
    euro = Asset(id="eur", name="Euro", currency="EUR", balance=Decimal("100"))
    snapshot = LedgerSnapshot(assets=(BANK, euro))

    statement = build_cash_flow(snapshot, "2024-05")

    assert statement.beginning_balance == Decimal("10000000")
    assert [(w.code, w.record_id) for w in statement.warnings] == [
        (CURRENCY_MISMATCH, "eur")
    ]


def test_ad_fund_transfers_appear_as_equal_investing_lines():
    snapshot = LedgerSnapshot(
        assets=(BANK,),
        ad_deposits=(
            AdDeposit(
                id="d1",
                date="2024-05-01",
                ads_platform="facebook",
                ad_account_number="acc-1",
                asset_id="bank",
                usd_amount=Decimal("100"),
                rate=Decimal("25000"),
                vnd_amount=Decimal("2500000"),
            ),
        ),
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
    )

    statement = build_cash_flow(snapshot, "2024-05")

    assert _lines(statement.investing.inflows) == {
        "Ad fund transfers in": Decimal("1000000")
    }
    assert _lines(statement.investing.outflows) == {
        "Ad fund transfers out": Decimal("1000000")
    }
    assert statement.end_balance == Decimal("7500000")


def test_period_asset_details_ignore_later_activity():
    snapshot = _snapshot(_expense("e2", "2024-06-01", "500000"))

    details = {d.id: d for d in build_period_asset_details(snapshot, "2024-05")}

    bank = details["bank"]
    assert bank.opening_balance == Decimal("15000000")
    assert bank.change == Decimal("96650")
    assert bank.closing_balance == Decimal("15096650")
    wallet = details["wallet"]
    assert wallet.change == 0
    assert wallet.currency == "USD"
