"""Tests for the GetPeriodFinancialsUseCase."""

from dataclasses import replace
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from affiliate_ledger.application.use_cases.get_period_financials import (
    GetPeriodFinancialsUseCase,
    compute_period_financials,
    prior_end_balance,
)
from affiliate_ledger.domain.exceptions import PeriodStateError
from affiliate_ledger.domain.models import (
    ClosedPeriod,
    PeriodState,
    default_tax_settings,
)


def _use_case(ledger_repository, period_repository, tax_settings_repository):
    return GetPeriodFinancialsUseCase(
        ledger_repository=ledger_repository,
        period_repository=period_repository,
        tax_settings_repository=tax_settings_repository,
        logger=MagicMock(),
    )


def test_execute_combines_pnl_tax_and_cash_flow(
    ledger_repository, tax_settings_repository, make_period_repository
) -> None:
    """Use case should compute the open period when none is given."""
    period_repository = make_period_repository(
        PeriodState(active_period="2024-05")
    )
    use_case = _use_case(
        ledger_repository, period_repository, tax_settings_repository
    )

    financials = use_case.execute()

    assert financials.period == "2024-05"
    assert financials.total_revenue == Decimal("8890000")
    assert financials.total_ad_cost == Decimal("1294125")
    assert financials.profit_before_tax == Decimal("7595875")
    assert financials.tax.tax_payable == Decimal("133350")
    assert financials.net_profit == Decimal("7462525")
    assert (
        financials.net_profit
        == financials.profit_before_tax - financials.tax.tax_payable
    )
    cash_flow = financials.cash_flow
    assert cash_flow.end_balance == (
        cash_flow.beginning_balance + cash_flow.net_change
    )
    assert sum(p.profit for p in financials.partner_pnl_details) == (
        financials.total_profit
    )
    ledger_repository.fetch_snapshot.assert_called_once_with()
    tax_settings_repository.load_settings.assert_called_once_with()


def test_execute_is_idempotent_for_unchanged_inputs(
    ledger_repository, tax_settings_repository, make_period_repository
) -> None:
    period_repository = make_period_repository(
        PeriodState(active_period="2024-05")
    )
    use_case = _use_case(
        ledger_repository, period_repository, tax_settings_repository
    )

    assert use_case.execute("2024-05") == use_case.execute("2024-05")


def test_execute_prefers_viewing_period(
    ledger_repository, tax_settings_repository, make_period_repository
) -> None:
    period_repository = make_period_repository(
        PeriodState(
            active_period="2024-06",
            viewing_period="2024-05",
            closed_periods=(),
        )
    )
    use_case = _use_case(
        ledger_repository, period_repository, tax_settings_repository
    )

    assert use_case.execute().period == "2024-05"


def test_execute_without_current_period_raises(
    ledger_repository, tax_settings_repository, make_period_repository
) -> None:
    use_case = _use_case(
        ledger_repository,
        make_period_repository(PeriodState()),
        tax_settings_repository,
    )

    with pytest.raises(PeriodStateError):
        use_case.execute()
    ledger_repository.fetch_snapshot.assert_not_called()


def test_beginning_balance_comes_from_previous_closed_snapshot(
    snapshot,
) -> None:
    """The previous period's end balance carries over when it was closed."""
    settings = default_tax_settings()
    april = compute_period_financials(snapshot, "2024-04", settings)
    april = replace(
        april,
        cash_flow=replace(april.cash_flow, end_balance=Decimal("1000")),
    )
    state = PeriodState(
        active_period="2024-05",
        closed_periods=(
            ClosedPeriod(period="2024-04", closed_at=None, financials=april),
        ),
    )

    may = compute_period_financials(snapshot, "2024-05", settings, state=state)

    assert prior_end_balance(state, "2024-05") == Decimal("1000")
    assert may.cash_flow.beginning_balance == Decimal("1000")
    assert may.cash_flow.end_balance == Decimal("1000") + (
        may.cash_flow.net_change
    )


def test_prior_end_balance_is_none_without_closed_snapshot(
    closed_april_state,
) -> None:
    assert prior_end_balance(closed_april_state, "2024-05") is None
    assert prior_end_balance(PeriodState(), "2024-05") is None


def test_execute_returns_stored_snapshot_of_closed_period(
    snapshot,
    ledger_repository,
    tax_settings_repository,
    make_period_repository,
) -> None:
    """Closed periods keep the figures computed when they were closed."""
    settings = default_tax_settings()
    stored = compute_period_financials(snapshot, "2024-05", settings)
    tax_settings_repository.load_settings.return_value = replace(
        settings, revenue_rate=Decimal("10")
    )
    period_repository = make_period_repository(
        PeriodState(
            active_period="2024-06",
            viewing_period="2024-05",
            closed_periods=(
                ClosedPeriod(
                    period="2024-05", closed_at=None, financials=stored
                ),
            ),
        )
    )
    use_case = _use_case(
        ledger_repository, period_repository, tax_settings_repository
    )

    financials = use_case.execute()

    assert financials is stored
    assert financials.tax.tax_payable == Decimal("133350")
    assert use_case.execute("2024-05") is stored
    ledger_repository.fetch_snapshot.assert_not_called()
    tax_settings_repository.load_settings.assert_not_called()


def test_execute_recomputes_closed_period_without_snapshot(
    ledger_repository, tax_settings_repository, make_period_repository
) -> None:
    period_repository = make_period_repository(
        PeriodState(
            active_period="2024-06",
            closed_periods=(
                ClosedPeriod(period="2024-05", closed_at=None),
            ),
        )
    )
    use_case = _use_case(
        ledger_repository, period_repository, tax_settings_repository
    )

    financials = use_case.execute("2024-05")

    assert financials.total_revenue == Decimal("8890000")
    ledger_repository.fetch_snapshot.assert_called_once_with()
