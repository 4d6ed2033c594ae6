"""Tests for the read-only ledger query use cases."""

from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from affiliate_ledger.application.use_cases.get_debt_positions import (
    GetDebtPositionsUseCase,
)
from affiliate_ledger.application.use_cases.get_partner_ledgers import (
    GetPartnerLedgersUseCase,
)
from affiliate_ledger.application.use_cases.get_period_asset_details import (
    GetPeriodAssetDetailsUseCase,
)
from affiliate_ledger.application.use_cases.get_period_financials import (
    compute_period_financials,
)
from affiliate_ledger.domain.exceptions import PeriodStateError
from affiliate_ledger.domain.models import (
    ClosedPeriod,
    Liability,
    PeriodState,
    default_tax_settings,
)


def test_partner_ledgers_include_closed_period_profit(
    snapshot, ledger_repository, make_period_repository
) -> None:
    financials = compute_period_financials(
        snapshot, "2024-05", default_tax_settings()
    )
    state = PeriodState(
        closed_periods=(
            ClosedPeriod(
                period="2024-05",
                closed_at=datetime(2024, 6, 3),
                financials=financials,
            ),
        ),
    )
    use_case = GetPartnerLedgersUseCase(
        ledger_repository,
        make_period_repository(state),
        logger=MagicMock(),
    )

    report = use_case.execute()

    owner, lan = report.ledgers
    assert owner.partner_id == "me"
    assert owner.balance == Decimal("7595875")
    assert owner.entries[0].entry.id == "auto-profit-2024-05-me"
    assert owner.entries[0].entry.date == "2024-05-31"
    assert lan.entries == ()


def test_asset_details_need_a_current_period(
    ledger_repository, make_period_repository
) -> None:
    use_case = GetPeriodAssetDetailsUseCase(
        ledger_repository,
        make_period_repository(PeriodState()),
        logger=MagicMock(),
    )

    with pytest.raises(PeriodStateError):
        use_case.execute()

    details = use_case.execute("2024-05")
    (bank,) = details
    assert bank.id == "bank"
    assert bank.closing_balance == bank.opening_balance + bank.change


def test_debt_positions_follow_as_of_date(snapshot, ledger_repository) -> None:
    ledger_repository.fetch_snapshot.return_value = replace(
        snapshot,
        liabilities=(
            Liability(
                id="l1",
                description="Card",
                total_amount=Decimal("2000000"),
                currency="VND",
                creation_date="2024-05-20",
            ),
        ),
    )
    use_case = GetDebtPositionsUseCase(ledger_repository, logger=MagicMock())

    assert use_case.execute(as_of="2024-05-01") == ()
    (position,) = use_case.execute()
    assert position.remaining_amount == Decimal("2000000")
    assert not position.is_settled
