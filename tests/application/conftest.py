"""Shared ledger fixtures for use case tests."""

from datetime import datetime
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from affiliate_ledger.domain.models import (
    AdDeposit,
    Asset,
    ClosedPeriod,
    Commission,
    DailyAdCost,
    LedgerSnapshot,
    Partner,
    PeriodState,
    Project,
    default_tax_settings,
)


@pytest.fixture
def snapshot() -> LedgerSnapshot:
    """One solo project: 350 USD earned, 50.75 USD of ad spend in May."""
    return LedgerSnapshot(
        projects=(Project(id="p1", name="Alpha", period="2024-05"),),
        partners=(
            Partner(id="me", name="Me", is_self=True),
            Partner(id="lan", name="Lan"),
        ),
        assets=(Asset(id="bank", name="Bank", currency="VND"),),
        commissions=(
            Commission(
                id="c1",
                project_id="p1",
                date="2024-05-10",
                asset_id="bank",
                usd_amount=Decimal("350"),
                predicted_rate=Decimal("25400"),
                vnd_amount=Decimal("8890000"),
            ),
        ),
        ad_deposits=(
            AdDeposit(
                id="d1",
                date="2024-05-01",
                ads_platform="facebook",
                ad_account_number="acc-1",
                asset_id="bank",
                usd_amount=Decimal("100"),
                rate=Decimal("25500"),
                vnd_amount=Decimal("2550000"),
            ),
        ),
        daily_ad_costs=(
            DailyAdCost(
                id="k1",
                project_id="p1",
                ad_account_number="acc-1",
                date="2024-05-11",
                amount=Decimal("50.75"),
            ),
        ),
    )


@pytest.fixture
def closed_april_state() -> PeriodState:
    return PeriodState(
        active_period="2024-05",
        closed_periods=(
            ClosedPeriod(
                period="2024-04", closed_at=datetime(2024, 5, 2, 9, 0)
            ),
        ),
    )


@pytest.fixture
def ledger_repository(snapshot):
    repository = MagicMock()
    repository.fetch_snapshot.return_value = snapshot
    return repository


@pytest.fixture
def tax_settings_repository():
    repository = MagicMock()
    repository.load_settings.return_value = default_tax_settings()
    return repository


@pytest.fixture
def make_period_repository():
    """Return a factory building a period repository mock for a state."""

    def _make(state: PeriodState):
        repository = MagicMock()
        repository.load_state.return_value = state
        return repository

    return _make
