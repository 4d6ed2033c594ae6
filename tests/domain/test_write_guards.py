"""Tests for ledger write policies."""

from datetime import datetime
from decimal import Decimal

import pytest

from affiliate_ledger.domain.exceptions import (
    ClosedPeriodError,
    InvalidPartnerSharesError,
    PartnerDeletionError,
)
from affiliate_ledger.domain.models import (
    ClosedPeriod,
    Partner,
    PartnerShare,
    PeriodState,
    Project,
)
from affiliate_ledger.domain.policies import (
    ensure_date_writable,
    ensure_partner_deletable,
    validate_partner_shares,
)


def _share(partner_id, pct):
    return PartnerShare(partner_id=partner_id, share_percentage=Decimal(pct))


def test_dates_in_closed_periods_are_read_only():
    state = PeriodState(
        active_period="2024-05",
        closed_periods=(
            ClosedPeriod(period="2024-04", closed_at=datetime(2024, 5, 2)),
        ),
    )

    with pytest.raises(ClosedPeriodError):
        ensure_date_writable(state, "2024-04-30")
    ensure_date_writable(state, "2024-05-01")
    ensure_date_writable(state, None)


@pytest.mark.parametrize(
    "shares",
    [
        [_share("a", "60"), _share("a", "40")],
        [_share("a", "-1")],
        [_share("a", "60"), _share("b", "50")],
    ],
)
def test_invalid_share_sets_are_rejected(shares):
    with pytest.raises(InvalidPartnerSharesError):
        validate_partner_shares(shares)


def test_partial_share_set_is_accepted():
    validate_partner_shares([_share("a", "30"), _share("b", "20")])


def test_owner_and_shareholders_cannot_be_deleted():
    owner = Partner(id="me", name="Me", is_self=True)
    lan = Partner(id="lan", name="Lan")
    minh = Partner(id="minh", name="Minh")
    projects = [
        Project(
            id="p1",
            name="Beta",
            period="2024-05",
            is_partnership=True,
            partner_shares=(_share("lan", "40"),),
        )
    ]

    with pytest.raises(PartnerDeletionError):
        ensure_partner_deletable(owner, projects)
    with pytest.raises(PartnerDeletionError):
        ensure_partner_deletable(lan, projects)
    ensure_partner_deletable(minh, projects)
