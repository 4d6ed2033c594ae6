"""Tests for row and JSON conversion of domain records."""

from dataclasses import replace
from datetime import datetime
from decimal import Decimal
import json

from affiliate_ledger.application.use_cases.get_period_financials import (
    compute_period_financials,
)
from affiliate_ledger.domain.models import (
    Commission,
    LedgerSnapshot,
    MiscellaneousExpense,
    Partner,
    PartnerShare,
    TaxSettings,
    default_tax_settings,
)
from affiliate_ledger.infrastructure.serialization import (
    financials_from_json,
    financials_to_json,
    parse_timestamp,
    record_to_row,
    row_to_record,
    tax_settings_from_row,
    tax_settings_to_row,
)


def _expense() -> MiscellaneousExpense:
    return MiscellaneousExpense(
        id="m1",
        date="2024-05-03",
        description="Coworking",
        asset_id="bank",
        amount=Decimal("1250000"),
        vnd_amount=Decimal("1250000"),
        vat_rate=Decimal("8"),
        is_partnership=True,
        partner_shares=(
            PartnerShare(partner_id="me", share_percentage=Decimal("60")),
            PartnerShare(partner_id="lan", share_percentage=Decimal("40")),
        ),
    )


def test_record_row_stores_decimals_as_text_and_shares_as_json() -> None:
    row = record_to_row(_expense())

    assert row["amount"] == "1250000"
    assert row["vat_rate"] == "8"
    assert row["project_id"] is None
    assert json.loads(row["partner_shares"]) == [
        {"partner_id": "me", "share_percentage": "60", "permission": "view"},
        {"partner_id": "lan", "share_percentage": "40", "permission": "view"},
    ]
    assert row_to_record(MiscellaneousExpense, row) == _expense()


def test_row_to_record_accepts_database_scalars() -> None:
    """SQLite returns booleans as integers and empty JSON as ''."""
    row = {
        "id": "m2",
        "date": "2024-05-04",
        "description": "Domain",
        "asset_id": "bank",
        "amount": 300000,
        "vnd_amount": "300000",
        "project_id": "p1",
        "vat_rate": None,
        "is_partnership": 0,
        "partner_shares": "",
    }

    expense = row_to_record(MiscellaneousExpense, row)

    assert expense.amount == Decimal("300000")
    assert expense.vat_rate is None
    assert expense.is_partnership is False
    assert expense.partner_shares == ()
    assert row_to_record(
        Partner, {"id": "me", "name": "Me", "login_email": None, "is_self": 1}
    ).is_self is True


def test_financials_survive_json_snapshot() -> None:
    snapshot = LedgerSnapshot(
        partners=(Partner(id="me", name="Me", is_self=True),),
        commissions=(
            Commission(
                id="c1",
                project_id="gone",
                date="2024-05-10",
                asset_id="bank",
                usd_amount=Decimal("100"),
                predicted_rate=Decimal("25400"),
                vnd_amount=Decimal("2540000"),
            ),
        ),
    )
    financials = compute_period_financials(
        snapshot, "2024-05", default_tax_settings()
    )

    restored = financials_from_json(financials_to_json(financials))

    assert restored == financials
    assert restored.warnings
    assert financials_to_json(None) is None
    assert financials_from_json("") is None


def test_tax_settings_row_keeps_optional_rates() -> None:
    settings = TaxSettings(
        method="profit_vat",
        vat_rate=Decimal("10"),
        income_rate=Decimal("17"),
        vat_input_method="manual",
        manual_input_vat=Decimal("250000"),
        period_closing_day=5,
    )

    row = tax_settings_to_row(settings)

    assert row["revenue_rate"] is None
    assert row["period_closing_day"] == 5
    assert tax_settings_from_row(row) == settings


def test_parse_timestamp_accepts_iso_text_and_datetimes() -> None:
    stamp = datetime(2024, 6, 2, 8, 30)

    assert parse_timestamp("2024-06-02T08:30:00") == stamp
    assert parse_timestamp(stamp) == stamp


def test_financials_json_keeps_decimal_text() -> None:
    financials = compute_period_financials(
        LedgerSnapshot(partners=(Partner(id="me", name="Me", is_self=True),)),
        "2024-05",
        default_tax_settings(),
    )
    financials = replace(financials, total_revenue=Decimal("8890000.50"))

    payload = json.loads(financials_to_json(financials))

    assert payload["total_revenue"] == "8890000.50"
    assert financials_from_json(json.dumps(payload)).total_revenue == (
        Decimal("8890000.50")
    )
