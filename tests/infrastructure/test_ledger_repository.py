"""Tests for the SQLAlchemy ledger repository and writer."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from affiliate_ledger.domain.models import Commission, Partner
from affiliate_ledger.infrastructure.ledger_repository import (
    SqlAlchemyLedgerRepository,
    SqlAlchemyLedgerWriter,
)


def _commission(commission_id: str, usd: str) -> Commission:
    return Commission(
        id=commission_id,
        project_id="p1",
        date="2024-05-10",
        asset_id="bank",
        usd_amount=Decimal(usd),
        predicted_rate=Decimal("25000"),
        vnd_amount=Decimal(usd) * Decimal("25000"),
    )


def _repository(db_port, *workspace_ids):
    return SqlAlchemyLedgerRepository(
        db_port, workspace_ids, logger=MagicMock(), max_workers=2
    )


@pytest.fixture
def seeded(db_port):
    own = SqlAlchemyLedgerWriter(db_port, "ws-me")
    trusted = SqlAlchemyLedgerWriter(db_port, "ws-lan")
    own.add_records("partners", [Partner(id="me", name="Me", is_self=True)])
    own.add_records("commissions", [_commission("c1", "100")])
    trusted.add_records(
        "commissions", [_commission("c2", "20"), _commission("c1", "999")]
    )
    return db_port


def test_snapshot_prefers_owner_workspace_records(seeded) -> None:
    snapshot = _repository(seeded, "ws-me", "ws-lan").fetch_snapshot()

    assert [c.id for c in snapshot.commissions] == ["c1", "c2"]
    assert snapshot.commissions[0].usd_amount == Decimal("100")
    assert snapshot.partners == (Partner(id="me", name="Me", is_self=True),)
    assert snapshot.projects == ()


def test_untrusted_workspaces_stay_invisible(seeded) -> None:
    snapshot = _repository(seeded, "ws-me").fetch_snapshot()

    assert [c.id for c in snapshot.commissions] == ["c1"]


def test_add_records_replaces_rows_with_same_id(seeded) -> None:
    writer = SqlAlchemyLedgerWriter(seeded, "ws-me")

    writer.add_records("commissions", [_commission("c1", "150")])

    repository = _repository(seeded, "ws-me")
    (commission,) = repository.fetch_collection("commissions")
    assert commission.usd_amount == Decimal("150")
    assert commission.vnd_amount == Decimal("3750000")


def test_delete_record_only_touches_owner_workspace(seeded) -> None:
    SqlAlchemyLedgerWriter(seeded, "ws-me").delete_record("commissions", "c1")

    remaining = _repository(seeded, "ws-me", "ws-lan").fetch_collection(
        "commissions"
    )
    assert [(c.id, c.usd_amount) for c in remaining] == [
        ("c1", Decimal("999")),
        ("c2", Decimal("20")),
    ]


def test_unknown_collection_and_empty_scope_are_rejected(db_port) -> None:
    with pytest.raises(ValueError):
        _repository(db_port, "ws-me").fetch_collection("invoices")
    with pytest.raises(ValueError):
        SqlAlchemyLedgerWriter(db_port, "ws-me").delete_record("invoices", "x")
    with pytest.raises(ValueError):
        _repository(db_port)
