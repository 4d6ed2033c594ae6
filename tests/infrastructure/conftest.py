"""SQLite-backed fixtures for repository tests."""

import pytest
from sqlalchemy import create_engine

from affiliate_ledger.infrastructure.schema import ensure_schema


class _DbPort:
    def __init__(self, engine) -> None:
        self._engine = engine

    def get_ledger_engine(self):
        return self._engine


@pytest.fixture
def ledger_engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'ledger.db'}")
    ensure_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_port(ledger_engine):
    return _DbPort(ledger_engine)
