"""Database infrastructure for the affiliate ledger.

This module exposes concrete helpers to create and reuse the SQLAlchemy
engine connected to the ledger database. It belongs to the infrastructure
layer because it deals with an external system.
"""

import os
from typing import Optional

import dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import QueuePool

from affiliate_ledger.application.ports.database import DatabaseEnginePort


def _get_env_var(name: str) -> str:
    """Read an environment variable or raise a descriptive error.

    Args:
        name: Name of the environment variable to read.

    Returns:
        str: The raw value of the environment variable.

    Raises:
        RuntimeError: If the environment variable is missing or empty.
    """
    dotenv.load_dotenv()
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing environment variable: {name}")
    return value


def _create_engine(db_url: str) -> Engine:
    """Create a configured SQLAlchemy engine for the ledger database.

    Args:
        db_url: Fully qualified database URL (including driver and credentials)

    Returns:
        Engine: A SQLAlchemy engine instance with a small connection pool and
        health checks enabled.
    """
    return create_engine(
        db_url,
        poolclass=QueuePool,
        pool_size=5,
        max_overflow=5,
        pool_pre_ping=True,
        future=True,
    )


_ledger_engine: Optional[Engine] = None


def get_ledger_engine() -> Engine:
    """Get a singleton SQLAlchemy engine for the ledger database.

    Returns:
        Engine: Lazily initialized engine connected to ``LEDGER_DB_URL``.
    """
    global _ledger_engine
    if _ledger_engine is None:
        db_url = _get_env_var("LEDGER_DB_URL")
        _ledger_engine = _create_engine(db_url)
    return _ledger_engine


class SqlAlchemyDatabaseEngineAdapter(DatabaseEnginePort):
    """DatabaseEnginePort implementation backed by a SQLAlchemy engine.

    The adapter hides configuration details (environment variables, pooling)
    behind the port so application use cases can depend only on the protocol.
    """

    def get_ledger_engine(self) -> Engine:
        return get_ledger_engine()


__all__ = ["get_ledger_engine", "SqlAlchemyDatabaseEngineAdapter"]
