"""Table definitions for the ledger database."""

from dataclasses import fields
import typing

from sqlalchemy.engine import Engine

from affiliate_ledger.domain.models import LEDGER_COLLECTIONS, TaxSettings

PERIOD_STATE_TABLE = "period_state"
CLOSED_PERIODS_TABLE = "closed_periods"
TAX_SETTINGS_TABLE = "tax_settings"

CREATE_PERIOD_STATE_SQL = f"""
CREATE TABLE IF NOT EXISTS {PERIOD_STATE_TABLE} (
    workspace_id TEXT PRIMARY KEY,
    active_period TEXT,
    viewing_period TEXT
)
"""

CREATE_CLOSED_PERIODS_SQL = f"""
CREATE TABLE IF NOT EXISTS {CLOSED_PERIODS_TABLE} (
    workspace_id TEXT NOT NULL,
    period TEXT NOT NULL,
    closed_at TEXT NOT NULL,
    financials TEXT,
    PRIMARY KEY (workspace_id, period)
)
"""


def _column_type(annotation) -> str:
    """Return the SQL type of a dataclass field; numbers are kept as text."""
    options = [
        arg for arg in typing.get_args(annotation) if arg is not type(None)
    ] or [annotation]
    base = options[0]
    if base is bool:
        return "BOOLEAN"
    if base is int:
        return "INTEGER"
    return "TEXT"


def _columns(record_type: type) -> list[str]:
    hints = typing.get_type_hints(record_type)
    return [
        f"    {item.name} {_column_type(hints[item.name])}"
        for item in fields(record_type)
        if item.name != "id"
    ]


def create_collection_sql(table: str, record_type: type) -> str:
    """Return the DDL of a collection table keyed by (workspace_id, id)."""
    columns = ",\n".join(_columns(record_type))
    return (
        f"CREATE TABLE IF NOT EXISTS {table} (\n"
        "    workspace_id TEXT NOT NULL,\n"
        "    id TEXT NOT NULL,\n"
        f"{columns},\n"
        "    PRIMARY KEY (workspace_id, id)\n"
        ")"
    )


def create_tax_settings_sql() -> str:
    columns = ",\n".join(_columns(TaxSettings))
    return (
        f"CREATE TABLE IF NOT EXISTS {TAX_SETTINGS_TABLE} (\n"
        "    workspace_id TEXT PRIMARY KEY,\n"
        f"{columns}\n"
        ")"
    )


def schema_statements() -> list[str]:
    statements = [
        create_collection_sql(table, record_type)
        for table, record_type in LEDGER_COLLECTIONS.items()
    ]
    statements.extend(
        [
            CREATE_PERIOD_STATE_SQL,
            CREATE_CLOSED_PERIODS_SQL,
            create_tax_settings_sql(),
        ]
    )
    return statements


def ensure_schema(engine: Engine) -> None:
    """Create missing ledger tables."""
    with engine.begin() as conn:
        for statement in schema_statements():
            conn.exec_driver_sql(statement)


__all__ = [
    "PERIOD_STATE_TABLE",
    "CLOSED_PERIODS_TABLE",
    "TAX_SETTINGS_TABLE",
    "create_collection_sql",
    "create_tax_settings_sql",
    "schema_statements",
    "ensure_schema",
]
