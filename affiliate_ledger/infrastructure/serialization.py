"""Conversion between domain dataclasses and storable rows or JSON."""

from datetime import datetime
from functools import lru_cache
import json
from typing import Any, Mapping

from pydantic import TypeAdapter

from affiliate_ledger.domain.models import PeriodFinancials, TaxSettings

# Columns holding nested records, stored as JSON text.
JSON_COLUMNS = frozenset({"partner_shares"})

_FINANCIALS = TypeAdapter(PeriodFinancials)
_TIMESTAMP = TypeAdapter(datetime)


@lru_cache(maxsize=None)
def _adapter(record_type: type) -> TypeAdapter:
    return TypeAdapter(record_type)


def record_to_row(record) -> dict[str, Any]:
    """Flatten a ledger record into column values.

    Decimals become text, nested records JSON text.
    """
    row = _adapter(type(record)).dump_python(record, mode="json")
    for column in JSON_COLUMNS & row.keys():
        row[column] = json.dumps(row[column])
    return row


def row_to_record(record_type: type, row: Mapping[str, Any]):
    """Build a ledger record from a database row mapping."""
    values = dict(row)
    for column in JSON_COLUMNS & values.keys():
        raw = values[column]
        if isinstance(raw, str):
            values[column] = json.loads(raw) if raw else []
    return _adapter(record_type).validate_python(values)


def parse_timestamp(value: str | datetime) -> datetime:
    return _TIMESTAMP.validate_python(value)


def financials_to_json(financials: PeriodFinancials | None) -> str | None:
    if financials is None:
        return None
    return _FINANCIALS.dump_json(financials).decode()


def financials_from_json(raw: str | None) -> PeriodFinancials | None:
    if not raw:
        return None
    return _FINANCIALS.validate_json(raw)


def tax_settings_to_row(settings: TaxSettings) -> dict[str, Any]:
    return _adapter(TaxSettings).dump_python(settings, mode="json")


def tax_settings_from_row(row: Mapping[str, Any]) -> TaxSettings:
    return _adapter(TaxSettings).validate_python(dict(row))


__all__ = [
    "JSON_COLUMNS",
    "record_to_row",
    "row_to_record",
    "parse_timestamp",
    "financials_to_json",
    "financials_from_json",
    "tax_settings_to_row",
    "tax_settings_from_row",
]
