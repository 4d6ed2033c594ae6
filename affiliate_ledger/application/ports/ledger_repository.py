"""Ports for reading and writing ledger records."""

from typing import Protocol

from affiliate_ledger.domain.models import LedgerSnapshot


class LedgerRepositoryPort(Protocol):
    """Port returning a complete, de-duplicated ledger snapshot."""

    def fetch_snapshot(self) -> LedgerSnapshot:
        """Return every collection of the workspace once all are fetched."""


class LedgerWriterPort(Protocol):
    """Port persisting ledger records of one workspace."""

    def add_records(self, collection: str, records: list) -> None:
        """Insert or replace records of a collection in one transaction."""

    def delete_record(self, collection: str, record_id: str) -> None:
        """Delete one record of a collection."""


__all__ = ["LedgerRepositoryPort", "LedgerWriterPort"]
