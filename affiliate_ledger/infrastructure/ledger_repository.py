"""SQLAlchemy adapters reading and writing ledger collections."""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import fields

from sqlalchemy import bindparam, text

from affiliate_ledger.application.ports.database import DatabaseEnginePort
from affiliate_ledger.application.ports.ledger_repository import (
    LedgerRepositoryPort,
    LedgerWriterPort,
)
from affiliate_ledger.domain.models import LEDGER_COLLECTIONS, LedgerSnapshot
from affiliate_ledger.infrastructure.logging.logger import get_app_logger
from affiliate_ledger.infrastructure.serialization import (
    record_to_row,
    row_to_record,
)


def _select_sql(table: str):
    return text(
        f"""
        SELECT *
        FROM {table}
        WHERE workspace_id IN :workspace_ids
        """
    ).bindparams(bindparam("workspace_ids", expanding=True))


def _insert_sql(table: str, record_type: type):
    columns = ["workspace_id"] + [item.name for item in fields(record_type)]
    placeholders = ", ".join(f":{name}" for name in columns)
    return text(
        f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})"
    )


def _delete_sql(table: str):
    return text(
        f"DELETE FROM {table} WHERE workspace_id = :workspace_id AND id = :id"
    )


def _table(collection: str) -> type:
    try:
        return LEDGER_COLLECTIONS[collection]
    except KeyError as exc:
        raise ValueError(f"Unknown ledger collection: {collection}") from exc


class SqlAlchemyLedgerRepository(LedgerRepositoryPort):
    """Repository fetching every collection of the visible workspaces.

    Collections are read in parallel and the snapshot is only built once
    all of them have arrived. Records of the owner workspace shadow records
    with the same id in trusted workspaces.
    """

    def __init__(
        self,
        db_port: DatabaseEnginePort,
        workspace_ids: tuple[str, ...],
        logger=None,
        max_workers: int = 4,
    ) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the ledger engine.
            workspace_ids: Owner workspace first, then trusted workspaces.
            logger: Optional logger compatible with logging.Logger-like API.
            max_workers: Number of concurrent collection fetches.
        """
        if not workspace_ids:
            raise ValueError("At least one workspace id is required")
        self._db_port = db_port
        self._workspace_ids = tuple(workspace_ids)
        self._logger = logger or get_app_logger()
        self._max_workers = max_workers

    def fetch_snapshot(self) -> LedgerSnapshot:
        """Return a de-duplicated snapshot of all collections.

        Returns:
            LedgerSnapshot: Records of every collection, sorted by id.
        """
        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
            futures = {
                name: pool.submit(self.fetch_collection, name)
                for name in LEDGER_COLLECTIONS
            }
            collections = {
                name: future.result() for name, future in futures.items()
            }
        snapshot = LedgerSnapshot(**collections)
        self._logger.info(
            f"Fetched {snapshot.record_count()} records from "
            f"{len(self._workspace_ids)} workspaces"
        )
        return snapshot

    def fetch_collection(self, collection: str) -> tuple:
        """Return the records of one collection.

        Args:
            collection: Collection (table) name.

        Returns:
            tuple: Records ordered by id, one per id.
        """
        record_type = _table(collection)
        engine = self._db_port.get_ledger_engine()
        with engine.connect() as conn:
            rows = conn.execute(
                _select_sql(collection),
                {"workspace_ids": list(self._workspace_ids)},
            ).all()
        priority = {ws: index for index, ws in enumerate(self._workspace_ids)}
        chosen: dict[str, tuple[int, dict]] = {}
        for row in rows:
            mapping = dict(row._mapping)
            rank = priority.get(mapping.pop("workspace_id"), len(priority))
            current = chosen.get(mapping["id"])
            if current is None or rank < current[0]:
                chosen[mapping["id"]] = (rank, mapping)
        return tuple(
            row_to_record(record_type, chosen[record_id][1])
            for record_id in sorted(chosen)
        )


class SqlAlchemyLedgerWriter(LedgerWriterPort):
    """Writer persisting records into the owner workspace."""

    def __init__(self, db_port: DatabaseEnginePort, workspace_id: str) -> None:
        self._db_port = db_port
        self._workspace_id = workspace_id

    def add_records(self, collection: str, records: list) -> None:
        """Insert records, replacing existing rows with the same id."""
        record_type = _table(collection)
        payload = [
            {"workspace_id": self._workspace_id, **record_to_row(record)}
            for record in records
        ]
        if not payload:
            return
        keys = [
            {"workspace_id": self._workspace_id, "id": row["id"]}
            for row in payload
        ]
        engine = self._db_port.get_ledger_engine()
        with engine.begin() as conn:
            conn.execute(_delete_sql(collection), keys)
            conn.execute(_insert_sql(collection, record_type), payload)

    def delete_record(self, collection: str, record_id: str) -> None:
        _table(collection)
        engine = self._db_port.get_ledger_engine()
        with engine.begin() as conn:
            conn.execute(
                _delete_sql(collection),
                {"workspace_id": self._workspace_id, "id": record_id},
            )


__all__ = ["SqlAlchemyLedgerRepository", "SqlAlchemyLedgerWriter"]
