"""Use case guarding and persisting ledger writes."""

from affiliate_ledger.application.ports.ledger_repository import (
    LedgerRepositoryPort,
    LedgerWriterPort,
)
from affiliate_ledger.application.ports.period_repository import (
    PeriodRepositoryPort,
)
from affiliate_ledger.domain.exceptions import PartnerDeletionError
from affiliate_ledger.domain.models import (
    LEDGER_COLLECTIONS,
    PeriodState,
    TaxPayment,
    record_date,
)
from affiliate_ledger.domain.policies import (
    ensure_date_writable,
    ensure_partner_deletable,
    validate_partner_shares,
)
from affiliate_ledger.infrastructure.logging.logger import get_app_logger


class RecordLedgerEntriesUseCase:
    """Add and delete ledger records outside closed periods."""

    def __init__(
        self,
        ledger_writer: LedgerWriterPort,
        period_repository: PeriodRepositoryPort,
        ledger_repository: LedgerRepositoryPort,
        logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            ledger_writer: Port persisting records.
            period_repository: Port providing closed periods.
            ledger_repository: Port used to look up records being deleted.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._ledger_writer = ledger_writer
        self._period_repository = period_repository
        self._ledger_repository = ledger_repository
        self._logger = logger or get_app_logger()

    def add_one(self, collection: str, record) -> None:
        """Validate and persist a single record."""
        self.add_many(collection, [record])

    def add_many(self, collection: str, records: list) -> None:
        """Validate every record, then persist them together.

        Args:
            collection: Collection name from ``LEDGER_COLLECTIONS``.
            records: Records of the collection's type.

        Raises:
            ValueError: If the collection is unknown.
            TypeError: If a record does not belong to the collection.
            ClosedPeriodError: If a record is dated inside a closed period.
            InvalidPartnerSharesError: If a record's shares are invalid.
        """
        record_type = self._record_type(collection)
        state = self._period_repository.load_state()
        for record in records:
            if not isinstance(record, record_type):
                raise TypeError(
                    f"{type(record).__name__} does not belong to {collection}"
                )
            self._check_record(state, record)
        if not records:
            return
        self._ledger_writer.add_records(collection, list(records))
        self._logger.info(f"Saved {len(records)} records to {collection}")

    def delete_one(self, collection: str, record_id: str) -> None:
        """Delete a record unless it is dated inside a closed period."""
        self._record_type(collection)
        state = self._period_repository.load_state()
        snapshot = self._ledger_repository.fetch_snapshot()
        for record in getattr(snapshot, collection):
            if record.id == record_id:
                self._check_record(state, record, validate_shares=False)
                break
        self._ledger_writer.delete_record(collection, record_id)
        self._logger.info(f"Deleted {record_id} from {collection}")

    def delete_partner(self, partner_id: str) -> None:
        """Delete a partner that is neither the owner nor a shareholder.

        Raises:
            PartnerDeletionError: If the partner is unknown or must be kept.
        """
        snapshot = self._ledger_repository.fetch_snapshot()
        partner = snapshot.partner_by_id().get(partner_id)
        if partner is None:
            raise PartnerDeletionError(f"Unknown partner {partner_id}")
        ensure_partner_deletable(partner, snapshot.projects)
        self._ledger_writer.delete_record("partners", partner_id)
        self._logger.info(f"Deleted partner {partner_id}")

    @staticmethod
    def _record_type(collection: str) -> type:
        try:
            return LEDGER_COLLECTIONS[collection]
        except KeyError as exc:
            raise ValueError(f"Unknown ledger collection: {collection}") from exc

    @staticmethod
    def _check_record(
        state: PeriodState,
        record,
        validate_shares: bool = True,
    ) -> None:
        ensure_date_writable(state, record_date(record))
        if isinstance(record, TaxPayment):
            ensure_date_writable(state, record.period)
        if validate_shares and getattr(record, "partner_shares", None):
            validate_partner_shares(record.partner_shares)


__all__ = ["RecordLedgerEntriesUseCase"]
