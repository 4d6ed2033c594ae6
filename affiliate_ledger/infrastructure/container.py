"""Composition root for wiring infrastructure adapters."""

from affiliate_ledger.application.ports.database import DatabaseEnginePort
from affiliate_ledger.application.ports.ledger_repository import (
    LedgerRepositoryPort,
    LedgerWriterPort,
)
from affiliate_ledger.application.ports.period_repository import (
    PeriodRepositoryPort,
)
from affiliate_ledger.application.ports.tax_settings_repository import (
    TaxSettingsRepositoryPort,
)
from affiliate_ledger.application.use_cases.close_period import (
    ClosePeriodUseCase,
)
from affiliate_ledger.application.use_cases.get_debt_positions import (
    GetDebtPositionsUseCase,
)
from affiliate_ledger.application.use_cases.get_partner_ledgers import (
    GetPartnerLedgersUseCase,
)
from affiliate_ledger.application.use_cases.get_period_asset_details import (
    GetPeriodAssetDetailsUseCase,
)
from affiliate_ledger.application.use_cases.get_period_financials import (
    GetPeriodFinancialsUseCase,
)
from affiliate_ledger.application.use_cases.open_period import (
    OpenPeriodUseCase,
)
from affiliate_ledger.application.use_cases.record_ledger_entries import (
    RecordLedgerEntriesUseCase,
)
from affiliate_ledger.application.use_cases.view_period import (
    ViewPeriodUseCase,
)
from affiliate_ledger.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from affiliate_ledger.infrastructure.ledger_repository import (
    SqlAlchemyLedgerRepository,
    SqlAlchemyLedgerWriter,
)
from affiliate_ledger.infrastructure.logging.logger import get_app_logger
from affiliate_ledger.infrastructure.period_repository import (
    SqlAlchemyPeriodRepository,
)
from affiliate_ledger.infrastructure.settings import LedgerSettings
from affiliate_ledger.infrastructure.tax_settings_repository import (
    SqlAlchemyTaxSettingsRepository,
)


def build_database_adapter() -> DatabaseEnginePort:
    """Return the database adapter instance."""
    return SqlAlchemyDatabaseEngineAdapter()


def build_settings() -> LedgerSettings:
    """Return ledger settings sourced from the environment."""
    return LedgerSettings.from_env()


def build_ledger_repository(
    db_port: DatabaseEnginePort | None = None,
    settings: LedgerSettings | None = None,
) -> LedgerRepositoryPort:
    """Return the ledger repository scoped to the trusted workspaces."""
    resolved_db = db_port or build_database_adapter()
    resolved_settings = settings or build_settings()
    return SqlAlchemyLedgerRepository(
        resolved_db,
        resolved_settings.workspace_ids,
        logger=get_app_logger(),
    )


def build_ledger_writer(
    db_port: DatabaseEnginePort | None = None,
    settings: LedgerSettings | None = None,
) -> LedgerWriterPort:
    """Return the ledger writer for the owner workspace."""
    resolved_db = db_port or build_database_adapter()
    resolved_settings = settings or build_settings()
    return SqlAlchemyLedgerWriter(resolved_db, resolved_settings.workspace_id)


def build_period_repository(
    db_port: DatabaseEnginePort | None = None,
    settings: LedgerSettings | None = None,
) -> PeriodRepositoryPort:
    """Return the period state repository."""
    resolved_db = db_port or build_database_adapter()
    resolved_settings = settings or build_settings()
    return SqlAlchemyPeriodRepository(
        resolved_db,
        resolved_settings.workspace_id,
    )


def build_tax_settings_repository(
    db_port: DatabaseEnginePort | None = None,
    settings: LedgerSettings | None = None,
) -> TaxSettingsRepositoryPort:
    """Return the tax settings repository."""
    resolved_db = db_port or build_database_adapter()
    resolved_settings = settings or build_settings()
    return SqlAlchemyTaxSettingsRepository(
        resolved_db,
        resolved_settings.workspace_id,
        logger=get_app_logger(),
    )


def build_period_financials_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: LedgerSettings | None = None,
) -> GetPeriodFinancialsUseCase:
    """Return the use case computing period financials."""
    resolved_db = db_port or build_database_adapter()
    resolved_settings = settings or build_settings()
    return GetPeriodFinancialsUseCase(
        build_ledger_repository(resolved_db, resolved_settings),
        build_period_repository(resolved_db, resolved_settings),
        build_tax_settings_repository(resolved_db, resolved_settings),
        logger=get_app_logger(),
        fallback_rate=resolved_settings.fallback_usd_rate,
    )


def build_period_asset_details_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: LedgerSettings | None = None,
) -> GetPeriodAssetDetailsUseCase:
    resolved_db = db_port or build_database_adapter()
    resolved_settings = settings or build_settings()
    return GetPeriodAssetDetailsUseCase(
        build_ledger_repository(resolved_db, resolved_settings),
        build_period_repository(resolved_db, resolved_settings),
        logger=get_app_logger(),
        fallback_rate=resolved_settings.fallback_usd_rate,
    )


def build_partner_ledgers_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: LedgerSettings | None = None,
) -> GetPartnerLedgersUseCase:
    resolved_db = db_port or build_database_adapter()
    resolved_settings = settings or build_settings()
    return GetPartnerLedgersUseCase(
        build_ledger_repository(resolved_db, resolved_settings),
        build_period_repository(resolved_db, resolved_settings),
        logger=get_app_logger(),
        fallback_rate=resolved_settings.fallback_usd_rate,
    )


def build_debt_positions_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: LedgerSettings | None = None,
) -> GetDebtPositionsUseCase:
    resolved_db = db_port or build_database_adapter()
    return GetDebtPositionsUseCase(
        build_ledger_repository(resolved_db, settings),
        logger=get_app_logger(),
    )


def build_open_period_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: LedgerSettings | None = None,
) -> OpenPeriodUseCase:
    resolved_db = db_port or build_database_adapter()
    return OpenPeriodUseCase(
        build_period_repository(resolved_db, settings),
        logger=get_app_logger(),
    )


def build_close_period_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: LedgerSettings | None = None,
) -> ClosePeriodUseCase:
    """Return the use case closing the open period."""
    resolved_db = db_port or build_database_adapter()
    resolved_settings = settings or build_settings()
    return ClosePeriodUseCase(
        build_ledger_repository(resolved_db, resolved_settings),
        build_period_repository(resolved_db, resolved_settings),
        build_tax_settings_repository(resolved_db, resolved_settings),
        logger=get_app_logger(),
        fallback_rate=resolved_settings.fallback_usd_rate,
        enforce_closing_day=resolved_settings.enforce_closing_day,
    )


def build_view_period_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: LedgerSettings | None = None,
) -> ViewPeriodUseCase:
    resolved_db = db_port or build_database_adapter()
    return ViewPeriodUseCase(build_period_repository(resolved_db, settings))


def build_record_ledger_entries_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: LedgerSettings | None = None,
) -> RecordLedgerEntriesUseCase:
    """Return the use case guarding ledger writes."""
    resolved_db = db_port or build_database_adapter()
    resolved_settings = settings or build_settings()
    return RecordLedgerEntriesUseCase(
        build_ledger_writer(resolved_db, resolved_settings),
        build_period_repository(resolved_db, resolved_settings),
        build_ledger_repository(resolved_db, resolved_settings),
        logger=get_app_logger(),
    )


__all__ = [
    "build_database_adapter",
    "build_settings",
    "build_ledger_repository",
    "build_ledger_writer",
    "build_period_repository",
    "build_tax_settings_repository",
    "build_period_financials_use_case",
    "build_period_asset_details_use_case",
    "build_partner_ledgers_use_case",
    "build_debt_positions_use_case",
    "build_open_period_use_case",
    "build_close_period_use_case",
    "build_view_period_use_case",
    "build_record_ledger_entries_use_case",
]
