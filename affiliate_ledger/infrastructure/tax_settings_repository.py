"""SQLAlchemy adapter storing workspace tax settings."""

from dataclasses import fields

from sqlalchemy import text

from affiliate_ledger.application.ports.database import DatabaseEnginePort
from affiliate_ledger.application.ports.tax_settings_repository import (
    TaxSettingsRepositoryPort,
)
from affiliate_ledger.domain.models import TaxSettings, default_tax_settings
from affiliate_ledger.infrastructure.logging.logger import get_app_logger
from affiliate_ledger.infrastructure.schema import TAX_SETTINGS_TABLE
from affiliate_ledger.infrastructure.serialization import (
    tax_settings_from_row,
    tax_settings_to_row,
)

_COLUMNS = [item.name for item in fields(TaxSettings)]

SELECT_SETTINGS_SQL = text(
    f"""
    SELECT {', '.join(_COLUMNS)}
    FROM {TAX_SETTINGS_TABLE}
    WHERE workspace_id = :workspace_id
    """
)

DELETE_SETTINGS_SQL = text(
    f"DELETE FROM {TAX_SETTINGS_TABLE} WHERE workspace_id = :workspace_id"
)

INSERT_SETTINGS_SQL = text(
    f"""
    INSERT INTO {TAX_SETTINGS_TABLE} (workspace_id, {', '.join(_COLUMNS)})
    VALUES (:workspace_id, {', '.join(':' + name for name in _COLUMNS)})
    """
)


class SqlAlchemyTaxSettingsRepository(TaxSettingsRepositoryPort):
    """Tax settings of one workspace."""

    def __init__(
        self,
        db_port: DatabaseEnginePort,
        workspace_id: str,
        logger=None,
    ) -> None:
        self._db_port = db_port
        self._workspace_id = workspace_id
        self._logger = logger or get_app_logger()

    def load_settings(self) -> TaxSettings:
        """Return stored settings, or the defaults when none are stored."""
        engine = self._db_port.get_ledger_engine()
        with engine.connect() as conn:
            row = conn.execute(
                SELECT_SETTINGS_SQL, {"workspace_id": self._workspace_id}
            ).first()
        if row is None:
            self._logger.info(
                f"No tax settings for workspace {self._workspace_id}; "
                "using defaults"
            )
            return default_tax_settings()
        return tax_settings_from_row(row._mapping)

    def save_settings(self, settings: TaxSettings) -> None:
        payload = {
            "workspace_id": self._workspace_id,
            **tax_settings_to_row(settings),
        }
        engine = self._db_port.get_ledger_engine()
        with engine.begin() as conn:
            conn.execute(
                DELETE_SETTINGS_SQL, {"workspace_id": self._workspace_id}
            )
            conn.execute(INSERT_SETTINGS_SQL, payload)


__all__ = ["SqlAlchemyTaxSettingsRepository"]
