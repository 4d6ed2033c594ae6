"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
import os

import dotenv

from affiliate_ledger.domain.constants import DEFAULT_FALLBACK_USD_RATE
from affiliate_ledger.infrastructure.logging.logger import get_app_logger

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class LedgerSettings:
    """Settings scoping and tuning ledger computations.

    Attributes:
        workspace_id: Workspace owning the ledger records.
        trusted_workspaces: Other workspaces whose records are shared in.
        fallback_usd_rate: VND per USD when a record carries no rate.
        enforce_closing_day: Refuse closing a period before the configured
            day of the following month.
    """

    workspace_id: str
    trusted_workspaces: tuple[str, ...] = field(default_factory=tuple)
    fallback_usd_rate: Decimal = DEFAULT_FALLBACK_USD_RATE
    enforce_closing_day: bool = True

    @property
    def workspace_ids(self) -> tuple[str, ...]:
        """Return the owner workspace followed by trusted workspaces."""
        others = tuple(
            ws for ws in self.trusted_workspaces if ws != self.workspace_id
        )
        return (self.workspace_id, *others)

    @classmethod
    def from_env(cls) -> "LedgerSettings":
        """Build settings from environment variables.

        Returns:
            LedgerSettings: Settings sourced from environment variables.

        Raises:
            RuntimeError: If ``LEDGER_WORKSPACE_ID`` is missing.
        """
        dotenv.load_dotenv()
        logger = get_app_logger()
        workspace_id = os.getenv("LEDGER_WORKSPACE_ID", "").strip()
        if not workspace_id:
            raise RuntimeError(
                "Missing environment variable: LEDGER_WORKSPACE_ID"
            )
        trusted = tuple(
            item.strip()
            for item in os.getenv("LEDGER_TRUSTED_WORKSPACES", "").split(",")
            if item.strip()
        )
        return cls(
            workspace_id=workspace_id,
            trusted_workspaces=trusted,
            fallback_usd_rate=cls._parse_rate(
                os.getenv("LEDGER_FALLBACK_USD_RATE"), logger=logger
            ),
            enforce_closing_day=cls._parse_bool(
                os.getenv("LEDGER_ENFORCE_CLOSING_DAY"), default=True
            ),
        )

    @staticmethod
    def _parse_rate(raw: str | None, logger) -> Decimal:
        """Parse the fallback rate, keeping the default on bad input.

        Args:
            raw: Raw environment value.
            logger: Logger used for warnings.

        Returns:
            Decimal: Positive fallback rate.
        """
        if not raw:
            return DEFAULT_FALLBACK_USD_RATE
        try:
            rate = Decimal(raw.strip())
        except InvalidOperation:
            logger.warning(
                f"Invalid LEDGER_FALLBACK_USD_RATE={raw!r}; using default"
            )
            return DEFAULT_FALLBACK_USD_RATE
        if rate <= 0:
            logger.warning(
                f"Non-positive LEDGER_FALLBACK_USD_RATE={raw!r}; "
                "using default"
            )
            return DEFAULT_FALLBACK_USD_RATE
        return rate

    @staticmethod
    def _parse_bool(raw: str | None, default: bool) -> bool:
        if raw is None:
            return default
        value = raw.strip().lower()
        if value in _TRUE_VALUES:
            return True
        if value in _FALSE_VALUES:
            return False
        return default


__all__ = ["LedgerSettings"]
