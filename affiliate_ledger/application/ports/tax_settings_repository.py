"""Port for workspace tax settings."""

from typing import Protocol

from affiliate_ledger.domain.models import TaxSettings


class TaxSettingsRepositoryPort(Protocol):
    """Port loading and saving tax settings."""

    def load_settings(self) -> TaxSettings:
        """Return stored settings, or the defaults of a new workspace."""

    def save_settings(self, settings: TaxSettings) -> None:
        """Persist the tax settings."""


__all__ = ["TaxSettingsRepositoryPort"]
