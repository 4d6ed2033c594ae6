"""Port for the period lifecycle state."""

from typing import Protocol

from affiliate_ledger.domain.models import PeriodState


class PeriodRepositoryPort(Protocol):
    """Port loading and saving the workspace's period state."""

    def load_state(self) -> PeriodState:
        """Return the stored state, or an empty one."""

    def save_state(self, state: PeriodState) -> None:
        """Persist the active/viewing periods and closed period snapshots."""


__all__ = ["PeriodRepositoryPort"]
