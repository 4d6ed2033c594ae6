"""Domain policies guarding ledger writes."""

from collections.abc import Iterable
from decimal import Decimal

from affiliate_ledger.domain.constants import FULL_SHARE
from affiliate_ledger.domain.exceptions import (
    ClosedPeriodError,
    InvalidPartnerSharesError,
    PartnerDeletionError,
)
from affiliate_ledger.domain.models import (
    Partner,
    PartnerShare,
    PeriodState,
    Project,
)
from affiliate_ledger.utils.decimal_utils import coerce_decimal


def ensure_date_writable(state: PeriodState, date: str | None) -> None:
    """Raise when ``date`` falls inside a closed period.

    Args:
        state: Current lifecycle state.
        date: ISO date or YYYY-MM period of the record being written.

    Raises:
        ClosedPeriodError: If the date belongs to a closed period.
    """
    if not date:
        return
    period = date[:7]
    if period in state.closed_period_names():
        raise ClosedPeriodError(
            f"Period {period} is closed; records dated {date} are read-only"
        )


def validate_partner_shares(shares: Iterable[PartnerShare]) -> None:
    """Raise when shares are duplicated, negative or exceed 100 in total.

    Raises:
        InvalidPartnerSharesError: If the share set is invalid.
    """
    seen: set[str] = set()
    total = Decimal("0")
    for share in shares:
        if share.partner_id in seen:
            raise InvalidPartnerSharesError(
                f"Partner {share.partner_id} appears more than once"
            )
        seen.add(share.partner_id)
        percentage = coerce_decimal(share.share_percentage)
        if percentage < 0:
            raise InvalidPartnerSharesError(
                f"Share of partner {share.partner_id} is negative: {percentage}"
            )
        total += percentage
    if total > FULL_SHARE:
        raise InvalidPartnerSharesError(f"Partner shares sum to {total}")


def ensure_partner_deletable(
    partner: Partner,
    projects: Iterable[Project],
) -> None:
    """Refuse to delete the owner or a partner still holding project shares.

    Raises:
        PartnerDeletionError: If the partner must be kept.
    """
    if partner.is_self:
        raise PartnerDeletionError("The workspace owner cannot be deleted")
    for project in projects:
        if not project.is_partnership:
            continue
        if any(share.partner_id == partner.id for share in project.partner_shares):
            raise PartnerDeletionError(
                f"Partner {partner.id} holds shares in project {project.name}"
            )


__all__ = [
    "ensure_date_writable",
    "validate_partner_shares",
    "ensure_partner_deletable",
]
