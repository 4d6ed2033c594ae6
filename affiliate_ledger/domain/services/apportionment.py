"""Domain helpers resolving the owner and effective partner shares."""

from decimal import Decimal
from logging import Logger

from affiliate_ledger.domain.constants import (
    DEFAULT_OWNER_NAME,
    DEFAULT_OWNER_PARTNER_ID,
    FULL_SHARE,
)
from affiliate_ledger.domain.models import (
    MiscellaneousExpense,
    Partner,
    PartnerShare,
    Project,
)
from affiliate_ledger.domain.models.warnings import (
    DUPLICATE_OWNER,
    INVALID_SHARES,
    MISSING_OWNER,
    UNKNOWN_PARTNER,
)
from affiliate_ledger.domain.services.diagnostics import emit_warning
from affiliate_ledger.utils.decimal_utils import coerce_decimal


def resolve_owner(
    partners: tuple[Partner, ...],
    warnings: list,
    logger: Logger | None = None,
) -> Partner:
    """Return the ``is_self`` partner, or a synthetic owner when missing.

    Args:
        partners: Partners of the workspace.
        warnings: Accumulator for recoverable warnings.
        logger: Optional logger used for warnings.

    Returns:
        Partner: The workspace owner.
    """
    owners = [partner for partner in partners if partner.is_self]
    if not owners:
        emit_warning(
            warnings,
            MISSING_OWNER,
            f"No is_self partner found; using {DEFAULT_OWNER_PARTNER_ID}",
            logger=logger,
        )
        return Partner(
            id=DEFAULT_OWNER_PARTNER_ID,
            name=DEFAULT_OWNER_NAME,
            is_self=True,
        )
    if len(owners) > 1:
        emit_warning(
            warnings,
            DUPLICATE_OWNER,
            f"{len(owners)} is_self partners found; using {owners[0].id}",
            record_id=owners[0].id,
            logger=logger,
        )
    return owners[0]


def effective_shares(
    project: Project | None,
    expense: MiscellaneousExpense | None,
    *,
    owner_id: str,
    known_partner_ids: set[str],
    warnings: list,
    record_id: str | None = None,
    logger: Logger | None = None,
) -> dict[str, Decimal]:
    """Return share percentages by partner for a revenue or cost item.

    Project shares apply when the project is a partnership, then the
    expense's own shares, else the owner holds 100%. Any remainder below
    100 belongs to the owner. Invalid share sets and unknown partners fall
    back to the owner with a warning.

    Args:
        project: Project the item belongs to, if known.
        expense: Expense carrying its own shares, if any.
        owner_id: Owner partner id.
        known_partner_ids: Ids of partners present in the snapshot.
        warnings: Accumulator for recoverable warnings.
        record_id: Id reported with warnings.
        logger: Optional logger used for warnings.

    Returns:
        dict[str, Decimal]: Percentages summing to 100, owner included.
    """
    shares: tuple[PartnerShare, ...] = ()
    if project is not None and project.is_partnership and project.partner_shares:
        shares = project.partner_shares
    elif expense is not None and expense.is_partnership and expense.partner_shares:
        shares = expense.partner_shares
    if not shares:
        return {owner_id: FULL_SHARE}

    percentages = [coerce_decimal(share.share_percentage) for share in shares]
    total = sum(percentages, Decimal("0"))
    if total <= 0 or total > FULL_SHARE or any(pct < 0 for pct in percentages):
        emit_warning(
            warnings,
            INVALID_SHARES,
            f"Partner shares of {record_id} sum to {total}; "
            "attributing to the owner",
            record_id=record_id,
            logger=logger,
        )
        return {owner_id: FULL_SHARE}

    resolved: dict[str, Decimal] = {}
    for share, pct in zip(shares, percentages):
        partner_id = share.partner_id
        if partner_id not in known_partner_ids and partner_id != owner_id:
            emit_warning(
                warnings,
                UNKNOWN_PARTNER,
                f"Unknown partner {partner_id} in shares of {record_id}; "
                "attributing share to the owner",
                record_id=record_id,
                logger=logger,
            )
            partner_id = owner_id
        resolved[partner_id] = resolved.get(partner_id, Decimal("0")) + pct
    remainder = FULL_SHARE - total
    if remainder > 0:
        resolved[owner_id] = resolved.get(owner_id, Decimal("0")) + remainder
    return resolved


def apportion(amount: Decimal, shares: dict[str, Decimal]) -> dict[str, Decimal]:
    """Split ``amount`` by percentage shares."""
    return {
        partner_id: amount * pct / FULL_SHARE
        for partner_id, pct in shares.items()
    }


__all__ = ["resolve_owner", "effective_shares", "apportion"]
