"""Collect recoverable warnings and mirror them to a logger."""

from logging import Logger

from affiliate_ledger.domain.models.warnings import LedgerWarning


def emit_warning(
    warnings: list[LedgerWarning],
    code: str,
    message: str,
    record_id: str | None = None,
    logger: Logger | None = None,
) -> None:
    """Append a warning to ``warnings`` and log it when a logger is given.

    Args:
        warnings: Accumulator returned with the computation result.
        code: Warning code constant.
        message: Human-readable description.
        record_id: Offending record identifier, if any.
        logger: Optional logger used to echo the warning.
    """
    warnings.append(LedgerWarning(code=code, message=message, record_id=record_id))
    if logger is not None:
        logger.warning(message)


__all__ = ["emit_warning"]
