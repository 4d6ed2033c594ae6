"""CLI adapter opening a reporting period.

The period comes from ``LEDGER_PERIOD`` (YYYY-MM); without it the month
after the latest closed period is opened.
"""

import os

from affiliate_ledger.domain.exceptions import PeriodStateError
from affiliate_ledger.infrastructure.container import (
    build_open_period_use_case,
)
from affiliate_ledger.infrastructure.logging.logger import get_app_logger


def main() -> None:
    """Open the requested or suggested period."""
    logger = get_app_logger()
    period = os.getenv("LEDGER_PERIOD", "").strip() or None
    use_case = build_open_period_use_case()
    try:
        state = use_case.execute(period=period)
    except PeriodStateError as exc:
        logger.error(str(exc))
        return
    print(f"Opened period {state.active_period}.")


if __name__ == "__main__":  # pragma: no cover
    main()
