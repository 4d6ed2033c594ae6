"""CLI adapter creating the ledger tables when they are missing."""

from affiliate_ledger.infrastructure.container import build_database_adapter
from affiliate_ledger.infrastructure.logging.logger import get_app_logger
from affiliate_ledger.infrastructure.schema import ensure_schema


def main() -> None:
    """Create every ledger, period and settings table."""
    logger = get_app_logger()
    engine = build_database_adapter().get_ledger_engine()
    ensure_schema(engine)
    logger.info(f"Ledger schema ready on {engine.url}")
    print("Ledger schema is up to date.")


if __name__ == "__main__":  # pragma: no cover
    main()
