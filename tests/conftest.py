"""Test-wide fixtures."""

from unittest.mock import MagicMock

import pytest

from affiliate_ledger.infrastructure.logging import logger as logger_module


@pytest.fixture(autouse=True)
def quiet_loggers(monkeypatch):
    """Replace the logger singletons so tests never write log files."""
    app_logger = MagicMock(name="app_logger")
    usage_logger = MagicMock(name="usage_logger")
    monkeypatch.setattr(logger_module.AppLogger, "_instance", app_logger)
    monkeypatch.setattr(logger_module.UsageLogger, "_instance", usage_logger)
    return app_logger
