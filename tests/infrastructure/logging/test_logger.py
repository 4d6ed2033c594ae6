"""Tests for the logging helpers."""

import logging
from unittest.mock import MagicMock

from affiliate_ledger.infrastructure.logging import logger as logger_module


def _freeze_stamp(monkeypatch):
    monkeypatch.setattr(
        logger_module.LoggerBuilder,
        "_today_stamp",
        staticmethod(lambda: "20240601"),
    )


def test_builder_writes_dated_file_under_logs(tmp_path, monkeypatch):
    """LoggerBuilder should place the log file in logs/<subdir>."""
    monkeypatch.setattr(logger_module, "get_project_root", lambda: tmp_path)
    _freeze_stamp(monkeypatch)

    builder = logger_module.LoggerBuilder()
    period_logger = (
        builder.name("ledger.periods")
        .subdir("periods")
        .prefix("close_logs")
        .console(True)
        .level(logging.WARNING)
        .build()
    )

    assert period_logger.name == "ledger.periods"
    assert period_logger.level == logging.WARNING
    assert period_logger.propagate is False
    file_handlers = [
        h for h in period_logger.handlers if isinstance(h, logging.FileHandler)
    ]
    assert len(file_handlers) == 1
    expected = tmp_path / "logs" / "periods" / "20240601_close_logs.log"
    assert file_handlers[0].baseFilename == str(expected)
    assert len(period_logger.handlers) == 2
    assert builder.build() is period_logger


def test_rebuilding_a_name_replaces_its_handlers(tmp_path, monkeypatch):
    monkeypatch.setattr(logger_module, "get_project_root", lambda: tmp_path)
    _freeze_stamp(monkeypatch)

    first = logger_module.LoggerBuilder().name("ledger.rebuild").build()
    second = logger_module.LoggerBuilder().name("ledger.rebuild").build()

    assert first is second
    assert len(second.handlers) == 1


def test_default_handlers_use_formatter(tmp_path):
    fmt = logger_module.LoggerBuilder._default_formatter()
    file_handler = logger_module.LoggerBuilder._default_file_handler(
        tmp_path / "ledger.log",
        fmt,
    )
    console_handler = logger_module.LoggerBuilder._default_console_handler(fmt)

    assert file_handler.level == logging.INFO
    assert file_handler.formatter is fmt
    assert console_handler.level == logging.INFO
    assert console_handler.formatter is fmt
    file_handler.close()


def test_logger_singleton_forwards_messages_and_args(monkeypatch):
    """Logger methods should call the wrapped logger with their args."""
    fake_logger = MagicMock()
    monkeypatch.setattr(
        logger_module.LoggerBuilder, "build", lambda self: fake_logger
    )
    monkeypatch.setattr(logger_module.Logger, "_instance", None)

    logger = logger_module.Logger("ledger")
    logger.info("period %s opened", "2024-05")
    logger.warning("fallback rate")
    logger.error("close failed")
    logger.debug("snapshot")
    logger.critical("db down")

    fake_logger.info.assert_called_with("period %s opened", "2024-05")
    fake_logger.warning.assert_called_with("fallback rate")
    fake_logger.error.assert_called_with("close failed")
    fake_logger.debug.assert_called_with("snapshot")
    fake_logger.critical.assert_called_with("db down")
    assert logger_module.Logger("other") is logger


def test_app_and_usage_loggers_are_separate_singletons(monkeypatch):
    built = []

    def _fake_build(self):
        built.append((self._name, self._subdir, self._console))
        return MagicMock()

    monkeypatch.setattr(logger_module.LoggerBuilder, "build", _fake_build)
    monkeypatch.setattr(logger_module.AppLogger, "_instance", None)
    monkeypatch.setattr(logger_module.UsageLogger, "_instance", None)

    app_logger = logger_module.get_app_logger()
    usage_logger = logger_module.get_usage_logger()

    assert logger_module.get_app_logger() is app_logger
    assert logger_module.get_usage_logger() is usage_logger
    assert app_logger is not usage_logger
    assert built == [
        ("affiliate_ledger", "app", True),
        ("affiliate_ledger.usage", "usage", False),
    ]
