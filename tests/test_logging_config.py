"""Tests for logging setup and credential masking."""

import logging

from common.logging_config import SensitiveDataFilter, get_logger, setup_logging


def _record(msg, args=()):
    return logging.LogRecord("locker.test", logging.INFO, __file__, 1, msg, args, None)


def test_filter_masks_password_in_message():
    record = _record("signup payload password=hunter2 email=a@example.com")

    SensitiveDataFilter().filter(record)

    assert "hunter2" not in record.msg
    assert "password=***MASKED***" in record.msg
    assert "email=a@example.com" in record.msg


def test_filter_masks_password_in_args():
    record = _record("payload %s", ('{"password": "hunter2"}',))

    SensitiveDataFilter().filter(record)

    assert "hunter2" not in record.getMessage()


def test_filter_never_drops_records():
    assert SensitiveDataFilter().filter(_record("plain message")) is True


def test_setup_logging_configures_component_and_core(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    core = logging.getLogger("locker")
    saved = (core.level, list(core.handlers), core.propagate)

    try:
        logger = setup_logging("cli-test", log_level="debug")

        assert logger.name == "cli-test"
        assert logger.level == logging.DEBUG
        assert core.level == logging.DEBUG
        assert any(
            isinstance(f, SensitiveDataFilter) for h in logger.handlers for f in h.filters
        )
    finally:
        core.setLevel(saved[0])
        core.handlers = saved[1]
        core.propagate = saved[2]


def test_get_logger_returns_named_logger():
    assert get_logger("locker.database").name == "locker.database"
