"""Unit tests for tersegrep.logger helpers."""

import json
import logging

import tersegrep.logger as logger_mod


def test_context_logger_injects_extra_fields(caplog):
    base_logger = logger_mod.get_logger("tersegrep-test", json_format=False)
    contextual = logger_mod.ContextLogger(base_logger, root="/repo", query="abc123")

    with caplog.at_level(logging.INFO, logger="tersegrep-test"):
        contextual.info("hello", hits=3)

    assert any("hello" in message for message in caplog.messages)
    record = caplog.records[-1]
    assert getattr(record, "extra_fields", {}).get("root") == "/repo"
    assert getattr(record, "extra_fields", {}).get("query") == "abc123"
    assert getattr(record, "extra_fields", {}).get("hits") == 3


def test_context_logger_skips_disabled_levels(caplog):
    base_logger = logger_mod.get_logger("tersegrep-quiet", json_format=False)
    contextual = logger_mod.ContextLogger(base_logger)

    with caplog.at_level(logging.WARNING, logger="tersegrep-quiet"):
        contextual.debug("invisible")

    assert caplog.records == []


def test_json_formatter_includes_extra_fields():
    record = logging.LogRecord("x", logging.WARNING, __file__, 1, "scan done", (), None)
    record.extra_fields = {"scanned": 12}
    data = json.loads(logger_mod.JSONFormatter().format(record))
    assert data["level"] == "WARNING"
    assert data["message"] == "scan done"
    assert data["scanned"] == 12


def test_set_verbosity_lowers_cached_loggers():
    log = logger_mod.get_logger("tersegrep-verbosity", json_format=False)
    log.setLevel(logging.WARNING)
    logger_mod.set_verbosity(2)
    assert log.level == logging.DEBUG
    log.setLevel(logging.WARNING)


def test_input_errors_share_a_base():
    assert issubclass(logger_mod.EmptyQueryError, logger_mod.InvalidInputError)
    assert issubclass(logger_mod.RootNotFoundError, logger_mod.TersegrepError)
    assert issubclass(logger_mod.TrackingError, logger_mod.TersegrepError)
