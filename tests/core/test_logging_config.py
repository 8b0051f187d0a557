import json
import logging

import pytest

from profile_engine.core.logging_config import CustomJsonFormatter, setup_logging, get_engine_logger


@pytest.fixture
def formatter():
    return CustomJsonFormatter('%(timestamp)s %(level)s %(name)s %(category)s %(message)s')


def make_record(**extra):
    record = logging.LogRecord(
        name="profile_engine.assessment.engine",
        level=logging.WARNING,
        pathname=__file__,
        lineno=42,
        msg="Filtered out non-primitive score: values_profile",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_adds_engine_fields(formatter):
    payload = json.loads(formatter.format(make_record(category="scoring", value_type="dict")))
    assert payload["level"] == "WARNING"
    assert payload["category"] == "scoring"
    assert payload["version"] == "v3.0.1"
    assert payload["lineno"] == 42
    assert payload["value_type"] == "dict"
    assert payload["message"] == "Filtered out non-primitive score: values_profile"
    assert payload["timestamp"]


def test_formatter_defaults_category(formatter):
    payload = json.loads(formatter.format(make_record()))
    assert payload["category"] == "unknown"


def test_setup_logging_is_idempotent(restore_engine_logger):
    engine_logger = setup_logging("DEBUG")
    handlers = len(engine_logger.handlers)
    again = setup_logging("WARNING")
    assert again is engine_logger
    assert len(again.handlers) == handlers
    assert again.level == logging.WARNING


def test_get_engine_logger_is_child(restore_engine_logger):
    assert get_engine_logger("recovery").name == "profile_engine.recovery"
    assert get_engine_logger("profile_engine.storage").name == "profile_engine.storage"
    assert get_engine_logger("demo", level="error").level == logging.ERROR
