# profile_engine/core/logging_config.py

import logging
import sys
from typing import Optional

from pythonjsonlogger import jsonlogger

from .config import APP_VERSION


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record, record, message_dict):
        super(CustomJsonFormatter, self).add_fields(log_record, record, message_dict)
        if not log_record.get('timestamp'):
            # Add a timestamp if not already present
            log_record['timestamp'] = record.created
        if log_record.get('level'):
            log_record['level'] = log_record['level'].upper()
        else:
            log_record['level'] = record.levelname

        log_record['category'] = getattr(record, 'category', None) or 'unknown'
        log_record['version'] = f"v{APP_VERSION}"
        log_record['module'] = record.module
        log_record['lineno'] = record.lineno


def setup_logging(log_level_str: str = "INFO") -> logging.Logger:
    """
    Configures structured JSON logging for the engine and returns the
    `profile_engine` logger. Safe to call more than once: the level is
    updated, the handler is only attached the first time.
    """
    log_level = getattr(logging, log_level_str.upper(), logging.INFO)

    engine_logger = logging.getLogger("profile_engine")
    engine_logger.setLevel(log_level)

    if not any(isinstance(h, logging.StreamHandler) and isinstance(h.formatter, CustomJsonFormatter) for h in engine_logger.handlers):
        log_handler = logging.StreamHandler(sys.stdout)
        formatter = CustomJsonFormatter('%(timestamp)s %(level)s %(name)s %(category)s %(message)s')
        log_handler.setFormatter(formatter)
        engine_logger.addHandler(log_handler)
        engine_logger.info(
            f"Structured JSON logging configured with level: {logging.getLevelName(log_level)}",
            extra={"category": "app"},
        )
    return engine_logger


def get_engine_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Returns a child of the `profile_engine` logger, optionally pinned to a level.
    This is the logger engine units expect to be handed.
    """
    child = logging.getLogger(name if name.startswith("profile_engine") else f"profile_engine.{name}")
    if level:
        child.setLevel(getattr(logging, level.upper(), logging.INFO))
    return child


if __name__ == '__main__':
    setup_logging(log_level_str="DEBUG")
    log = get_engine_logger("demo")
    log.debug("This is a debug message.", extra={"category": "scoring"})
    log.info("Profile computed.", extra={"category": "scoring", "answers": 86})
    log.warning("Filtered out non-primitive score", extra={"category": "scoring", "key": "values_profile"})
