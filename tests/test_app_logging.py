"""Tests for logging configuration."""

import logging

from eye_health_tracker.app_logging import configure_logging


def test_configure_logging_adds_one_handler() -> None:
    logger = logging.getLogger("eye_health_tracker")
    logger.handlers.clear()

    configure_logging()
    configure_logging()

    assert len(logger.handlers) == 1
    assert logger.propagate is False


def test_configure_logging_applies_level() -> None:
    configure_logging("debug")

    assert logging.getLogger("eye_health_tracker").level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING

    configure_logging()
