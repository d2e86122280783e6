"""Logging configuration helpers."""

import logging

_PACKAGE_LOGGER = "eye_health_tracker"
# Client libraries log every request at INFO.
_NOISY_LOGGERS = ("httpx", "httpcore", "openai")


def configure_logging(level: str = "INFO") -> None:
    """Configure the package logger with a single stream handler."""
    logger = logging.getLogger(_PACKAGE_LOGGER)
    logger.setLevel(level.upper())
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    logger.propagate = False
