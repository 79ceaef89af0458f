"""Logging configuration helpers."""

import logging

_LOGGER_NAME = "calories_daily"


def configure_logging(level: str = "INFO") -> None:
    """Configure the calories_daily logger once, with a single stream handler."""
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level.upper())
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s: %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    logger.propagate = False
