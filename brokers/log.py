# file: log.py
"""Logging setup driven by environment variables."""

import logging
import os
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Attach a stdout handler to the package logger.

    Level comes from the argument, then ``LOG_LEVEL``, then INFO. Calling this
    twice replaces the previous handler instead of stacking a second one.
    """
    level_name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    logger = logging.getLogger("brokers")
    logger.setLevel(log_level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter(os.environ.get("LOG_FORMAT", LOG_FORMAT)))
    logger.addHandler(handler)

    logging.getLogger("urllib3").setLevel(logging.WARNING)
