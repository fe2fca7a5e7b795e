"""Logging setup shared by the composition root and scripts."""

import logging
import os
from typing import Optional

import structlog

_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: Optional[str] = None) -> int:
    """
    Configure stdlib logging and structlog.

    Args:
        level: Level name; defaults to LOG_LEVEL env var, then INFO.
            Unknown names fall back to INFO.

    Returns:
        The numeric level applied
    """
    name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    numeric = getattr(logging, name, None)
    if not isinstance(numeric, int):
        numeric = logging.INFO

    logging.basicConfig(level=numeric, format=_FORMAT)

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric),
    )
    return numeric
