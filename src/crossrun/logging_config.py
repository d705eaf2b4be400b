# crossrun/logging_config.py
"""
Opt-in logging setup for crossrun.

The library only emits records through module loggers under "crossrun";
nothing is printed until setup_logging() attaches a handler.
"""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "crossrun"

FORMATS = {
    "simple": "%(levelname)s %(name)s: %(message)s",
    "detailed": "%(asctime)s %(levelname)s [%(name)s:%(lineno)d] %(message)s",
}

_handler: logging.Handler | None = None


def setup_logging(
    level: int | str = "INFO",
    format: str = "simple",
    format_string: str | None = None,
    propagate: bool = False,
) -> logging.Logger:
    """
    Attach a stderr handler to the crossrun logger.

    Calling it again replaces the handler installed by the previous call.

    Args:
        level: Logging level name or number
        format: "simple" or "detailed"
        format_string: Custom format, overrides `format`
        propagate: Also pass records to the root logger
    """
    global _handler
    logger = logging.getLogger(LOGGER_NAME)
    if isinstance(level, str):
        level = level.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level '{level}'")

    if _handler is not None:
        logger.removeHandler(_handler)

    if format_string is None:
        if format not in FORMATS:
            raise ValueError(f"Unknown log format '{format}': expected one of {sorted(FORMATS)}")
        format_string = FORMATS[format]

    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter(format_string))
    logger.addHandler(_handler)
    logger.setLevel(level)
    logger.propagate = propagate
    logger.disabled = False
    return logger


def disable_logging() -> None:
    """Silence the crossrun logger entirely (handy in tests)."""
    global _handler
    logger = logging.getLogger(LOGGER_NAME)
    if _handler is not None:
        logger.removeHandler(_handler)
        _handler = None
    logger.disabled = True
