"""
Logging setup driven by the configured ``LOG_LEVEL``.
"""

import logging

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_LEVELS = {
    "fatal": logging.CRITICAL,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": TRACE,
}

# Names understood by uvicorn's --log-level
_UVICORN_LEVELS = {
    "fatal": "critical",
    "error": "error",
    "warn": "warning",
    "info": "info",
    "debug": "debug",
    "trace": "trace",
}


def resolve_level(name: str) -> int:
    """Map a configured level name to its ``logging`` level number."""
    return _LEVELS[name]


def uvicorn_level(name: str) -> str:
    return _UVICORN_LEVELS[name]


def configure_logging(level_name: str) -> None:
    """Configure the root logger for the service."""
    level = resolve_level(level_name)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # basicConfig is a no-op once handlers exist; the level must still follow
    logging.getLogger().setLevel(level)
