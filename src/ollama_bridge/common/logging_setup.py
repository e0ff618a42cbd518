"""Logging setup shared by the server and the CLI."""
from __future__ import annotations
import logging
import sys

FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"

# httpx/httpcore log every request at INFO; only surface them when debugging
NOISY_LOGGERS = ("httpx", "httpcore")


def resolve_level(level: int | str) -> int:
    """Accept 20 or "info"; unknown names fall back to INFO."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else logging.INFO


def setup_logging(level: int | str = logging.INFO) -> None:
    """
    Send bridge logs to stdout.

    Args:
        level: Root level, as an int or a name such as "DEBUG".
    """
    level = resolve_level(level)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(FORMAT))
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(level if level <= logging.DEBUG else logging.WARNING)
