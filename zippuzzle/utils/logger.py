"""Logging setup shared by the generator, the session engine and the CLI."""

from __future__ import annotations

import logging
from typing import IO, Optional, Union

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
DATE_FORMAT = "%H:%M:%S"


def parse_level(level: Union[int, str]) -> int:
    """Turn ``"debug"``, ``"WARNING"`` or ``10`` into a logging level.

    Unknown names fall back to INFO.
    """

    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else logging.INFO


def configure_logging(
    level: Union[int, str] = logging.INFO, stream: Optional[IO[str]] = None
) -> None:
    """Install a single stream handler on the root logger.

    Each generation attempt logs one INFO line and, when it fails, one
    WARNING with the reason; search internals stay at DEBUG.
    """

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(parse_level(level))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a namespaced logger, configuring defaults if needed."""

    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name or "zippuzzle")
