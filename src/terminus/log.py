"""
Logging setup for terminus.

The console owns the terminal while it runs, so records must never go to
the screen being drawn: :func:`setup_logging` sends them to a file, or to
an explicit stream for non-interactive commands.
"""

from __future__ import annotations

import logging
from typing import Optional, TextIO, Union

# Package root logger
_root_logger = logging.getLogger("terminus")
_root_logger.addHandler(logging.NullHandler())

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _to_level(level: Union[str, int]) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.WARNING)
    return level


def setup_logging(
    level: Union[str, int] = "WARNING",
    file: Optional[str] = None,
    stream: Optional[TextIO] = None,
    format: Optional[str] = None,
) -> None:
    """
    Configure the ``terminus`` logger.

    Args:
        level: Log level name (DEBUG, INFO, ...) or number
        file: Path of a log file; takes precedence over ``stream``
        stream: Stream for records when no file is given
        format: Custom format string

    Without ``file`` or ``stream`` records are dropped.
    """
    level = _to_level(level)
    _root_logger.setLevel(level)
    for old in list(_root_logger.handlers):
        _root_logger.removeHandler(old)
        old.close()

    handler: logging.Handler
    if file:
        handler = logging.FileHandler(file, encoding="utf-8")
    elif stream is not None:
        handler = logging.StreamHandler(stream)
    else:
        handler = logging.NullHandler()

    handler.setFormatter(logging.Formatter(format or DEFAULT_FORMAT))
    handler.setLevel(level)
    _root_logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a child of the ``terminus`` logger (module ``__name__`` or a short name)."""
    if name == "terminus" or name.startswith("terminus."):
        return logging.getLogger(name)
    return logging.getLogger(f"terminus.{name}")
