"""Core TUI infrastructure - terminal I/O, input handling, sizing, events."""

from terminus.cli.core.terminal import Screen, ScreenSessionError, ScreenWriteError, Terminal, TerminalSize
from terminus.cli.core.input import CancellationToken, InputClosed, InputReader, Key, KeyEvent
from terminus.cli.core.layout import (
    MATCH_PARENT,
    WRAP_CONTENT,
    Absolute,
    Dimension,
    Orientation,
    WrapContentError,
    resolve_size,
)

__all__ = [
    "Screen",
    "ScreenSessionError",
    "ScreenWriteError",
    "Terminal",
    "TerminalSize",
    "CancellationToken",
    "InputClosed",
    "InputReader",
    "Key",
    "KeyEvent",
    "MATCH_PARENT",
    "WRAP_CONTENT",
    "Absolute",
    "Dimension",
    "Orientation",
    "WrapContentError",
    "resolve_size",
]
