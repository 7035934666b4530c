"""Keyboard input decoding and the cancellable input reader."""

from __future__ import annotations

import os
import select
import sys
import time
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from terminus.errors import TerminusError
from terminus.log import get_logger

logger = get_logger(__name__)


class InputClosed(TerminusError, EOFError):
    """The input stream ended because shutdown was requested."""


class CancellationToken:
    """
    Shutdown flag handed from the event loop to the input reader.

    The quit path calls :meth:`cancel`; the reader notices on its next read.
    """

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class Key(Enum):
    """Named key constants."""
    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    ENTER = auto()
    ESCAPE = auto()
    TAB = auto()
    BACKSPACE = auto()
    DELETE = auto()
    HOME = auto()
    END = auto()
    PAGE_UP = auto()
    PAGE_DOWN = auto()
    CTRL = auto()       # Control chord, letter in KeyEvent.char


@dataclass(frozen=True)
class KeyEvent:
    """Represents a keyboard input event."""
    key: Optional[Key] = None  # Named key if recognized
    char: Optional[str] = None  # Character if printable, letter for CTRL
    raw: str = ""  # Raw escape sequence

    @classmethod
    def of_char(cls, char: str) -> KeyEvent:
        return cls(char=char, raw=char)

    @classmethod
    def ctrl(cls, letter: str) -> KeyEvent:
        return cls(key=Key.CTRL, char=letter, raw=chr(ord(letter) - ord('a') + 1))

    @property
    def is_char(self) -> bool:
        """Check if this is a printable character."""
        return self.char is not None and self.key is None

    def is_ctrl(self, letter: str) -> bool:
        return self.key is Key.CTRL and self.char == letter


class InputReader:
    """
    Non-blocking keyboard input reader.

    Uses os.read() to bypass Python's I/O buffering and properly
    handle escape sequences that may arrive split across reads.
    Once the cancellation token is set every read raises :class:`InputClosed`.
    """

    # Escape sequence mappings (without the \x1b prefix)
    SEQUENCES: dict[str, Key] = {
        # Arrow keys (CSI)
        '[A': Key.UP,
        '[B': Key.DOWN,
        '[C': Key.RIGHT,
        '[D': Key.LEFT,
        # Arrow keys (SS3 - application mode)
        'OA': Key.UP,
        'OB': Key.DOWN,
        'OC': Key.RIGHT,
        'OD': Key.LEFT,
        # Navigation
        '[H': Key.HOME,
        '[F': Key.END,
        'OH': Key.HOME,
        'OF': Key.END,
        '[1~': Key.HOME,
        '[4~': Key.END,
        '[7~': Key.HOME,
        '[8~': Key.END,
        '[5~': Key.PAGE_UP,
        '[6~': Key.PAGE_DOWN,
        '[3~': Key.DELETE,
    }

    SIMPLE_KEYS: dict[str, Key] = {
        '\r': Key.ENTER,
        '\n': Key.ENTER,
        '\t': Key.TAB,
        '\x7f': Key.BACKSPACE,
        '\x08': Key.BACKSPACE,
    }

    def __init__(self, token: CancellationToken, fd: Optional[int] = None) -> None:
        self.token = token
        self._buffer = ""
        self._fd = sys.stdin.fileno() if fd is None else fd

    def feed(self, data: str) -> None:
        """Queue raw input to be decoded ahead of anything read from the descriptor."""
        self._buffer += data

    def read(self, timeout: float = 0.1) -> Optional[KeyEvent]:
        """
        Read a single key event.

        Returns None if no input available within timeout.

        Raises:
            InputClosed: the cancellation token has been set.
        """
        if self.token.cancelled:
            raise InputClosed("input closed")

        # Process any buffered input first
        if self._buffer:
            return self._process_buffer()

        if not self._has_input(timeout):
            return None

        self._read_available()

        if self._buffer:
            return self._process_buffer()

        return None

    def _read_available(self) -> None:
        """Read all currently available input into buffer using os.read."""
        try:
            data = os.read(self._fd, 1024)
            self._buffer += data.decode('utf-8', errors='replace')
        except (OSError, BlockingIOError) as e:
            logger.debug("input read failed: %s", e)

        # If buffer is just escape, wait for potential sequence
        if self._buffer == '\x1b':
            self._wait_for_escape_sequence()

    def _wait_for_escape_sequence(self) -> None:
        """Wait up to 100ms for the rest of an escape sequence."""
        deadline = time.monotonic() + 0.1

        while time.monotonic() < deadline:
            wait_time = min(deadline - time.monotonic(), 0.025)
            if wait_time <= 0:
                break

            if self._has_input(wait_time):
                try:
                    data = os.read(self._fd, 1024)
                    self._buffer += data.decode('utf-8', errors='replace')
                except (OSError, BlockingIOError) as e:
                    logger.debug("input read failed: %s", e)

                if len(self._buffer) > 1:
                    rest = self._buffer[1:]
                    # Sequence ends with letter or ~
                    if rest[-1].isalpha() or rest[-1] == '~' or rest in self.SEQUENCES:
                        return

    def _process_buffer(self) -> Optional[KeyEvent]:
        """Decode the next key event from the buffer."""
        if not self._buffer:
            return None

        ch = self._buffer[0]

        if ch in self.SIMPLE_KEYS:
            self._buffer = self._buffer[1:]
            return KeyEvent(key=self.SIMPLE_KEYS[ch], raw=ch)

        if ch == '\x1b':
            return self._parse_escape_sequence()

        # Ctrl-A .. Ctrl-Z (tab, enter and backspace were handled above)
        if '\x01' <= ch <= '\x1a':
            self._buffer = self._buffer[1:]
            return KeyEvent(key=Key.CTRL, char=chr(ord(ch) + ord('a') - 1), raw=ch)

        if ch.isprintable():
            self._buffer = self._buffer[1:]
            return KeyEvent.of_char(ch)

        # Unknown control character - skip it
        self._buffer = self._buffer[1:]
        return None

    def _parse_escape_sequence(self) -> KeyEvent:
        """Parse an escape sequence from the buffer."""
        if len(self._buffer) == 1:
            self._buffer = ""
            return KeyEvent(key=Key.ESCAPE, raw='\x1b')

        rest = self._buffer[1:]

        # Find where this sequence ends
        end_idx = 0
        for i, ch in enumerate(rest):
            if ch == '\x1b':
                end_idx = i
                break
            # The introducer after ESC is '[' or 'O', never the terminator
            if i > 0 and (ch.isalpha() or ch == '~'):
                end_idx = i + 1
                break
            end_idx = i + 1

        if end_idx == 0:
            self._buffer = self._buffer[1:]
            return KeyEvent(key=Key.ESCAPE, raw='\x1b')

        seq = rest[:end_idx]
        self._buffer = self._buffer[1 + end_idx:]
        raw = '\x1b' + seq
        if seq in self.SEQUENCES:
            return KeyEvent(key=self.SEQUENCES[seq], raw=raw)

        # Unknown sequence
        return KeyEvent(raw=raw)

    def _has_input(self, timeout: float) -> bool:
        """Check if input is available within timeout."""
        try:
            ready, _, _ = select.select([self._fd], [], [], timeout)
            return bool(ready)
        except (ValueError, OSError):
            return False
