"""Terminal I/O: mode switching and the screen that views paint into."""

from __future__ import annotations

import os
import sys
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional, TextIO

from terminus.core.style import RESET, Style
from terminus.errors import TerminusError
from terminus.log import get_logger

logger = get_logger(__name__)

DEFAULT_FLUSH_RETRIES = 16


class ScreenSessionError(TerminusError, RuntimeError):
    """A write-sequence was started while another was in flight, or writes happened outside one."""


class ScreenWriteError(TerminusError, OSError):
    """The output stream kept failing after every retry."""


@dataclass(frozen=True)
class TerminalSize:
    """Terminal dimensions."""
    rows: int
    cols: int


class Terminal:
    """Process-level terminal state: size and input/output modes."""

    @staticmethod
    def size() -> TerminalSize:
        """Get current terminal dimensions."""
        try:
            size = os.get_terminal_size()
            return TerminalSize(size.lines, size.columns)
        except OSError:
            return TerminalSize(24, 80)

    @staticmethod
    @contextmanager
    def raw_mode() -> Iterator[None]:
        """Context manager for raw terminal mode (Unix only)."""
        try:
            import termios
            import tty
        except ImportError:
            # Windows or no termios - just yield
            yield
            return
        fd = sys.stdin.fileno()
        old_settings = termios.tcgetattr(fd)
        try:
            tty.setraw(fd)
            yield
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)

    @staticmethod
    @contextmanager
    def alternate_screen(stream: Optional[TextIO] = None) -> Iterator[None]:
        """Use alternate screen buffer (preserves scrollback)."""
        out = stream or sys.stdout
        out.write('\x1b[?1049h')
        out.flush()
        try:
            yield
        finally:
            out.write('\x1b[?1049l')
            out.flush()

    @staticmethod
    @contextmanager
    def managed_mode(stream: Optional[TextIO] = None) -> Iterator[None]:
        """Full TUI mode: alternate screen and raw input, attributes reset on exit."""
        out = stream or sys.stdout
        with Terminal.alternate_screen(out):
            try:
                with Terminal.raw_mode():
                    yield
            finally:
                out.write(RESET + '\x1b[?25h')
                out.flush()


class Screen:
    """
    The single shared output sink views paint into.

    Painting happens inside :meth:`session`: output is buffered while the
    session is open and written out in one flush when it closes. Sessions
    do not nest; opening a second one while the first is in flight raises
    :class:`ScreenSessionError`.

    Coordinates are 1-based terminal cells, ``x`` is the column and ``y``
    the row.
    """

    def __init__(self, stream: Optional[TextIO] = None, flush_retries: int = DEFAULT_FLUSH_RETRIES) -> None:
        self.stream = stream if stream is not None else sys.stdout
        self.flush_retries = max(1, flush_retries)
        self._lock = threading.Lock()
        self._pending: list[str] = []

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    @contextmanager
    def session(self, restore_cursor: bool = True) -> Iterator[Screen]:
        """
        Open a write-sequence.

        With ``restore_cursor`` the caret is put back where it was before
        the session, so painting a bar does not move the input caret.
        """
        if not self._lock.acquire(blocking=False):
            raise ScreenSessionError("screen is already being written to")
        try:
            if restore_cursor:
                self._pending.append('\x1b7')
            yield self
            if restore_cursor:
                self._pending.append('\x1b8')
            self.flush()
        finally:
            self._pending.clear()
            self._lock.release()

    def _require_session(self) -> None:
        if not self._lock.locked():
            raise ScreenSessionError("screen writes must happen inside a session")

    def goto(self, x: int, y: int) -> None:
        """Move the caret to column ``x``, row ``y``."""
        self._require_session()
        self._pending.append(f'\x1b[{y};{x}H')

    def write(self, text: str, style: Optional[Style] = None) -> None:
        """Write a run of text at the caret, optionally styled."""
        self._require_session()
        if style is None or style.is_plain:
            self._pending.append(text)
        else:
            self._pending.append(f"{style.sgr()}{text}{RESET}")

    def clear_rect(self, x: int, y: int, w: int, h: int) -> None:
        """Blank a rectangle of ``w`` x ``h`` cells with its top-left at (x, y)."""
        self._require_session()
        if w <= 0:
            return
        blank = RESET + " " * w
        for row in range(h):
            self._pending.append(f'\x1b[{y + row};{x}H{blank}')

    def clear(self) -> None:
        """Clear the whole screen."""
        self._require_session()
        self._pending.append(RESET + '\x1b[2J\x1b[H')

    def show_cursor(self) -> None:
        self._require_session()
        self._pending.append('\x1b[?25h')

    def bell(self) -> None:
        self._require_session()
        self._pending.append('\x07')

    def flush(self) -> None:
        """
        Write everything buffered so far to the stream.

        Failed writes are retried up to ``flush_retries`` times before
        :class:`ScreenWriteError` is raised.
        """
        if not self._pending:
            return
        data = "".join(self._pending)
        last_error: Optional[OSError] = None
        for attempt in range(self.flush_retries):
            try:
                self.stream.write(data)
                self.stream.flush()
                self._pending.clear()
                return
            except OSError as e:
                last_error = e
                logger.debug("screen flush failed (attempt %d): %s", attempt + 1, e)
        raise ScreenWriteError(f"could not write to terminal after {self.flush_retries} attempts") from last_error
