"""Single-row input prompt with history and masked password entry."""

from __future__ import annotations

from typing import Optional

from terminus.cli.core.events import Complete, Completed, Event, ReadPassword, Validate
from terminus.cli.core.input import Key, KeyEvent
from terminus.cli.core.layout import MATCH_PARENT, Absolute
from terminus.cli.core.terminal import Screen
from terminus.cli.widgets.base import View

DEFAULT_HISTORY_SIZE = 100


class InputLine(View):
    """
    The prompt at the bottom of the console.

    ``cursor`` is a character offset into ``buf``. When the text is wider
    than the row it scrolls horizontally so the caret stays on screen.
    Submitted lines go to a history (at most ``history_size`` entries)
    walked with UP/DOWN; password entries are never recorded.
    """

    def __init__(self, screen: Screen, history_size: int = DEFAULT_HISTORY_SIZE) -> None:
        super().__init__(screen, width=MATCH_PARENT, height=Absolute(1))
        self.buf = ""
        self.cursor = 0
        self.masked = False
        self.history: list[str] = []
        self.history_size = history_size
        self._history_index: Optional[int] = None
        self._draft = ""

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def key(self, char: str) -> None:
        self.buf = self.buf[:self.cursor] + char + self.buf[self.cursor:]
        self.cursor += len(char)
        self.redraw()

    def backspace(self) -> None:
        if self.cursor > 0:
            self.buf = self.buf[:self.cursor - 1] + self.buf[self.cursor:]
            self.cursor -= 1
        self.redraw()

    def delete(self) -> None:
        if self.cursor < len(self.buf):
            self.buf = self.buf[:self.cursor] + self.buf[self.cursor + 1:]
        self.redraw()

    def home(self) -> None:
        self.cursor = 0
        self.redraw()

    def end(self) -> None:
        self.cursor = len(self.buf)
        self.redraw()

    def left(self) -> None:
        if self.cursor > 0:
            self.cursor -= 1
        self.redraw()

    def right(self) -> None:
        if self.cursor < len(self.buf):
            self.cursor += 1
        self.redraw()

    def backward_delete_word(self) -> None:
        """Delete the word before the caret, and the spaces between it and the caret."""
        start = self.cursor
        while start > 0 and self.buf[start - 1] == " ":
            start -= 1
        while start > 0 and self.buf[start - 1] != " ":
            start -= 1
        self.buf = self.buf[:start] + self.buf[self.cursor:]
        self.cursor = start
        self.redraw()

    def clear(self) -> None:
        self.buf = ""
        self.cursor = 0
        self._history_index = None
        self.redraw()

    def set_text(self, text: str) -> None:
        """Replace the whole line, caret at the end."""
        self.buf = text
        self.cursor = len(text)
        self.redraw()

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def previous(self) -> None:
        if not self.history or self.masked:
            return
        if self._history_index is None:
            self._draft = self.buf
            self._history_index = len(self.history) - 1
        elif self._history_index > 0:
            self._history_index -= 1
        self.set_text(self.history[self._history_index])

    def next(self) -> None:
        if self._history_index is None:
            return
        if self._history_index < len(self.history) - 1:
            self._history_index += 1
            self.set_text(self.history[self._history_index])
        else:
            self._history_index = None
            self.set_text(self._draft)

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def password(self) -> None:
        """Mask what is typed until the next :meth:`validate`."""
        self.masked = True
        self.clear()

    def validate(self) -> tuple[str, bool]:
        """Return ``(text, was_password)`` and reset the line."""
        text, was_password = self.buf, self.masked
        if text and not was_password:
            self.history.append(text)
            if len(self.history) > self.history_size:
                del self.history[:len(self.history) - self.history_size]
        self.masked = False
        self._draft = ""
        self.clear()
        return text, was_password

    # ------------------------------------------------------------------
    # View protocol
    # ------------------------------------------------------------------

    def redraw(self) -> None:
        # The caret has to end up on the prompt, so the cursor is not restored
        if not self.visible or not self.has_area:
            return
        with self.screen.session(restore_cursor=False):
            self.paint()
        self.dirty = False

    def _scroll(self, width: int) -> int:
        """First character shown so that the caret fits in ``width`` cells."""
        if width <= 0:
            return self.cursor
        return max(0, self.cursor - width + 1)

    def paint(self) -> None:
        width = self.w or 0
        text = "*" * len(self.buf) if self.masked else self.buf
        offset = self._scroll(width)
        shown = text[offset:offset + width]
        self.screen.goto(self.x, self.y)
        self.screen.write(shown + " " * (width - len(shown)))
        self.screen.goto(self.x + self.cursor - offset, self.y)
        self.screen.show_cursor()

    def on_event(self, event: Event) -> None:
        if isinstance(event, KeyEvent):
            self._handle_key(event)
        elif isinstance(event, Validate):
            event.slot.fill(self.validate())
        elif isinstance(event, Complete):
            event.slot.fill((self.buf, self.cursor, self.masked))
        elif isinstance(event, Completed):
            self.set_text(event.text)
        elif isinstance(event, ReadPassword):
            self.password()

    def _handle_key(self, event: KeyEvent) -> None:
        if event.is_char:
            self.key(event.char)  # type: ignore[arg-type]
        elif event.key == Key.BACKSPACE:
            self.backspace()
        elif event.key == Key.DELETE:
            self.delete()
        elif event.key == Key.HOME:
            self.home()
        elif event.key == Key.END:
            self.end()
        elif event.key == Key.UP:
            self.previous()
        elif event.key == Key.DOWN:
            self.next()
        elif event.key == Key.LEFT:
            self.left()
        elif event.key == Key.RIGHT:
            self.right()
        elif event.is_ctrl('w'):
            self.backward_delete_word()
