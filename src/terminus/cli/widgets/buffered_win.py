"""Scrollback window: a deduplicating, pageable message log."""

from __future__ import annotations

from typing import Callable, Generic, Hashable, Optional, TypeVar

from terminus.cli.core.ansi_text import fit, wrap
from terminus.cli.core.events import Event, MessageReceived
from terminus.cli.core.input import Key, KeyEvent
from terminus.cli.core.terminal import Screen
from terminus.cli.widgets.base import View
from terminus.core.message import Message
from terminus.core.style import RESET
from terminus.log import get_logger

logger = get_logger(__name__)

T = TypeVar("T", bound=Message)


class BufferedWin(View, Generic[T]):
    """
    Append-only message log, newest line last.

    Messages are keyed by ``identity``: inserting one whose identity was
    already seen does nothing, so a transport redelivering messages does
    not duplicate them on screen.

    ``view`` is the scroll offset in display lines back from the newest
    line (0 = following the tail). Page up/down move it by one window
    height, never past the oldest line.

    The history is not bounded; every message stays in memory for the life
    of the window. Display lines are rebuilt from ``buf`` on each redraw.
    """

    def __init__(
        self,
        screen: Screen,
        accept: Optional[Callable[[Message], bool]] = None,
    ) -> None:
        super().__init__(screen)
        self.buf: list[T] = []
        self.view = 0
        self._index: dict[Hashable, int] = {}
        self._accept = accept

    def __len__(self) -> int:
        return len(self.buf)

    def __contains__(self, message: object) -> bool:
        identity = getattr(message, "identity", None)
        return identity is not None and identity in self._index

    def get(self, identity: Hashable) -> Optional[T]:
        position = self._index.get(identity)
        return None if position is None else self.buf[position]

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def insert(self, message: T) -> bool:
        """
        Append ``message`` unless its identity is already in the log.

        Returns True if the message was added.
        """
        identity = message.identity
        if identity in self._index:
            logger.debug("dropping duplicate message %r", identity)
            return False
        self._index[identity] = len(self.buf)
        self.buf.append(message)
        self.redraw()
        return True

    def clear(self) -> None:
        """Forget every message."""
        self.buf.clear()
        self._index.clear()
        self.view = 0
        self.redraw()

    def lines(self) -> list[str]:
        """All display lines, oldest first, wrapped to the window width."""
        width = self.w or 0
        flattened: list[str] = []
        for message in self.buf:
            for line in message.lines():
                flattened.extend(wrap(line, width))
        return flattened

    @property
    def total_lines(self) -> int:
        return len(self.lines())

    def visible_lines(self) -> list[str]:
        """Lines inside the viewport, top to bottom."""
        height = self.h or 0
        if height == 0:
            return []
        lines = self.lines()
        end = len(lines) - self.view
        start = max(0, end - height)
        return lines[start:end]

    # ------------------------------------------------------------------
    # Scrolling
    # ------------------------------------------------------------------

    def _max_view(self) -> int:
        return max(0, self.total_lines - (self.h or 0))

    def page_up(self) -> None:
        if not self.h:
            return
        self.view = min(self.view + self.h, self._max_view())
        self.redraw()

    def page_down(self) -> None:
        if not self.h:
            return
        self.view = max(0, self.view - self.h)
        self.redraw()

    def bell(self) -> None:
        """Ring the terminal bell."""
        with self.screen.session():
            self.screen.bell()

    # ------------------------------------------------------------------
    # View protocol
    # ------------------------------------------------------------------

    def measure(self, width_spec: Optional[int], height_spec: Optional[int]) -> None:
        super().measure(width_spec, height_spec)
        # A real area can shrink the scrollable range; an unconstrained pass says nothing about it
        if self.w and self.h:
            self.view = min(self.view, self._max_view())

    def paint(self) -> None:
        width = self.w or 0
        rows = self.visible_lines()
        for row in range(self.h or 0):
            self.screen.goto(self.x, self.y + row)
            if row < len(rows):
                self.screen.write(fit(rows[row], width) + RESET)
            else:
                self.screen.write(" " * width)

    def on_event(self, event: Event) -> None:
        if isinstance(event, KeyEvent):
            if event.key is Key.PAGE_UP:
                self.page_up()
            elif event.key is Key.PAGE_DOWN:
                self.page_down()
        elif isinstance(event, MessageReceived) and self._accept is not None:
            if self._accept(event.message):
                self.insert(event.message)  # type: ignore[arg-type]
