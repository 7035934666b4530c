"""Window list bar: open windows, the current one, and those with unseen activity."""

from __future__ import annotations

from typing import Optional

from terminus.cli.core.ansi_text import fit, truncate, visible_len
from terminus.cli.core.events import AddWindow, ChangeWindow, CloseWindow, Connected, Event
from terminus.cli.core.layout import MATCH_PARENT, Absolute
from terminus.cli.core.terminal import Screen
from terminus.cli.widgets.base import View
from terminus.core.style import BOLD, NO_BOLD, Style

DEFAULT_STYLE = Style.from_names(fg="white", bg="blue")


class WinBar(View):
    """
    One-row bar listing windows.

    The connected account is shown on the left and the windows on the
    right, ``-N: name-`` for the current one and ``[N: name]`` for the
    others, bold when they have unseen activity. Windows that do not fit
    are left out.
    """

    def __init__(self, screen: Screen, style: Optional[Style] = None) -> None:
        super().__init__(screen, width=MATCH_PARENT, height=Absolute(1))
        self.style = style or DEFAULT_STYLE
        self.connection: Optional[str] = None
        self.windows: list[str] = []
        self.current_window: Optional[str] = None
        self.highlighted: list[str] = []

    def add_window(self, name: str) -> None:
        self.windows.append(name)
        self.redraw()

    def remove_window(self, name: str) -> None:
        if name in self.windows:
            self.windows.remove(name)
        if name in self.highlighted:
            self.highlighted.remove(name)
        if self.current_window == name:
            self.current_window = None
        self.redraw()

    def set_current_window(self, name: str) -> None:
        self.current_window = name
        self.highlighted = [w for w in self.highlighted if w != name]
        self.redraw()

    def highlight_window(self, name: str) -> None:
        """Flag ``name`` as having unseen activity (never the current window)."""
        if name == self.current_window or name in self.highlighted:
            return
        self.highlighted.append(name)
        self.redraw()

    def set_connection(self, account: str) -> None:
        self.connection = account
        self.redraw()

    def _window_labels(self, width: int) -> str:
        labels: list[str] = []
        used = 0
        for index, window in enumerate(self.windows, start=1):
            if window == self.current_window:
                label = f"-{index}: {window}- "
                styled = label
            else:
                label = f"[{index}: {window}] "
                styled = f"{BOLD}{label}{NO_BOLD}" if window in self.highlighted else label
            if used + len(label) >= width:
                break
            labels.append(styled)
            used += len(label)
        return "".join(labels)

    def paint(self) -> None:
        width = self.w or 0
        left = f" {self.connection}" if self.connection else ""
        windows = self._window_labels(width)
        gap = width - visible_len(left) - visible_len(windows)
        if gap < 0:
            # Window list wins over the account label
            left = truncate(left, max(0, width - visible_len(windows)))
            gap = max(0, width - visible_len(left) - visible_len(windows))
        self.screen.goto(self.x, self.y)
        self.screen.write(fit(left + " " * gap + windows, width), self.style)

    def on_event(self, event: Event) -> None:
        if isinstance(event, ChangeWindow):
            self.set_current_window(event.name)
        elif isinstance(event, AddWindow):
            self.add_window(event.name)
        elif isinstance(event, CloseWindow):
            self.remove_window(event.name)
        elif isinstance(event, Connected):
            self.set_connection(event.account)
