"""Top bar showing the name of the current window."""

from __future__ import annotations

from typing import Optional

from terminus.cli.core.ansi_text import fit
from terminus.cli.core.events import ChangeWindow, Event
from terminus.cli.core.layout import MATCH_PARENT, Absolute
from terminus.cli.core.terminal import Screen
from terminus.cli.widgets.base import View
from terminus.core.style import Style

DEFAULT_STYLE = Style.from_names(fg="white", bg="blue")


class TitleBar(View):
    """One-row bar across the top of the console."""

    def __init__(self, screen: Screen, style: Optional[Style] = None) -> None:
        super().__init__(screen, width=MATCH_PARENT, height=Absolute(1))
        self.style = style or DEFAULT_STYLE
        self.window_name: Optional[str] = None

    def set_name(self, name: str) -> None:
        self.window_name = name
        self.redraw()

    def paint(self) -> None:
        text = f" {self.window_name}" if self.window_name else ""
        self.screen.goto(self.x, self.y)
        self.screen.write(fit(text, self.w or 0), self.style)

    def on_event(self, event: Event) -> None:
        if isinstance(event, ChangeWindow):
            self.set_name(event.name)
