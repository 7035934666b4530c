"""Shared fixtures: an in-memory screen, simple leaf views and a started console."""

import io
import re
from typing import Optional

import pytest

from terminus.cli.core.layout import MATCH_PARENT, Dimension
from terminus.cli.core.terminal import Screen
from terminus.cli.studio.console import ConsoleApp
from terminus.cli.widgets.base import View

_GOTO = re.compile(r'\x1b\[(\d+);(\d+)H')


class Block(View):
    """Leaf view filling its area with one character."""

    def __init__(self, screen: Screen, width: Dimension = MATCH_PARENT, height: Dimension = MATCH_PARENT, fill: str = "#") -> None:
        super().__init__(screen, width, height)
        self.fill = fill
        self.paints = 0

    def paint(self) -> None:
        self.paints += 1
        for row in range(self.h or 0):
            self.screen.goto(self.x, self.y + row)
            self.screen.write(self.fill * (self.w or 0))


def output(screen: Screen) -> str:
    """Everything written to an in-memory screen so far."""
    return screen.stream.getvalue()  # type: ignore[attr-defined]


def goto_targets(text: str) -> list[tuple[int, int]]:
    """(x, y) of every caret move in ``text``."""
    return [(int(col), int(row)) for row, col in _GOTO.findall(text)]


@pytest.fixture
def stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def screen(stream: io.StringIO) -> Screen:
    return Screen(stream)


@pytest.fixture
def app(screen: Screen) -> ConsoleApp:
    """Console started on an 80x24 in-memory terminal."""
    console = ConsoleApp(screen=screen)
    console.start(80, 24)
    return console


@pytest.fixture
def sent() -> list:
    return []


@pytest.fixture
def chat_app(screen: Screen, sent: list) -> ConsoleApp:
    """Console recording outgoing chat messages in ``sent``."""
    console = ConsoleApp(screen=screen, on_send=sent.append)
    console.start(80, 24)
    return console


def type_text(app: ConsoleApp, text: str, enter: bool = False) -> None:
    from terminus.cli.core.input import Key, KeyEvent

    for ch in text:
        app.post(KeyEvent.of_char(ch))
    if enter:
        app.post(KeyEvent(key=Key.ENTER, raw="\r"))
    app.pump()


def press(app: ConsoleApp, key, char: Optional[str] = None) -> None:
    from terminus.cli.core.input import KeyEvent

    app.post(KeyEvent(key=key, char=char))
    app.pump()
