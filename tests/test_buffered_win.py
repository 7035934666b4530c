"""Tests for the scrollback window."""

from datetime import datetime, timezone

import pytest

from terminus.cli.core.events import MessageReceived
from terminus.cli.core.input import Key, KeyEvent
from terminus.cli.core.ansi_text import strip_ansi, visible_len
from terminus.cli.widgets.buffered_win import BufferedWin
from terminus.cli.widgets.frame_layout import FrameLayout
from terminus.cli.widgets.linear_layout import LinearLayout
from terminus.core.message import ChatMessage, LogMessage

from conftest import output

NOON = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def log(body: str, id: str = None) -> LogMessage:
    if id is None:
        return LogMessage(body, timestamp=NOON)
    return LogMessage(body, id=id, timestamp=NOON)


@pytest.fixture
def win(screen) -> BufferedWin:
    view = BufferedWin(screen)
    view.measure(80, 10)
    view.layout(1, 1)
    return view


def fill(view: BufferedWin, count: int) -> None:
    for n in range(count):
        view.insert(log(f"line {n}"))


class TestInsert:
    """Deduplicating ingestion."""

    def test_same_identity_twice(self, win) -> None:
        message = log("hello", id="m1")
        assert win.insert(message) is True
        lines = win.total_lines

        assert win.insert(message) is False
        assert len(win.buf) == 1
        assert win.total_lines == lines

    def test_redelivered_copy_is_dropped(self, win) -> None:
        message = log("hello", id="m1")
        win.insert(message)
        win.insert(message.copy())
        assert len(win) == 1
        assert message.copy() in win

    def test_distinct_messages_are_kept(self, win) -> None:
        win.insert(log("same text"))
        win.insert(log("same text"))
        assert len(win) == 2

    def test_get_by_identity(self, win) -> None:
        message = log("hello", id="m1")
        win.insert(message)
        assert win.get("m1") is message
        assert win.get("missing") is None

    def test_clear(self, win) -> None:
        fill(win, 3)
        win.clear()
        assert len(win) == 0
        assert win.total_lines == 0
        # Identities are forgotten too
        win.insert(log("again", id="x"))
        assert len(win) == 1


class TestLines:
    """Flattening messages into display lines."""

    def test_multi_line_message(self, win) -> None:
        win.insert(log("one\ntwo\nthree"))
        assert win.total_lines == 3
        assert [strip_ansi(line).split(" - ", 1)[1] for line in win.lines()] == ["one", "two", "three"]

    def test_long_line_wraps_to_width(self, screen) -> None:
        view = BufferedWin(screen)
        view.measure(20, 5)
        view.insert(log("x" * 30))
        lines = view.lines()
        assert len(lines) == 3
        assert all(visible_len(line) <= 20 for line in lines)

    def test_chat_continuation_lines_are_padded(self, win) -> None:
        message = ChatMessage.incoming("alice@example.org", "me@example.org", "hi\nthere", timestamp=NOON)
        win.insert(message)
        first, second = (strip_ansi(line) for line in win.lines())
        assert first.endswith("alice@example.org: hi")
        assert second.strip() == "there"
        assert second.index("there") == first.index("hi")

    def test_visible_lines_follow_tail(self, win) -> None:
        fill(win, 15)
        shown = [strip_ansi(line) for line in win.visible_lines()]
        assert len(shown) == 10
        assert shown[0].endswith("line 5")
        assert shown[-1].endswith("line 14")


class TestScroll:
    """Paging through history."""

    def test_nothing_to_scroll(self, win) -> None:
        fill(win, 5)
        win.page_up()
        assert win.view == 0

    def test_page_up_clamped_at_oldest_line(self, win) -> None:
        fill(win, 30)
        win.page_up()
        assert win.view == 10
        win.page_up()
        assert win.view == 20
        win.page_up()
        assert win.view == 20
        assert strip_ansi(win.visible_lines()[0]).endswith("line 0")

    def test_page_down_clamped_at_zero(self, win) -> None:
        fill(win, 30)
        win.page_up()
        win.page_up()
        win.page_down()
        assert win.view == 10
        win.page_down()
        win.page_down()
        assert win.view == 0

    def test_view_stays_in_bounds(self, win) -> None:
        fill(win, 23)
        for _ in range(5):
            win.page_up()
            assert 0 <= win.view <= max(0, win.total_lines - win.h)
        for _ in range(5):
            win.page_down()
            assert 0 <= win.view <= max(0, win.total_lines - win.h)

    def test_taller_window_clamps_offset(self, win) -> None:
        fill(win, 30)
        win.page_up()
        win.page_up()
        win.measure(80, 25)
        assert win.view == 5

    def test_remeasure_inside_layout_keeps_offset(self, screen) -> None:
        view = BufferedWin(screen)
        root = LinearLayout(screen, children=[FrameLayout(screen, child=view)])
        root.measure(10, 1)
        root.layout(1, 1)
        # 40 visible characters: four rows of ten
        view.insert(log("x" * 29))
        for _ in range(3):
            view.page_up()
        assert view.view == 3

        root.measure(10, 1)

        assert view.view == 3

    def test_page_keys(self, win) -> None:
        fill(win, 30)
        win.event(KeyEvent(key=Key.PAGE_UP))
        assert win.view == 10
        win.event(KeyEvent(key=Key.PAGE_DOWN))
        assert win.view == 0


class TestEvents:
    """Messages arriving as events."""

    def test_accept_filter(self, screen) -> None:
        view = BufferedWin(screen, accept=lambda m: isinstance(m, LogMessage))
        view.event(MessageReceived(log("kept")))
        view.event(MessageReceived(ChatMessage.incoming("a@x", "b@x", "dropped")))
        assert len(view) == 1

    def test_without_filter_messages_are_ignored(self, win) -> None:
        win.event(MessageReceived(log("nope")))
        assert len(win) == 0


class TestPaint:
    """Drawing into the screen."""

    def test_redraw_writes_rows(self, win, screen) -> None:
        win.insert(log("visible text"))
        assert "visible text" in strip_ansi(output(screen))

    def test_unmeasured_window_does_not_paint(self, screen) -> None:
        view = BufferedWin(screen)
        view.insert(log("hidden"))
        assert output(screen) == ""

    def test_bell(self, win, screen) -> None:
        win.bell()
        assert "\x07" in output(screen)
