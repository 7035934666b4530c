"""Tests for the bars and the input line."""

import pytest

from terminus.cli.core.ansi_text import strip_ansi
from terminus.cli.core.events import AddWindow, ChangeWindow, CloseWindow, Complete, Completed, Connected, ReadPassword, ResultSlot, Validate
from terminus.cli.core.input import Key, KeyEvent
from terminus.cli.widgets.input_line import InputLine
from terminus.cli.widgets.title_bar import TitleBar
from terminus.cli.widgets.win_bar import WinBar
from terminus.core.style import BOLD

from conftest import goto_targets, output


def laid_out(view, width: int = 40):
    view.measure(width, 5)
    view.layout(3, 1)
    return view


class TestWinBar:
    """Window list bookkeeping and drawing."""

    def test_add_and_current(self, screen) -> None:
        bar = WinBar(screen)
        bar.add_window("console")
        bar.add_window("alice")
        bar.set_current_window("alice")
        assert bar.windows == ["console", "alice"]
        assert bar.current_window == "alice"

    def test_current_window_is_never_highlighted(self, screen) -> None:
        bar = WinBar(screen)
        bar.add_window("console")
        bar.set_current_window("console")
        bar.highlight_window("console")
        assert bar.highlighted == []

    def test_highlight_is_idempotent(self, screen) -> None:
        bar = WinBar(screen)
        bar.highlight_window("alice")
        bar.highlight_window("alice")
        assert bar.highlighted == ["alice"]

    def test_switching_clears_highlight(self, screen) -> None:
        bar = WinBar(screen)
        bar.highlight_window("alice")
        bar.set_current_window("alice")
        assert "alice" not in bar.highlighted

    def test_events(self, screen) -> None:
        bar = WinBar(screen)
        bar.event(AddWindow("console"))
        bar.event(AddWindow("alice"))
        bar.event(ChangeWindow("alice"))
        bar.event(Connected("me@example.org"))
        bar.event(CloseWindow("alice"))
        assert bar.windows == ["console"]
        assert bar.current_window is None
        assert bar.connection == "me@example.org"

    def test_paint(self, screen) -> None:
        bar = laid_out(WinBar(screen), 50)
        bar.set_connection("me@example.org")
        bar.add_window("console")
        bar.add_window("alice")
        bar.add_window("bob")
        bar.set_current_window("console")
        bar.highlight_window("bob")

        last = output(screen).rsplit("\x1b7", 1)[1]
        text = strip_ansi(last)
        assert " me@example.org" in text
        assert "-1: console- [2: alice] [3: bob]" in text
        assert f"{BOLD}[3: bob]" in last
        assert goto_targets(last) == [(1, 3)]

    def test_windows_that_do_not_fit_are_left_out(self, screen) -> None:
        bar = laid_out(WinBar(screen), 20)
        for name in ("console", "alice", "bob"):
            bar.add_window(name)
        text = strip_ansi(output(screen).rsplit("\x1b7", 1)[1])
        assert "[1: console]" in text
        assert "bob" not in text

    def test_labels_stop_at_first_window_that_does_not_fit(self, screen) -> None:
        bar = laid_out(WinBar(screen), 24)
        for name in ("console", "alexander", "bob"):
            bar.add_window(name)
        text = strip_ansi(output(screen).rsplit("\x1b7", 1)[1])
        assert "[1: console]" in text
        assert "alexander" not in text
        assert "[3: bob]" not in text


class TestZeroHeight:
    """One-row widgets squeezed out of the layout."""

    @pytest.mark.parametrize("make", [TitleBar, WinBar, InputLine])
    def test_nothing_painted_without_rows(self, screen, make) -> None:
        view = make(screen)
        view.measure(40, 0)
        view.layout(3, 1)
        assert view.h == 0

        view.redraw()

        assert output(screen) == ""


class TestTitleBar:
    """Current window name."""

    def test_change_window_event(self, screen) -> None:
        bar = laid_out(TitleBar(screen))
        bar.event(ChangeWindow("alice"))
        assert bar.window_name == "alice"
        assert " alice" in strip_ansi(output(screen))

    def test_paints_full_width(self, screen) -> None:
        bar = laid_out(TitleBar(screen), 30)
        bar.set_name("console")
        last = strip_ansi(output(screen).rsplit("\x1b7", 1)[1])
        assert last == " console" + " " * 22


@pytest.fixture
def line(screen) -> InputLine:
    return laid_out(InputLine(screen, history_size=3), 10)


def type_into(line: InputLine, text: str) -> None:
    for ch in text:
        line.event(KeyEvent.of_char(ch))


class TestInputLineEditing:
    """Caret movement and editing keys."""

    def test_typing(self, line) -> None:
        type_into(line, "hello")
        assert line.buf == "hello"
        assert line.cursor == 5

    def test_insert_in_middle(self, line) -> None:
        type_into(line, "hllo")
        line.home()
        line.right()
        line.key("e")
        assert line.buf == "hello"
        assert line.cursor == 2

    def test_backspace_and_delete(self, line) -> None:
        type_into(line, "abcd")
        line.event(KeyEvent(key=Key.BACKSPACE))
        assert line.buf == "abc"
        line.event(KeyEvent(key=Key.HOME))
        line.event(KeyEvent(key=Key.DELETE))
        assert line.buf == "bc"
        assert line.cursor == 0

    def test_edges_are_no_ops(self, line) -> None:
        line.backspace()
        line.delete()
        line.left()
        assert (line.buf, line.cursor) == ("", 0)
        type_into(line, "ab")
        line.right()
        assert line.cursor == 2

    def test_end(self, line) -> None:
        type_into(line, "abc")
        line.home()
        line.event(KeyEvent(key=Key.END))
        assert line.cursor == 3

    def test_backward_delete_word(self, line) -> None:
        type_into(line, "/win alice  ")
        line.event(KeyEvent.ctrl("w"))
        assert line.buf == "/win "
        line.event(KeyEvent.ctrl("w"))
        assert line.buf == ""

    def test_completed_replaces_text(self, line) -> None:
        type_into(line, "/he")
        line.event(Completed("/help"))
        assert (line.buf, line.cursor) == ("/help", 5)


class TestInputLineHistory:
    """Submitted lines and recall."""

    def test_validate_returns_and_clears(self, line) -> None:
        type_into(line, "hi")
        slot = ResultSlot()
        line.event(Validate(slot))
        assert slot.get() == ("hi", False)
        assert line.buf == ""
        assert line.history == ["hi"]

    def test_previous_and_next(self, line) -> None:
        for text in ("one", "two"):
            type_into(line, text)
            line.validate()
        type_into(line, "dra")

        line.event(KeyEvent(key=Key.UP))
        assert line.buf == "two"
        line.event(KeyEvent(key=Key.UP))
        assert line.buf == "one"
        line.event(KeyEvent(key=Key.UP))
        assert line.buf == "one"
        line.event(KeyEvent(key=Key.DOWN))
        assert line.buf == "two"
        line.event(KeyEvent(key=Key.DOWN))
        assert line.buf == "dra"

    def test_history_is_bounded(self, line) -> None:
        for text in ("a", "b", "c", "d"):
            type_into(line, text)
            line.validate()
        assert line.history == ["b", "c", "d"]

    def test_empty_line_not_recorded(self, line) -> None:
        line.validate()
        assert line.history == []


class TestInputLinePassword:
    """Masked entry."""

    def test_password_is_masked_and_not_recorded(self, line, screen) -> None:
        line.event(ReadPassword())
        type_into(line, "secret")
        assert "secret" not in output(screen)
        assert "******" in output(screen)

        assert line.validate() == ("secret", True)
        assert line.history == []
        assert not line.masked

    def test_complete_reports_password_flag(self, line) -> None:
        line.password()
        type_into(line, "pw")
        slot = ResultSlot()
        line.event(Complete(slot))
        assert slot.get() == ("pw", 2, True)


class TestInputLinePaint:
    """Horizontal scrolling and caret placement."""

    def test_caret_after_text(self, line, screen) -> None:
        type_into(line, "abc")
        last = output(screen).split("\x1b[?25h")[-2]
        assert goto_targets(last)[-1] == (4, 3)

    def test_scrolls_to_keep_caret_visible(self, line, screen) -> None:
        type_into(line, "abcdefghijklmno")
        painted = output(screen)
        last = painted[painted.rindex("\x1b[3;1H"):]
        assert "ghijklmno " in last
        assert goto_targets(last)[-1] == (10, 3)

    def test_does_not_restore_caret(self, line, screen) -> None:
        type_into(line, "a")
        assert "\x1b8" not in output(screen)
