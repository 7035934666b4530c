"""Tests for the command-line tokenizer, assembler and completion."""

import pytest

from terminus.core.command import (
    Command,
    CommandParseError,
    CompletionCycle,
    assemble,
    autocomplete,
    parse,
    parse_with_cursor,
)


class TestParse:
    """Tokenizing command lines."""

    def test_simple_command(self) -> None:
        command = parse("/test command")
        assert command.args == ("test", "command")
        assert command.cursor == 1

    def test_multiple_args(self) -> None:
        command = parse("/test command with args")
        assert command.args == ("test", "command", "with", "args")
        assert command.cursor == 3

    def test_doubly_quoted_arg(self) -> None:
        command = parse('/test "command with arg"')
        assert command.args == ("test", "command with arg")
        assert command.cursor == 1

    def test_simply_quoted_arg(self) -> None:
        command = parse("/test 'command with arg'")
        assert command.args == ("test", "command with arg")
        assert command.cursor == 1

    def test_mixed_quotes(self) -> None:
        command = parse("/test 'command with \" arg'")
        assert command.args == ("test", 'command with " arg')

    def test_quotes_join_with_adjacent_text(self) -> None:
        assert parse('/a b"c d"e').args == ("a", "bc de")

    def test_escape_outside_quotes(self) -> None:
        assert parse(r"/say a\ b").args == ("say", "a b")

    def test_escape_inside_quotes(self) -> None:
        assert parse(r'/say "a\"b"').args == ("say", 'a"b')
        assert parse(r"/say 'a\'b'").args == ("say", "a'b")

    def test_repeated_spaces(self) -> None:
        assert parse("/a   b").args == ("a", "b")

    def test_bare_marker(self) -> None:
        command = parse_with_cursor("/", 1)
        assert command.args == ("",)
        assert command.cursor == 0

    def test_name_property(self) -> None:
        assert parse("/win console").name == "win"
        assert parse("/").name == ""


class TestParseErrors:
    """Malformed command lines."""

    def test_missing_closing_quote(self) -> None:
        with pytest.raises(CommandParseError, match="Missing closing quote") as info:
            parse('/test "command with arg')
        assert info.value.kind == CommandParseError.UNTERMINATED_QUOTE

    def test_missing_marker(self) -> None:
        with pytest.raises(CommandParseError, match="Missing starting /") as info:
            parse("test")
        assert info.value.kind == CommandParseError.MISSING_MARKER

    def test_empty_line(self) -> None:
        with pytest.raises(CommandParseError) as info:
            parse("")
        assert info.value.kind == CommandParseError.MISSING_MARKER

    def test_dangling_escape(self) -> None:
        with pytest.raises(CommandParseError, match="Missing escaped char") as info:
            parse("/test foo\\")
        assert info.value.kind == CommandParseError.DANGLING_ESCAPE

    def test_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            parse("nope")


class TestCursor:
    """Locating the argument under the caret."""

    def test_cursor_inside_second_arg(self) -> None:
        command = parse_with_cursor("/test command with args", 10)
        assert command.args == ("test", "command", "with", "args")
        assert command.cursor == 1

    def test_cursor_at_end_of_quoted_arg(self) -> None:
        line = '/test "command with arg"'
        command = parse_with_cursor(line, len(line))
        assert command.args == ("test", "command with arg")
        assert command.cursor == 1

    def test_cursor_on_partial_name(self) -> None:
        command = parse_with_cursor("/te", 3)
        assert command.args == ("te",)
        assert command.cursor == 0

    def test_cursor_after_trailing_space(self) -> None:
        command = parse_with_cursor("/test ", 6)
        assert command.args == ("test",)
        assert command.cursor == 1
        assert command.current is None

    def test_cursor_on_name(self) -> None:
        assert parse_with_cursor("/win console", 2).cursor == 0


class TestAssemble:
    """Rebuilding command lines."""

    def test_plain(self) -> None:
        assert assemble(Command(("foo", "bar"))) == "/foo bar"

    def test_double_quote_uses_single_quotes(self) -> None:
        assert assemble(Command(("test", 'fo"o', "bar"))) == "/test 'fo\"o' bar"

    def test_single_quote_uses_double_quotes(self) -> None:
        assert assemble(Command(("test", "fo'o", "bar"))) == "/test \"fo'o\" bar"

    def test_space(self) -> None:
        assert assemble(Command(("test", "foo bar"))) == '/test "foo bar"'

    def test_space_and_quote(self) -> None:
        assert assemble(Command(("test", 'foo bar"'))) == "/test 'foo bar\"'"

    def test_bare_marker(self) -> None:
        assert assemble(Command(("",))) == "/"

    def test_empty_argument_is_quoted(self) -> None:
        assert assemble(Command(("say", ""))) == '/say ""'

    @pytest.mark.parametrize("args", [
        ("test", 'fo"o', "bar"),
        ("test", "it's \"quoted\""),
        ("path", "C:\\dir\\file"),
        ("say", "", "x"),
        ("msg", "a b", "c'd e"),
    ])
    def test_parse_inverts_assemble(self, args: tuple) -> None:
        assert parse(assemble(Command(args))).args == args


class TestAutocomplete:
    """Filling in candidates at the caret."""

    def test_replaces_argument_under_caret(self) -> None:
        command = parse_with_cursor("/win con", 8)
        assert autocomplete(command, ["console"]).args == ("win", "console")

    def test_appends_past_last_argument(self) -> None:
        command = parse_with_cursor("/win ", 5)
        assert autocomplete(command, ["console"]).args == ("win", "console")

    def test_index_wraps(self) -> None:
        command = parse("/w")
        assert autocomplete(command, ["win", "who"], 3).args == ("who",)

    def test_no_candidates(self) -> None:
        command = parse("/x")
        assert autocomplete(command, []) is command


class TestCompletionCycle:
    """Successive Tab presses."""

    def test_filters_by_prefix_and_cycles(self) -> None:
        cycle = CompletionCycle()
        command = parse("/c")
        cycle.start(command, ["close", "clear", "help"])
        assert cycle.candidates == ["close", "clear"]

        first = cycle.next(command)
        assert assemble(first) == "/close"
        second = cycle.next(first)
        assert assemble(second) == "/clear"
        third = cycle.next(second)
        assert assemble(third) == "/close"

    def test_reset(self) -> None:
        cycle = CompletionCycle()
        cycle.start(parse("/c"), ["close"])
        assert cycle.active
        cycle.reset()
        assert not cycle.active

    def test_no_match_leaves_command(self) -> None:
        cycle = CompletionCycle()
        command = parse("/zz")
        cycle.start(command, ["close"])
        assert cycle.next(command) == command
