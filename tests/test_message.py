"""Tests for messages and styles."""

from datetime import datetime, timezone

import pytest

from terminus.cli.core.ansi_text import strip_ansi
from terminus.core.message import ChatKind, ChatMessage, Direction, LogMessage, Message
from terminus.core.style import Color, ColorMode, Style

NOON = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class TestMessages:
    """Identity, display lines and copies."""

    def test_protocol(self) -> None:
        assert isinstance(LogMessage("x"), Message)
        assert isinstance(ChatMessage.incoming("a@x", "b@x", "hi"), Message)

    def test_locally_generated_ids_are_unique(self) -> None:
        assert LogMessage("x").identity != LogMessage("x").identity

    def test_transport_id_is_identity(self) -> None:
        assert ChatMessage.incoming("a@x", "b@x", "hi", id="42").identity == "42"

    def test_copy_is_equal(self) -> None:
        message = ChatMessage.outgoing("me@x", "a@x", "hi", timestamp=NOON)
        copy = message.copy()
        assert copy == message
        assert copy.identity == message.identity

    def test_conversation_and_author(self) -> None:
        incoming = ChatMessage.incoming("room@x", "me@x", "hi", kind=ChatKind.GROUPCHAT, nick="bob")
        outgoing = ChatMessage.outgoing("me@x", "room@x", "yo", kind=ChatKind.GROUPCHAT)
        assert incoming.conversation == outgoing.conversation == "room@x"
        assert incoming.author == "bob"
        assert outgoing.author == "me"
        assert outgoing.direction is Direction.OUTGOING

    def test_log_lines(self) -> None:
        lines = [strip_ansi(line) for line in LogMessage("a\nb", timestamp=NOON).lines()]
        assert len(lines) == 2
        assert lines[1].endswith(" - b")

    def test_empty_body_still_has_a_line(self) -> None:
        assert len(LogMessage("", timestamp=NOON).lines()) == 1


class TestStyle:
    """Color lookup and SGR codes."""

    def test_named_colors(self) -> None:
        assert Color.named("red") == Color(ColorMode.STANDARD_16, 1)
        assert Color.named("bright_blue").to_sgr_fg() == "94"
        assert Color.named("color200").to_sgr_bg() == "48;5;200"

    def test_unknown_color(self) -> None:
        with pytest.raises(ValueError):
            Color.named("chartreuse")

    def test_sgr(self) -> None:
        assert Style.from_names(fg="white", bg="blue", bold=True).sgr() == "\x1b[1;37;44m"
        assert Style().is_plain
        assert Style().sgr() == ""
