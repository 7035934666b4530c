"""Core data types: styles, command lines and messages."""

from terminus.core.command import Command, CommandParseError, CompletionCycle, assemble, autocomplete, parse, parse_with_cursor
from terminus.core.message import ChatKind, ChatMessage, Direction, LogMessage, Message, new_message_id
from terminus.core.style import Color, Style

__all__ = [
    "Command",
    "CommandParseError",
    "CompletionCycle",
    "assemble",
    "autocomplete",
    "parse",
    "parse_with_cursor",
    "ChatKind",
    "ChatMessage",
    "Direction",
    "LogMessage",
    "Message",
    "new_message_id",
    "Color",
    "Style",
]
