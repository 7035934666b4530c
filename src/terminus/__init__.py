"""
terminus: retained-mode terminal UI toolkit and text console

A view tree measured and laid out in two passes, container and scrollback
widgets painting into a shared screen, and the slash-command tokenizer
feeding the console's event path.

Quick Start:
    >>> from terminus import parse, assemble
    >>> parse('/win "my room"').args
    ('win', 'my room')
    >>> assemble(parse('/win "my room"'))
    '/win "my room"'

Features:
    - Views: linear and frame containers, deduplicating scrollback windows
    - Title bar, window bar and an input line with history
    - Quote- and escape-aware command tokenizer with completion
    - Interactive console with window switching and tab completion
"""

__version__ = "0.1.0"

# Core types
from terminus.core.command import Command, CommandParseError, CompletionCycle, assemble, autocomplete, parse, parse_with_cursor
from terminus.core.message import ChatMessage, LogMessage, Message
from terminus.core.roster import Contact, Occupant, Role
from terminus.core.style import Color, Style

# Configuration
from terminus.config import ConsoleConfig, load_config

# Errors
from terminus.errors import ConfigError, TerminusError, UnknownWindowError

__all__ = [
    # Version
    "__version__",
    # Commands
    "Command",
    "CommandParseError",
    "CompletionCycle",
    "assemble",
    "autocomplete",
    "parse",
    "parse_with_cursor",
    # Messages
    "ChatMessage",
    "LogMessage",
    "Message",
    # Rosters
    "Contact",
    "Occupant",
    "Role",
    # Styles
    "Color",
    "Style",
    # Configuration
    "ConsoleConfig",
    "load_config",
    # Errors
    "ConfigError",
    "TerminusError",
    "UnknownWindowError",
]
