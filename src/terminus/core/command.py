"""
Command-line tokenizer for ``/command arg ...`` input.

A command line starts with the ``/`` marker and is split on unquoted
spaces. Single and double quotes group words, and a backslash takes the
next character literally in every state. While scanning, the tokenizer
also works out which argument holds a caret offset so that completion can
replace the argument under the caret.

    >>> parse_with_cursor('/test "command with arg"', 24)
    Command(args=('test', 'command with arg'), cursor=1)
    >>> assemble(Command(("test", 'fo"o', "bar")))
    '/test \\'fo"o\\' bar'
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Optional, Sequence

from terminus.errors import TerminusError

MARKER = "/"
DELIMITER = " "
ESCAPE = "\\"
SINGLE_QUOTE = "'"
DOUBLE_QUOTE = '"'


class CommandParseError(TerminusError, ValueError):
    """A command line could not be tokenized."""

    MISSING_MARKER = "missing_marker"
    UNTERMINATED_QUOTE = "unterminated_quote"
    DANGLING_ESCAPE = "dangling_escape"

    def __init__(self, kind: str, message: str) -> None:
        super().__init__(message)
        self.kind = kind


@dataclass(frozen=True)
class Command:
    """Tokenized command line: arguments plus the index of the argument under the caret."""
    args: tuple[str, ...]
    cursor: int = 0

    def __post_init__(self) -> None:
        # Accept any sequence but store an immutable tuple
        if not isinstance(self.args, tuple):
            object.__setattr__(self, "args", tuple(self.args))

    @property
    def name(self) -> str:
        return self.args[0] if self.args else ""

    @property
    def current(self) -> Optional[str]:
        """Argument under the caret, or None when the caret is past the last one."""
        if self.cursor < len(self.args):
            return self.args[self.cursor]
        return None

    def with_arg(self, value: str) -> Command:
        """Return a copy with ``value`` appended as a new last argument."""
        return replace(self, args=self.args + (value,))


class _State(Enum):
    INITIAL = auto()
    DELIMITER = auto()
    UNQUOTED = auto()
    SIMPLY_QUOTED = auto()
    DOUBLY_QUOTED = auto()
    UNQUOTED_ESCAPED = auto()
    SIMPLY_QUOTED_ESCAPED = auto()
    DOUBLY_QUOTED_ESCAPED = auto()


# Escaped state -> state to resume once the escaped character is consumed
_AFTER_ESCAPE = {
    _State.UNQUOTED_ESCAPED: _State.UNQUOTED,
    _State.SIMPLY_QUOTED_ESCAPED: _State.SIMPLY_QUOTED,
    _State.DOUBLY_QUOTED_ESCAPED: _State.DOUBLY_QUOTED,
}


def parse_with_cursor(line: str, cursor: int) -> Command:
    """
    Tokenize ``line`` and locate the argument holding character offset ``cursor``.

    The caret is attributed to the argument being built when the character
    at offset ``cursor`` is consumed. A caret sitting on a delimiter belongs
    to the argument that starts after it, or one past the last argument when
    the line ends there.

    Raises:
        CommandParseError: missing ``/``, unterminated quote or dangling escape.
    """
    tokens: list[str] = []
    token: list[str] = []
    state = _State.INITIAL
    remaining = cursor
    token_cursor: Optional[int] = None

    for c in line:
        if state is _State.INITIAL:
            if c != MARKER:
                raise CommandParseError(CommandParseError.MISSING_MARKER, "Missing starting /")
            state = _State.DELIMITER
        elif state is _State.DELIMITER:
            if c == DELIMITER:
                pass
            elif c == SINGLE_QUOTE:
                state = _State.SIMPLY_QUOTED
            elif c == DOUBLE_QUOTE:
                state = _State.DOUBLY_QUOTED
            elif c == ESCAPE:
                state = _State.UNQUOTED_ESCAPED
            else:
                token.append(c)
                state = _State.UNQUOTED
        elif state is _State.UNQUOTED:
            if c == SINGLE_QUOTE:
                state = _State.SIMPLY_QUOTED
            elif c == DOUBLE_QUOTE:
                state = _State.DOUBLY_QUOTED
            elif c == ESCAPE:
                state = _State.UNQUOTED_ESCAPED
            elif c == DELIMITER:
                tokens.append("".join(token))
                token = []
                state = _State.DELIMITER
            else:
                token.append(c)
        elif state is _State.SIMPLY_QUOTED:
            if c == SINGLE_QUOTE:
                state = _State.UNQUOTED
            elif c == ESCAPE:
                state = _State.SIMPLY_QUOTED_ESCAPED
            else:
                token.append(c)
        elif state is _State.DOUBLY_QUOTED:
            if c == DOUBLE_QUOTE:
                state = _State.UNQUOTED
            elif c == ESCAPE:
                state = _State.DOUBLY_QUOTED_ESCAPED
            else:
                token.append(c)
        else:
            token.append(c)
            state = _AFTER_ESCAPE[state]

        if remaining == 0:
            if token_cursor is None:
                token_cursor = len(tokens)
        else:
            remaining -= 1

    # End of input
    if state is _State.INITIAL:
        raise CommandParseError(CommandParseError.MISSING_MARKER, "Missing starting /")
    if state in (_State.SIMPLY_QUOTED, _State.DOUBLY_QUOTED):
        raise CommandParseError(CommandParseError.UNTERMINATED_QUOTE, "Missing closing quote")
    if state in _AFTER_ESCAPE:
        raise CommandParseError(CommandParseError.DANGLING_ESCAPE, "Missing escaped char")
    if state is _State.UNQUOTED:
        tokens.append("".join(token))

    if token_cursor is None:
        token_cursor = len(tokens) if state is _State.DELIMITER else len(tokens) - 1

    if not tokens:
        return Command(("",), 0)
    return Command(tuple(tokens), token_cursor)


def parse(line: str) -> Command:
    """Tokenize ``line`` with the caret at its end."""
    return parse_with_cursor(line, len(line))


def _escape(arg: str) -> str:
    """Escape one argument, quoting it only when it holds a space or a quote."""
    if not arg:
        return DOUBLE_QUOTE * 2

    quote: Optional[str] = None
    escaped: list[str] = []
    for c in arg:
        if c == ESCAPE:
            escaped.append(ESCAPE * 2)
        elif c == DELIMITER:
            if quote is None:
                quote = DELIMITER
            escaped.append(c)
        elif c == SINGLE_QUOTE:
            if quote == SINGLE_QUOTE:
                escaped.append(ESCAPE + c)
            else:
                if quote != DOUBLE_QUOTE:
                    quote = DOUBLE_QUOTE
                escaped.append(c)
        elif c == DOUBLE_QUOTE:
            if quote == DOUBLE_QUOTE:
                escaped.append(ESCAPE + c)
            else:
                if quote != SINGLE_QUOTE:
                    quote = SINGLE_QUOTE
                escaped.append(c)
        else:
            escaped.append(c)

    body = "".join(escaped)
    if quote is None:
        return body
    if quote == DELIMITER:
        quote = DOUBLE_QUOTE
    return f"{quote}{body}{quote}"


def assemble(command: Command) -> str:
    """
    Rebuild a command line from its arguments.

    The bare marker (a single empty argument) assembles to ``"/"``; any
    other empty argument is written as ``""`` so it survives a re-parse.
    """
    if command.args == ("",):
        return MARKER
    return MARKER + DELIMITER.join(_escape(arg) for arg in command.args)


def autocomplete(command: Command, candidates: Sequence[str], index: int = 0) -> Command:
    """
    Put ``candidates[index]`` (modulo the list length) at the caret argument.

    The argument under the caret is replaced; when the caret sits past the
    last argument the candidate is appended. No candidates leaves the
    command unchanged.
    """
    if not candidates:
        return command
    candidate = candidates[index % len(candidates)]
    if command.cursor < len(command.args):
        args = list(command.args)
        args[command.cursor] = candidate
        return replace(command, args=tuple(args))
    return command.with_arg(candidate)


class CompletionCycle:
    """
    Successive completions of one command line.

    The first call to :meth:`start` captures the candidate list, narrowed to
    those extending the argument under the caret; every :meth:`next` then
    fills in the following candidate, wrapping around the list.
    """

    def __init__(self) -> None:
        self._candidates: Optional[list[str]] = None
        self._index = 0

    @property
    def active(self) -> bool:
        return self._candidates is not None

    @property
    def candidates(self) -> list[str]:
        return list(self._candidates or [])

    def start(self, command: Command, candidates: Sequence[str]) -> None:
        prefix = command.current
        if prefix is None:
            self._candidates = list(candidates)
        else:
            self._candidates = [c for c in candidates if c.startswith(prefix)]
        self._index = 0

    def next(self, command: Command) -> Command:
        if not self._candidates:
            return command
        completed = autocomplete(command, self._candidates, self._index)
        self._index = (self._index + 1) % len(self._candidates)
        return completed

    def reset(self) -> None:
        self._candidates = None
        self._index = 0
