"""Slash-command registry and the console's builtin commands."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Optional

from terminus.core.command import Command
from terminus.errors import TerminusError

if TYPE_CHECKING:
    from terminus.cli.studio.console import ConsoleApp

Handler = Callable[["ConsoleApp", Command], None]
Completer = Callable[["ConsoleApp", Command], list[str]]


class UnknownCommandError(TerminusError, KeyError):
    """No command is registered under the given name."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown command {self.name}"


@dataclass
class CommandSpec:
    """Definition of a slash command.

    Attributes:
        name: Command name without the leading ``/``
        help: One-line description for ``/help``
        handler: Called as ``handler(app, command)``
        completions: Candidate providers for arguments 1, 2, ... in order
        usage: Argument synopsis shown by ``/help``
    """
    name: str
    help: str
    handler: Handler
    completions: list[Completer] = field(default_factory=list)
    usage: str = ""

    def completer(self, position: int) -> Optional[Completer]:
        """Provider for argument ``position`` (1-based), if any."""
        if 1 <= position <= len(self.completions):
            return self.completions[position - 1]
        return None


class CommandRegistry:
    """Commands available from the input line, keyed by name."""

    def __init__(self) -> None:
        self._commands: dict[str, CommandSpec] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._commands

    def __iter__(self):
        return iter(sorted(self._commands.values(), key=lambda spec: spec.name))

    @property
    def names(self) -> list[str]:
        return sorted(self._commands)

    def register(self, spec: CommandSpec) -> CommandSpec:
        """Add a command; a later registration under the same name wins."""
        self._commands[spec.name] = spec
        return spec

    def command(self, name: str, help: str = "", usage: str = "", completions: Optional[list[Completer]] = None):
        """Decorator form of :meth:`register`."""
        def decorator(handler: Handler) -> Handler:
            self.register(CommandSpec(name, help, handler, list(completions or []), usage))
            return handler
        return decorator

    def get(self, name: str) -> CommandSpec:
        try:
            return self._commands[name]
        except KeyError:
            raise UnknownCommandError(name) from None

    def dispatch(self, app: ConsoleApp, command: Command) -> None:
        """
        Run the handler registered for ``command.name``.

        Raises:
            UnknownCommandError: no such command.
        """
        self.get(command.name).handler(app, command)

    def complete(self, app: ConsoleApp, command: Command) -> list[str]:
        """Candidates for the argument under the caret."""
        if command.cursor == 0:
            return self.names
        spec = self._commands.get(command.name)
        if spec is None:
            return []
        completer = spec.completer(command.cursor)
        if completer is None:
            return []
        return list(completer(app, command))


# ----------------------------------------------------------------------
# Builtins
# ----------------------------------------------------------------------

def _window_names(app: ConsoleApp, command: Command) -> list[str]:
    return list(app.windows)


def _command_names(app: ConsoleApp, command: Command) -> list[str]:
    return app.registry.names


def _cmd_win(app: ConsoleApp, command: Command) -> None:
    if len(command.args) < 2:
        app.log("Usage: /win <window>")
        return
    app.change_window(command.args[1])


def _cmd_close(app: ConsoleApp, command: Command) -> None:
    name = command.args[1] if len(command.args) > 1 else app.current_window
    if name is not None:
        app.close_window(name)


def _cmd_quit(app: ConsoleApp, command: Command) -> None:
    app.quit()


def _cmd_help(app: ConsoleApp, command: Command) -> None:
    if len(command.args) > 1:
        spec = app.registry.get(command.args[1])
        app.log(f"/{spec.name} {spec.usage}".rstrip() + f": {spec.help}")
        return
    lines = ["Commands:"]
    for spec in app.registry:
        lines.append(f"  /{spec.name} {spec.usage}".rstrip() + f"  {spec.help}")
    app.log("\n".join(lines))


def _cmd_clear(app: ConsoleApp, command: Command) -> None:
    app.clear_window()


BUILTINS = (
    CommandSpec("win", "Switch to a window", _cmd_win, [_window_names], "<window>"),
    CommandSpec("close", "Close a window (the current one by default)", _cmd_close, [_window_names], "[window]"),
    CommandSpec("quit", "Leave the console", _cmd_quit),
    CommandSpec("help", "List commands or describe one", _cmd_help, [_command_names], "[command]"),
    CommandSpec("clear", "Clear the current window", _cmd_clear),
)


def default_registry() -> CommandRegistry:
    """A registry holding the builtin commands."""
    registry = CommandRegistry()
    for spec in BUILTINS:
        registry.register(spec)
    return registry
