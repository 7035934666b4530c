"""Interactive console application."""

from terminus.cli.studio.commands import CommandRegistry, CommandSpec, UnknownCommandError, default_registry
from terminus.cli.studio.console import ConsoleApp, run_console

__all__ = ["CommandRegistry", "CommandSpec", "UnknownCommandError", "default_registry", "ConsoleApp", "run_console"]
