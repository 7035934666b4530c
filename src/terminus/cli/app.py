"""Typer CLI application."""

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from terminus.core.command import Command, CommandParseError, assemble as assemble_command, parse_with_cursor


def create_app() -> typer.Typer:
    """Create and configure the CLI application."""
    app = typer.Typer(
        name="terminus",
        help="Terminal chat console and command-line tools.",
        no_args_is_help=True,
        rich_markup_mode="rich",
    )
    console = Console()

    @app.command()
    def run(
        config: Annotated[Optional[Path], typer.Option("--config", "-c", help="Configuration file (JSON)")] = None,
        log_file: Annotated[Optional[Path], typer.Option("--log-file", help="Write logs to this file")] = None,
        log_level: Annotated[Optional[str], typer.Option("--log-level", help="DEBUG, INFO, WARNING, ERROR")] = None,
    ) -> None:
        """Start the interactive console."""
        from terminus.cli.studio.console import run_console
        from terminus.config import load_config
        from terminus.errors import ConfigError
        from terminus.log import setup_logging

        try:
            settings = load_config(config)
        except ConfigError as e:
            console.print(f"[red]Invalid configuration: {escape(str(e))}[/]")
            raise typer.Exit(1)

        if log_file is not None:
            settings.log_file = str(log_file.expanduser())
        if log_level is not None:
            settings.log_level = log_level.upper()

        # The console owns the terminal: logs go to a file or nowhere
        setup_logging(settings.log_level, file=settings.log_file)
        run_console(settings)

    @app.command()
    def parse(
        line: Annotated[str, typer.Argument(help="Command line, e.g. '/win console'")],
        cursor: Annotated[Optional[int], typer.Option("--cursor", help="Caret offset (defaults to end of line)")] = None,
    ) -> None:
        """Tokenize a command line and show its arguments."""
        try:
            command = parse_with_cursor(line, len(line) if cursor is None else cursor)
        except CommandParseError as e:
            console.print(f"[red]{escape(str(e))}[/]")
            raise typer.Exit(1)

        table = Table(title=f"[bold cyan]{escape(line)}[/]")
        table.add_column("#", justify="right")
        table.add_column("Argument")
        for index, arg in enumerate(command.args):
            marker = " [bold yellow]<[/]" if index == command.cursor else ""
            table.add_row(str(index), escape(repr(arg)) + marker)
        console.print(table)
        console.print(f"[bold]Cursor:[/] {command.cursor}")

    @app.command()
    def assemble(
        args: Annotated[list[str], typer.Argument(help="Arguments, command name first")],
    ) -> None:
        """Escape arguments into a command line."""
        print(assemble_command(Command(tuple(args))))

    return app
