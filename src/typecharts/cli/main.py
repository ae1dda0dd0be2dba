"""CLI entry point for typecharts.

This module provides the `typecharts` command-line interface. It defines
global options and registers commands.

Usage:
    typecharts [OPTIONS] COMMAND [ARGS]...

Examples:
    typecharts --help
    typecharts generate
    typecharts inspect events --format table
    typecharts query trend -e signup -t line -g day
"""

from __future__ import annotations

import logging
import signal
import sys
from typing import Annotated

import typer

import typecharts
from typecharts.cli.utils import ExitCode, err_console

app = typer.Typer(
    name="typecharts",
    help="Typed PostHog trend queries - generate event schemas, query charts.",
    epilog="""[dim]Workflow:[/dim] typecharts generate → commit events.py → """
    """PostHog(events=EVENTS).query()""",
    no_args_is_help=True,
    add_completion=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        print(f"typecharts version {typecharts.__version__}")
        raise typer.Exit()


def _handle_interrupt(_signum: int, _frame: object) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    err_console.print("\n[yellow]Interrupted[/yellow]")
    sys.exit(ExitCode.INTERRUPTED)


signal.signal(signal.SIGINT, _handle_interrupt)


@app.callback()
def main(
    ctx: typer.Context,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress progress output.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug output.",
        ),
    ] = False,
    _version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Typed PostHog trend queries - generate event schemas, query charts."""
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj["verbose"] = verbose
    ctx.obj.setdefault("posthog", None)
    ctx.obj.setdefault("config", None)
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )


def _register_commands() -> None:
    """Register all commands with the main app."""
    from typecharts.cli.commands.auth import auth_app
    from typecharts.cli.commands.generate import generate
    from typecharts.cli.commands.inspect import inspect_app
    from typecharts.cli.commands.query import query_app

    app.command("generate", help="Generate an events module from PostHog.")(generate)
    app.add_typer(auth_app, name="auth", help="Manage stored PostHog credentials.")
    app.add_typer(
        inspect_app, name="inspect", help="List event and property definitions."
    )
    app.add_typer(query_app, name="query", help="Run live trend queries.")


_register_commands()


if __name__ == "__main__":
    app()
