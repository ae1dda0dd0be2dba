"""Stored credential management commands.

- set: Store API key, project id, and URL in the config file
- show: Display stored credentials (API key redacted)
- clear: Remove stored credentials
"""

from __future__ import annotations

from typing import Annotated

import typer

from typecharts.cli.options import FormatOption
from typecharts.cli.utils import (
    err_console,
    get_config,
    handle_errors,
    output_result,
)

auth_app = typer.Typer(
    name="auth",
    help="Manage stored PostHog credentials.",
    no_args_is_help=True,
    rich_markup_mode="markdown",
)


def _redact(secret: str) -> str:
    """Show only the last four characters of a secret."""
    return f"***{secret[-4:]}" if len(secret) > 4 else "***"


@auth_app.command("set")
@handle_errors
def set_credentials(
    ctx: typer.Context,
    project_id: Annotated[
        str | None,
        typer.Option("--project-id", "-p", help="PostHog project ID."),
    ] = None,
    url: Annotated[
        str | None,
        typer.Option("--url", help="Project API base URL."),
    ] = None,
) -> None:
    """Store PostHog credentials in the config file.

    The API key is always prompted for with hidden input.

    Examples:

        typecharts auth set -p 12345
        typecharts auth set -p 12345 --url https://eu.posthog.com/api/projects/12345
    """
    if project_id is None:
        project_id = typer.prompt("PostHog project ID")
    api_key = typer.prompt("PostHog API key", hide_input=True)

    config = get_config(ctx)
    config.set_credentials(api_key=api_key, project_id=project_id, url=url)
    err_console.print(f"[green]Saved credentials to[/green] {config.config_path}")


@auth_app.command("show")
@handle_errors
def show_credentials(
    ctx: typer.Context,
    format: FormatOption = "json",
) -> None:
    """Show stored credentials with the API key redacted.

    Examples:

        typecharts auth show
        typecharts auth show --format table
    """
    config = get_config(ctx)
    stored = config.get_stored()
    data = {
        "config_path": str(config.config_path),
        "project_id": stored.get("project_id"),
        "url": stored.get("url"),
        "api_key": _redact(stored["api_key"]) if stored.get("api_key") else None,
    }
    output_result(ctx, data, format=format)


@auth_app.command("clear")
@handle_errors
def clear_credentials(ctx: typer.Context) -> None:
    """Remove stored credentials from the config file."""
    config = get_config(ctx)
    if config.clear():
        err_console.print("[green]Removed stored credentials.[/green]")
    else:
        err_console.print("[yellow]No stored credentials.[/yellow]")
