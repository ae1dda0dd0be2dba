"""CLI utility functions and error handling.

This module provides shared utilities for the CLI:
- ExitCode enum for standardized exit codes
- handle_errors decorator for exception-to-exit-code mapping
- Console instances for stdout/stderr separation
- Credential prompting and lazy client initialization
- status_spinner context manager for long-running operations
"""

from __future__ import annotations

import functools
import os
import sys
from collections.abc import Callable, Generator
from contextlib import contextmanager
from enum import IntEnum
from typing import TYPE_CHECKING, Any, TypeVar

import typer
from rich.console import Console

from typecharts.exceptions import (
    AuthenticationError,
    ConfigError,
    EventNotFoundError,
    PropertyNotFoundError,
    QueryError,
    RateLimitError,
    TypechartsError,
    UnsupportedChartTypeError,
)

if TYPE_CHECKING:
    from typecharts._internal.config import ConfigManager
    from typecharts.query import EventSchema, PostHog

# Data output goes to stdout; progress/errors go to stderr
console = Console()
err_console = Console(stderr=True, no_color=bool(os.environ.get("NO_COLOR")))


class ExitCode(IntEnum):
    """Standardized exit codes for CLI commands.

    Exit codes follow Unix conventions:
    - 0: Success
    - 1-5: Application-specific errors
    - 130: Interrupted by SIGINT (Ctrl+C)
    """

    SUCCESS = 0
    GENERAL_ERROR = 1
    AUTH_ERROR = 2
    INVALID_ARGS = 3
    NOT_FOUND = 4
    RATE_LIMIT = 5
    INTERRUPTED = 130


F = TypeVar("F", bound=Callable[..., Any])


def handle_errors(func: F) -> F:
    """Decorator to convert library exceptions to CLI exit codes.

    Maps TypechartsError subclasses to appropriate exit codes and
    displays formatted error messages to stderr.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except AuthenticationError as e:
            err_console.print(f"[red]Authentication error:[/red] {e.message}")
            err_console.print("Check your PostHog API key and project id.")
            raise typer.Exit(ExitCode.AUTH_ERROR) from None
        except RateLimitError as e:
            err_console.print(f"[yellow]Rate limited:[/yellow] {e.message}")
            if e.retry_after:
                err_console.print(
                    f"[cyan]Wait {e.retry_after} seconds before retrying.[/cyan]"
                )
            raise typer.Exit(ExitCode.RATE_LIMIT) from None
        except EventNotFoundError as e:
            err_console.print(f"[red]Event not found:[/red] '{e.event_name}'")
            if e.similar_events:
                suggestions = ", ".join(f"'{s}'" for s in e.similar_events[:5])
                err_console.print(f"Did you mean: {suggestions}?")
            raise typer.Exit(ExitCode.NOT_FOUND) from None
        except PropertyNotFoundError as e:
            err_console.print(f"[red]Property not found:[/red] {e.message}")
            if e.available_properties:
                err_console.print(
                    f"Available properties: {', '.join(e.available_properties)}"
                )
            raise typer.Exit(ExitCode.NOT_FOUND) from None
        except UnsupportedChartTypeError as e:
            err_console.print(f"[red]Unsupported chart type:[/red] {e.chart_type}")
            raise typer.Exit(ExitCode.INVALID_ARGS) from None
        except QueryError as e:
            err_console.print(f"[red]Query error:[/red] {e.message}")
            raise typer.Exit(ExitCode.INVALID_ARGS) from None
        except ConfigError as e:
            err_console.print(f"[red]Configuration error:[/red] {e.message}")
            raise typer.Exit(ExitCode.GENERAL_ERROR) from None
        except TypechartsError as e:
            err_console.print(f"[red]Error:[/red] {e.message}")
            raise typer.Exit(ExitCode.GENERAL_ERROR) from None
        except ValueError as e:
            err_console.print(f"[red]Invalid argument:[/red] {e}")
            raise typer.Exit(ExitCode.INVALID_ARGS) from None

    return wrapper  # type: ignore[return-value]


def get_config(ctx: typer.Context) -> ConfigManager:
    """Get or create ConfigManager from context."""
    from typecharts._internal.config import ConfigManager

    if "config" not in ctx.obj or ctx.obj["config"] is None:
        ctx.obj["config"] = ConfigManager()
    config: ConfigManager = ctx.obj["config"]
    return config


def prompt_missing_credentials(
    ctx: typer.Context,
    api_key: str | None,
    project_id: str | None,
) -> tuple[str, str]:
    """Fill in a missing API key or project id interactively.

    Values are taken from the arguments, then the environment, then the
    config file; anything still missing is prompted for.

    Args:
        ctx: Typer context with global options in obj dict.
        api_key: API key from the command line.
        project_id: Project id from the command line.

    Returns:
        (api_key, project_id)
    """
    from typecharts._internal.config import ENV_API_KEY, ENV_PROJECT_ID

    stored = get_config(ctx).get_stored()
    api_key = api_key or os.environ.get(ENV_API_KEY) or stored.get("api_key")
    project_id = (
        project_id or os.environ.get(ENV_PROJECT_ID) or stored.get("project_id")
    )
    if not api_key:
        api_key = typer.prompt(
            f"No value for {ENV_API_KEY} found in environment variables. "
            "Please enter your PostHog API key",
            hide_input=True,
        )
    if not project_id:
        project_id = typer.prompt(
            f"No value for {ENV_PROJECT_ID} found in environment variables. "
            "Please enter your PostHog project ID"
        )
    return str(api_key), str(project_id)


def get_posthog(
    ctx: typer.Context,
    *,
    api_key: str | None = None,
    project_id: str | None = None,
    url: str | None = None,
    events: EventSchema | None = None,
) -> PostHog:
    """Get or create the PostHog client from context.

    Lazily initializes a PostHog instance; it is cached in the context for
    reuse within one command invocation.

    Raises:
        ConfigError: If no credentials can be resolved.
    """
    from typecharts.query import PostHog

    if "posthog" not in ctx.obj or ctx.obj["posthog"] is None:
        ctx.obj["posthog"] = PostHog(
            api_key,
            project_id,
            url,
            events=events,
            _config_manager=get_config(ctx),
        )
    posthog: PostHog = ctx.obj["posthog"]
    return posthog


def output_result(
    ctx: typer.Context,
    data: dict[str, Any] | list[Any],
    columns: list[str] | None = None,
    *,
    format: str | None = None,
) -> None:
    """Output data in the requested format (json, jsonl, or table)."""
    from typecharts.cli.formatters import format_json, format_jsonl, format_table

    fmt = format if format is not None else ctx.obj.get("format", "json")

    if fmt == "jsonl":
        console.print(format_jsonl(data), highlight=False)
    elif fmt == "table":
        console.print(format_table(data, columns))
    else:
        console.print(format_json(data), highlight=False)


@contextmanager
def status_spinner(ctx: typer.Context, message: str) -> Generator[None, None, None]:
    """Show a spinner on stderr while the wrapped operation runs.

    Skipped with --quiet and in non-TTY environments.
    """
    quiet = ctx.obj.get("quiet", False) if ctx.obj else False

    if quiet or not sys.stderr.isatty():
        yield
    else:
        with err_console.status(message):
            yield
