"""Shared CLI option definitions.

Provides reusable Annotated type aliases for common CLI options
to avoid duplication across commands.
"""

from __future__ import annotations

from typing import Annotated, Literal

import typer

OutputFormat = Literal["json", "jsonl", "table"]

FormatOption = Annotated[
    OutputFormat,
    typer.Option(
        "--format",
        "-f",
        help="Output format: json, jsonl, table.",
    ),
]

ApiKeyOption = Annotated[
    str | None,
    typer.Option(
        "--api-key",
        help="PostHog personal API key.",
        envvar="POSTHOG_API_KEY",
        show_envvar=True,
    ),
]

ProjectIdOption = Annotated[
    str | None,
    typer.Option(
        "--project-id",
        help="PostHog project ID.",
        envvar="POSTHOG_PROJECT_ID",
        show_envvar=True,
    ),
]

UrlOption = Annotated[
    str | None,
    typer.Option(
        "--url",
        help="Project API base URL (default: app.posthog.com project URL).",
        envvar="POSTHOG_URL",
        show_envvar=True,
    ),
]
