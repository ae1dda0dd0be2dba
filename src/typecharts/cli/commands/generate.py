"""Events module generation command.

Fetches every event definition and its properties from PostHog and writes
them to a Python module that can be committed and passed to
``PostHog(events=EVENTS)``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from typecharts._internal.services.generator import (
    DEFAULT_OUTPUT_FILENAME,
    generate_events_module,
)
from typecharts.cli.options import ApiKeyOption, ProjectIdOption, UrlOption
from typecharts.cli.utils import (
    err_console,
    get_posthog,
    handle_errors,
    output_result,
    prompt_missing_credentials,
    status_spinner,
)


@handle_errors
def generate(
    ctx: typer.Context,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help=f"Output path (default: ./{DEFAULT_OUTPUT_FILENAME}).",
            dir_okay=False,
        ),
    ] = None,
    api_key: ApiKeyOption = None,
    project_id: ProjectIdOption = None,
    url: UrlOption = None,
) -> None:
    """Generate an events module from your PostHog project.

    Missing credentials are prompted for interactively.

    Examples:

        typecharts generate
        typecharts generate -o src/app/events.py
        POSTHOG_API_KEY=phx_... POSTHOG_PROJECT_ID=123 typecharts generate
    """
    api_key, project_id = prompt_missing_credentials(ctx, api_key, project_id)
    posthog = get_posthog(ctx, api_key=api_key, project_id=project_id, url=url)
    quiet = ctx.obj.get("quiet", False)

    def on_event(name: str, property_count: int) -> None:
        if not quiet:
            err_console.print(
                f"Fetched {property_count} properties for event [cyan]{name}[/cyan]"
            )

    with status_spinner(ctx, "Fetching event definitions..."):
        events = posthog.fetch_event_schema(on_event)

    if not quiet:
        err_console.print(f"Generating output file for {len(events)} events...")
    path = generate_events_module(events, output)

    output_result(
        ctx,
        {"path": str(path), "events": len(events)},
        format="json",
    )
