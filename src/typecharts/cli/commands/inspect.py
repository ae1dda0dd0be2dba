"""Definition listing commands.

- events: List event definitions
- properties: List property definitions seen on an event
"""

from __future__ import annotations

from typing import Annotated

import typer

from typecharts.cli.options import (
    ApiKeyOption,
    FormatOption,
    ProjectIdOption,
    UrlOption,
)
from typecharts.cli.utils import (
    get_posthog,
    handle_errors,
    output_result,
    status_spinner,
)

inspect_app = typer.Typer(
    name="inspect",
    help="List event and property definitions.",
    no_args_is_help=True,
    rich_markup_mode="markdown",
)


@inspect_app.command("events")
@handle_errors
def inspect_events(
    ctx: typer.Context,
    api_key: ApiKeyOption = None,
    project_id: ProjectIdOption = None,
    url: UrlOption = None,
    format: FormatOption = "json",
) -> None:
    """List all event definitions in the PostHog project.

    Examples:

        typecharts inspect events
        typecharts inspect events --format table
    """
    posthog = get_posthog(ctx, api_key=api_key, project_id=project_id, url=url)
    with status_spinner(ctx, "Fetching events..."):
        events = posthog.definitions.fetch_all_events()

    data = [
        {
            "name": e.get("name"),
            "last_seen_at": e.get("last_seen_at"),
            "tags": e.get("tags", []),
        }
        for e in events
    ]
    output_result(ctx, data, columns=["name", "last_seen_at", "tags"], format=format)


@inspect_app.command("properties")
@handle_errors
def inspect_properties(
    ctx: typer.Context,
    event: Annotated[str, typer.Argument(help="Event name.")],
    api_key: ApiKeyOption = None,
    project_id: ProjectIdOption = None,
    url: UrlOption = None,
    format: FormatOption = "json",
) -> None:
    """List property definitions seen on an event.

    Examples:

        typecharts inspect properties signup
        typecharts inspect properties '$pageview' --format table
    """
    posthog = get_posthog(ctx, api_key=api_key, project_id=project_id, url=url)
    with status_spinner(ctx, f"Fetching properties of {event}..."):
        properties = posthog.definitions.fetch_all_properties_of_event(event)

    data = [
        {
            "name": p.get("name"),
            "type": p.get("property_type"),
            "is_numerical": p.get("is_numerical", False),
        }
        for p in properties
    ]
    output_result(ctx, data, columns=["name", "type", "is_numerical"], format=format)
