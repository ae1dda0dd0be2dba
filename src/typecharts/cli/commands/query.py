"""Live trend query command.

Runs a trend query against PostHog and prints the shaped chart.
"""

from __future__ import annotations

import importlib.util
import json
from pathlib import Path
from typing import Annotated, Any, cast

import typer

from typecharts._literal_types import ChartType, Interval, SamplingMode
from typecharts.charts import NumberChart, PieChart
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
from typecharts.cli.validators import validate_literal
from typecharts.exceptions import ConfigError

query_app = typer.Typer(
    name="query",
    help="Run live trend queries.",
    no_args_is_help=True,
    rich_markup_mode="markdown",
)


def load_schema(path: Path) -> dict[str, Any]:
    """Load an event schema from a generated module or a JSON file.

    Python files must define an ``EVENTS`` mapping; JSON files hold the
    mapping itself.

    Raises:
        ConfigError: If the file is missing or has no usable schema.
    """
    if not path.exists():
        raise ConfigError(f"Schema file not found: {path}", details={"path": str(path)})

    if path.suffix == ".json":
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigError(
                f"Invalid JSON in schema file: {e}", details={"path": str(path)}
            ) from e
    else:
        spec = importlib.util.spec_from_file_location("_typecharts_events", path)
        if spec is None or spec.loader is None:
            raise ConfigError(f"Cannot load schema module: {path}")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        data = getattr(module, "EVENTS", None)

    if not isinstance(data, dict):
        raise ConfigError(
            f"Schema file does not define an events mapping: {path}",
            details={"path": str(path)},
        )
    return data


@query_app.command("trend")
@handle_errors
def query_trend(
    ctx: typer.Context,
    events: Annotated[
        list[str],
        typer.Option("--event", "-e", help="Event to chart (repeatable)."),
    ],
    chart_type: Annotated[
        str,
        typer.Option("--type", "-t", help="Chart type: line, bar, area, ..."),
    ] = "line",
    group_by: Annotated[
        str,
        typer.Option("--group-by", "-g", help="Interval: day, hour, week, month."),
    ] = "day",
    sampling: Annotated[
        str,
        typer.Option("--sampling", "-s", help="Aggregation applied to every event."),
    ] = "total",
    breakdown: Annotated[
        str | None,
        typer.Option("--breakdown", "-b", help="Event property to break down by."),
    ] = None,
    compare: Annotated[
        bool,
        typer.Option("--compare", help="Compare to the previous period."),
    ] = False,
    data_index: Annotated[
        str | None,
        typer.Option("--data-index", help="Name of the category field."),
    ] = None,
    date_from: Annotated[
        str,
        typer.Option("--from", help="Start of range (e.g. -30d or 2024-01-01)."),
    ] = "-7d",
    date_to: Annotated[
        str | None,
        typer.Option("--to", help="End of range (default: now)."),
    ] = None,
    schema: Annotated[
        Path | None,
        typer.Option(
            "--schema",
            help="Generated events module or JSON file to validate against.",
            dir_okay=False,
        ),
    ] = None,
    api_key: ApiKeyOption = None,
    project_id: ProjectIdOption = None,
    url: UrlOption = None,
    format: FormatOption = "json",
) -> None:
    """Run a trend query and print the chart data.

    Examples:

        typecharts query trend -e signup -e purchase -t line -g day
        typecharts query trend -e signup -t number --from -30d
        typecharts query trend -e signup -t pie -b plan --schema events.py
    """
    validated_type = cast(ChartType, validate_literal(chart_type, ChartType, "--type"))
    validated_group_by = cast(
        Interval, validate_literal(group_by, Interval, "--group-by")
    )
    validated_sampling = cast(
        SamplingMode, validate_literal(sampling, SamplingMode, "--sampling")
    )

    event_schema = load_schema(schema) if schema is not None else None
    posthog = get_posthog(
        ctx, api_key=api_key, project_id=project_id, url=url, events=event_schema
    )

    query = posthog.query()
    for event in events:
        query = query.add_series(event, sampling=validated_sampling)

    with status_spinner(ctx, "Running trend query..."):
        chart = query.execute(
            group_by=validated_group_by,
            type=validated_type,
            breakdown_by=breakdown,
            compare_to_previous_period=compare,
            data_index=data_index,
            date_from=date_from,
            date_to=date_to,
        )

    if format == "json":
        output_result(ctx, chart.to_dict(), format=format)
    elif isinstance(chart, NumberChart):
        row = {"label": chart.data_key, "value": chart.data}
        output_result(ctx, row, format=format)
    elif isinstance(chart, PieChart):
        output_result(ctx, [s.to_dict() for s in chart.data], format=format)
    else:
        output_result(
            ctx, chart.data, columns=[chart.data_key, *chart.labels], format=format
        )
