"""Shaping functions for PostHog trend responses.

Converts the raw ``insights/trend`` response into chart results. Each
function is pure: the response and series are read, never modified, so the
same response can be shaped any number of times with identical output.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from typecharts.charts import (
    Chart,
    NumberChart,
    PieChart,
    PieSlice,
    TimeSeriesChart,
    default_data_key,
    is_time_series,
)
from typecharts.exceptions import UnsupportedChartTypeError
from typecharts.types import Series

_logger = logging.getLogger(__name__)

# Chart types shaped as one aggregated value per series
AGGREGATE_CHART_TYPES = frozenset({"pie", "bar-total"})

# Chart types with a display mapping but no shaper
UNSUPPORTED_CHART_TYPES = frozenset({"table", "world"})


def check_data_key(data_key: str, labels: Iterable[str]) -> None:
    """Reject a category field name that equals a series label.

    Raises:
        ValueError: If data_key is one of labels.
    """
    if data_key in set(labels):
        raise ValueError(
            f"Data key '{data_key}' collides with a series label. "
            "Pass a different data_index or relabel the series."
        )


def check_unique_labels(labels: Iterable[str]) -> None:
    """Reject series labels that would share a column.

    Raises:
        ValueError: If a label appears more than once.
    """
    seen: set[str] = set()
    for label in labels:
        if label in seen:
            raise ValueError(
                f"Series label '{label}' is used more than once. "
                "Give each series a distinct label."
            )
        seen.add(label)


def _format_value(value: Any) -> str:
    """Stringify a data point, rendering integral floats without '.0'."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _series_for_result(
    result: dict[str, Any],
    index: int,
    series: Sequence[Series],
) -> Series | None:
    """Find the configured series a result belongs to.

    Uses the result's ``action.order`` when PostHog includes it (breakdowns
    and comparisons produce several results per series), else the index.
    """
    action = result.get("action")
    order = action.get("order") if isinstance(action, dict) else None
    position = order if isinstance(order, int) else index
    if 0 <= position < len(series):
        return series[position]
    return None


def result_label(
    result: dict[str, Any],
    index: int,
    series: Sequence[Series],
) -> str:
    """Return the display label for one trend result.

    The configured series label (explicit label, else event name) is used,
    falling back to the label PostHog returned. Breakdown results append
    `` - <breakdown_value>``; comparison results append `` (<compare_label>)``.
    """
    matched = _series_for_result(result, index, series)
    if matched is not None:
        label = matched.display_label
    else:
        label = str(result.get("label", ""))

    breakdown_value = result.get("breakdown_value")
    if breakdown_value is not None and breakdown_value != "":
        if isinstance(breakdown_value, list):
            breakdown_value = "::".join(str(v) for v in breakdown_value)
        label = f"{label} - {breakdown_value}"

    compare_label = result.get("compare_label")
    if result.get("compare") and compare_label:
        label = f"{label} ({compare_label})"
    return label


def _bucket_labels(result: dict[str, Any]) -> list[Any]:
    """Return the per-point bucket labels of a result."""
    for key in ("labels", "days", "dates"):
        values = result.get(key)
        if values:
            return list(values)
    return []


def _merge_bucket_order(order: list[str], buckets: Sequence[str]) -> None:
    """Merge one result's buckets into order, keeping both sequences' order.

    Unseen buckets go right before the next already-placed bucket of the
    same result, or right after the last one when none follows.
    """
    placed = set(order)
    pending: list[str] = []
    last: str | None = None
    for bucket in buckets:
        if bucket in placed:
            if pending:
                at = order.index(bucket)
                order[at:at] = pending
                placed.update(pending)
                pending = []
            last = bucket
        elif bucket not in pending:
            pending.append(bucket)
    if pending:
        at = order.index(last) + 1 if last is not None else len(order)
        order[at:at] = pending


def trends_to_time_series(
    raw: dict[str, Any],
    series: Sequence[Series],
    chart_type: str = "line",
    data_key: str = "date",
) -> TimeSeriesChart:
    """Transform a trend response into one row per time bucket.

    Rows are keyed by the bucket label, so a series contributes to the row
    of the matching date even when series return different numbers of
    points. Bucket orders are merged across results, so a series that starts
    later than another still yields chronological rows. Points without a
    bucket label are skipped.

    Example:
        Two results with labels ["2024-01-01", "2024-01-02"] and data
        [1, 2] / [3, 4] for series "signup" and "purchase" produce::

            [
                {"date": "2024-01-01", "signup": "1", "purchase": "3"},
                {"date": "2024-01-02", "signup": "2", "purchase": "4"},
            ]

    Args:
        raw: Raw trend response.
        series: Configured series, in insertion order.
        chart_type: Time-series chart type tag.
        data_key: Name of the bucket label field.

    Returns:
        TimeSeriesChart tagged with chart_type.

    Raises:
        ValueError: If a series label equals data_key, or two results
            share a label.
    """
    results = raw.get("result") or []
    labels = [result_label(result, i, series) for i, result in enumerate(results)]
    check_data_key(data_key, labels)
    check_unique_labels(labels)

    rows: dict[str, dict[str, str]] = {}
    order: list[str] = []
    for label, result in zip(labels, results, strict=True):
        buckets = _bucket_labels(result)
        present: list[str] = []
        for i, value in enumerate(result.get("data", [])):
            bucket = buckets[i] if i < len(buckets) else None
            if not bucket:
                continue
            bucket = str(bucket)
            present.append(bucket)
            rows.setdefault(bucket, {data_key: bucket})[label] = _format_value(value)
        _merge_bucket_order(order, present)

    return TimeSeriesChart(
        type=chart_type, data_key=data_key, data=[rows[b] for b in order]
    )


def trends_to_pie(
    raw: dict[str, Any],
    series: Sequence[Series],
    chart_type: str = "pie",
    data_key: str = "value",
) -> PieChart:
    """Transform a trend response into one slice per result.

    Args:
        raw: Raw trend response.
        series: Configured series, in insertion order.
        chart_type: ``pie`` or ``bar-total``.
        data_key: Name of the value field.

    Returns:
        PieChart with slices in result order.
    """
    slices = [
        PieSlice(
            label=result_label(result, index, series),
            value=result.get("aggregated_value") or 0,
        )
        for index, result in enumerate(raw.get("result") or [])
    ]
    return PieChart(type=chart_type, data_key=data_key, data=slices)


def trends_to_number(
    raw: dict[str, Any],
    series: Sequence[Series],
    data_key: str | None = None,
) -> NumberChart:
    """Transform a trend response into a single value.

    The value is the first result's ``aggregated_value`` (0 without results).
    The data key falls back through: data_key argument, the first series'
    explicit label, the label PostHog returned, then ``value``.

    Args:
        raw: Raw trend response.
        series: Configured series, in insertion order.
        data_key: Explicit data key override.

    Returns:
        NumberChart tagged ``number``.
    """
    results = raw.get("result") or []
    first = results[0] if results else None

    value = (first.get("aggregated_value") if first else None) or 0
    key = (
        data_key
        or (series[0].label if series else None)
        or (first.get("label") if first else None)
        or default_data_key("number")
    )
    return NumberChart(type="number", data_key=str(key), data=value)


def shape_trend_response(
    raw: dict[str, Any],
    series: Sequence[Series],
    chart_type: str,
    data_index: str | None = None,
) -> Chart:
    """Shape a trend response for the requested chart type.

    Args:
        raw: Raw trend response.
        series: Configured series, in insertion order.
        chart_type: Target chart type.
        data_index: Override for the category field name.

    Returns:
        Chart result tagged with chart_type.

    Raises:
        UnsupportedChartTypeError: For ``table`` and ``world``.
        ValueError: For unknown chart types or data key collisions.
    """
    default_key = default_data_key(chart_type)
    _logger.debug(
        "Shaping %d trend results as %s", len(raw.get("result") or []), chart_type
    )

    if is_time_series(chart_type):
        return trends_to_time_series(
            raw, series, chart_type, data_index or default_key
        )
    if chart_type in AGGREGATE_CHART_TYPES:
        return trends_to_pie(raw, series, chart_type, data_index or default_key)
    if chart_type == "number":
        return trends_to_number(raw, series, data_index)
    raise UnsupportedChartTypeError(chart_type)
