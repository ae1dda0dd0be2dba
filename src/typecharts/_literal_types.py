"""Shared Literal type aliases for parameter validation.

These types are exported from the public API and can be used by
library consumers for their own type hints.

Example:
    from typecharts import ChartType, Interval, PostHog

    def weekly(ph: PostHog, chart: ChartType, unit: Interval = "week") -> None:
        ph.query().add_series("signup", sampling="total").execute(
            group_by=unit, type=chart
        )
"""

from __future__ import annotations

from typing import Literal

# Output chart shapes
ChartType = Literal[
    "line",
    "bar",
    "area",
    "cumulative-line",
    "number",
    "pie",
    "bar-total",
    "table",
    "world",
]

# Chart types rendered as one row per time bucket
TimeSeriesChartType = Literal["line", "bar", "area", "cumulative-line"]

# Time buckets for trend queries
Interval = Literal["day", "hour", "week", "month"]

# PostHog aggregation functions ("math")
SamplingMode = Literal[
    "total",
    "dau",
    "weekly_active",
    "monthly_active",
    "unique_group",
    "unique_session",
    "sum",
    "min",
    "max",
    "median",
    "p90",
    "p95",
    "p99",
    "min_count_per_actor",
    "max_count_per_actor",
    "avg_count_per_actor",
    "median_count_per_actor",
    "p90_count_per_actor",
    "p95_count_per_actor",
    "p99_count_per_actor",
    "hogql",
]

# Property comparison operators accepted by Filter
FilterCompare = Literal[
    "equals",
    "does_not_equal",
    "contains",
    "does_not_contain",
    "matches_regex",
    "does_not_match_regex",
    "greater_than",
    "less_than",
    "is_set",
    "is_not_set",
]

# How the filters of a group combine
FilterMatch = Literal["all", "any"]

# Property types reported by the property definitions API
PropertyType = Literal["DateTime", "String", "Numeric", "Boolean"]

__all__ = [
    "ChartType",
    "FilterCompare",
    "FilterMatch",
    "Interval",
    "PropertyType",
    "SamplingMode",
    "TimeSeriesChartType",
]
