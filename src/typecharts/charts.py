"""Chart taxonomy and chart result types.

Every trend query is shaped into one of a handful of chart results. Each
result carries its ``type`` tag, the ``data_key`` naming the category column
(``date`` for time-series charts, ``value`` otherwise), and a ``data`` payload
shaped for its family:

- TimeSeriesChart: ``line``, ``bar``, ``area``, ``cumulative-line``
- NumberChart: ``number``
- PieChart: ``pie`` and ``bar-total``

All result types are immutable frozen dataclasses with a lazily computed,
cached pandas DataFrame via the ``df`` property and JSON serialization via
``to_dict()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, get_args

import pandas as pd

from typecharts._literal_types import ChartType, TimeSeriesChartType

CHART_TYPES: tuple[str, ...] = get_args(ChartType)
"""All chart types, in declaration order."""

TIME_SERIES_CHART_TYPES: frozenset[str] = frozenset(get_args(TimeSeriesChartType))
"""Chart types whose data is one row per time bucket."""

DEFAULT_CHART_DATA_KEYS: MappingProxyType[str, str] = MappingProxyType(
    {
        "line": "date",
        "bar": "date",
        "area": "date",
        "cumulative-line": "date",
        "number": "value",
        "pie": "value",
        "bar-total": "value",
        "table": "value",
        "world": "value",
    }
)
"""Default category field name per chart type."""


def is_time_series(chart_type: str) -> bool:
    """Return True if the chart type is in the time-series family."""
    return chart_type in TIME_SERIES_CHART_TYPES


def default_data_key(chart_type: str) -> str:
    """Return the default category field name for a chart type.

    Args:
        chart_type: One of the nine chart types.

    Returns:
        ``"date"`` for time-series types, ``"value"`` otherwise.

    Raises:
        ValueError: If chart_type is not a known chart type.
    """
    try:
        return DEFAULT_CHART_DATA_KEYS[chart_type]
    except KeyError:
        valid = ", ".join(CHART_TYPES)
        raise ValueError(
            f"Unknown chart type: {chart_type!r}. Must be one of: {valid}"
        ) from None


@dataclass(frozen=True)
class TimeSeriesChart:
    """Chart with one row per time bucket.

    Each row maps every series label to its stringified value, plus the
    ``data_key`` field holding the bucket label.

    Example:
        ```python
        chart.data
        # [{"date": "2024-01-01", "signup": "1", "purchase": "3"}, ...]
        ```
    """

    type: str
    """Chart type tag (line, bar, area, cumulative-line)."""

    data_key: str
    """Field in each row holding the time bucket label."""

    data: list[dict[str, str]] = field(default_factory=list)
    """Rows in order of first appearance."""

    _df_cache: pd.DataFrame | None = field(default=None, repr=False, compare=False)

    @property
    def labels(self) -> list[str]:
        """Series labels present in the rows, in first-seen order."""
        seen: dict[str, None] = {}
        for row in self.data:
            for key in row:
                if key != self.data_key:
                    seen.setdefault(key, None)
        return list(seen)

    @property
    def df(self) -> pd.DataFrame:
        """Convert to DataFrame with the data key column first."""
        if self._df_cache is not None:
            return self._df_cache

        columns = [self.data_key, *self.labels]
        result_df = (
            pd.DataFrame(self.data, columns=columns)
            if self.data
            else pd.DataFrame(columns=columns)
        )

        object.__setattr__(self, "_df_cache", result_df)
        return result_df

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "type": self.type,
            "dataKey": self.data_key,
            "data": [dict(row) for row in self.data],
        }


@dataclass(frozen=True)
class NumberChart:
    """Chart holding a single aggregated value."""

    type: str
    """Chart type tag (number)."""

    data_key: str
    """Label for the value."""

    data: float | int = 0
    """The aggregated value."""

    _df_cache: pd.DataFrame | None = field(default=None, repr=False, compare=False)

    @property
    def df(self) -> pd.DataFrame:
        """Convert to a single-row DataFrame with columns: label, value."""
        if self._df_cache is not None:
            return self._df_cache

        result_df = pd.DataFrame([{"label": self.data_key, "value": self.data}])

        object.__setattr__(self, "_df_cache", result_df)
        return result_df

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "type": self.type,
            "dataKey": self.data_key,
            "data": self.data,
        }


@dataclass(frozen=True)
class PieSlice:
    """One labelled aggregate in a PieChart."""

    label: str
    """Series display label."""

    value: float | int
    """Aggregated value for the series."""

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {"label": self.label, "value": self.value}


@dataclass(frozen=True)
class PieChart:
    """Chart with one aggregated value per series.

    Used for ``pie`` and ``bar-total`` charts.
    """

    type: str
    """Chart type tag (pie, bar-total)."""

    data_key: str
    """Name of the value field."""

    data: list[PieSlice] = field(default_factory=list)
    """Slices in result order."""

    _df_cache: pd.DataFrame | None = field(default=None, repr=False, compare=False)

    @property
    def total(self) -> float | int:
        """Sum of all slice values."""
        return sum(s.value for s in self.data)

    @property
    def df(self) -> pd.DataFrame:
        """Convert to DataFrame with columns: label, value."""
        if self._df_cache is not None:
            return self._df_cache

        result_df = (
            pd.DataFrame([s.to_dict() for s in self.data])
            if self.data
            else pd.DataFrame(columns=["label", "value"])
        )

        object.__setattr__(self, "_df_cache", result_df)
        return result_df

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "type": self.type,
            "dataKey": self.data_key,
            "data": [s.to_dict() for s in self.data],
        }


Chart = TimeSeriesChart | NumberChart | PieChart
"""Any shaped chart result."""
