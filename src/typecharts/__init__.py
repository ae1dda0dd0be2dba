"""
typecharts - typed PostHog trend queries shaped for charting.

Generate an events module from your PostHog project, then build trend
queries validated against it and get back chart-ready data.
"""

from typecharts._internal.params import to_params
from typecharts._literal_types import (
    ChartType,
    FilterCompare,
    FilterMatch,
    Interval,
    PropertyType,
    SamplingMode,
    TimeSeriesChartType,
)
from typecharts.charts import (
    DEFAULT_CHART_DATA_KEYS,
    TIME_SERIES_CHART_TYPES,
    Chart,
    NumberChart,
    PieChart,
    PieSlice,
    TimeSeriesChart,
    default_data_key,
    is_time_series,
)
from typecharts.exceptions import (
    APIError,
    AuthenticationError,
    ConfigError,
    EventNotFoundError,
    PropertyNotFoundError,
    QueryError,
    RateLimitError,
    ServerError,
    TypechartsError,
    UnsupportedChartTypeError,
)
from typecharts.query import PostHog, PostHogQuery
from typecharts.types import (
    EventDefinition,
    Filter,
    FilterGroup,
    PropertyDefinition,
    Series,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "PostHog",
    "PostHogQuery",
    "to_params",
    # Type aliases
    "ChartType",
    "FilterCompare",
    "FilterMatch",
    "Interval",
    "PropertyType",
    "SamplingMode",
    "TimeSeriesChartType",
    # Chart taxonomy
    "DEFAULT_CHART_DATA_KEYS",
    "TIME_SERIES_CHART_TYPES",
    "default_data_key",
    "is_time_series",
    # Chart results
    "Chart",
    "NumberChart",
    "PieChart",
    "PieSlice",
    "TimeSeriesChart",
    # Schema and query types
    "EventDefinition",
    "PropertyDefinition",
    "Filter",
    "FilterGroup",
    "Series",
    # Exceptions
    "TypechartsError",
    "APIError",
    "AuthenticationError",
    "ConfigError",
    "EventNotFoundError",
    "PropertyNotFoundError",
    "QueryError",
    "RateLimitError",
    "ServerError",
    "UnsupportedChartTypeError",
]
