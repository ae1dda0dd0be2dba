"""PostHog facade and trend query builder.

The PostHog class is the entry point: it resolves credentials, owns the
HTTP client, and hands out PostHogQuery builders.

Example:
    ```python
    from events import EVENTS  # generated by `typecharts generate`

    with PostHog(events=EVENTS) as ph:
        chart = (
            ph.query()
            .add_series("signup", sampling="total")
            .add_series("purchase", sampling="dau", label="buyers")
            .add_filter_group("all", Filter("plan", "equals", "pro"))
            .execute(group_by="day", type="line")
        )
    chart.data  # [{"date": "...", "signup": "12", "buyers": "3"}, ...]
    ```

Builders are immutable: every add_* call returns a new PostHogQuery, so an
intermediate configuration can be reused to build several reports.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, get_args

from typecharts._internal.api_client import PostHogAPIClient
from typecharts._internal.config import ConfigManager, Credentials
from typecharts._internal.services.definitions import DefinitionService
from typecharts._internal.services.generator import generate_events_module
from typecharts._internal.shaping import (
    UNSUPPORTED_CHART_TYPES,
    check_data_key,
    check_unique_labels,
    shape_trend_response,
)
from typecharts._literal_types import (
    ChartType,
    FilterCompare,
    FilterMatch,
    Interval,
    SamplingMode,
)
from typecharts.charts import Chart, default_data_key, is_time_series
from typecharts.exceptions import (
    EventNotFoundError,
    PropertyNotFoundError,
    UnsupportedChartTypeError,
)
from typecharts.types import EventDefinition, Filter, FilterGroup, Series

if TYPE_CHECKING:
    from types import TracebackType

_logger = logging.getLogger(__name__)

CHART_TYPE_TO_DISPLAY: MappingProxyType[str, str] = MappingProxyType(
    {
        "bar-total": "ActionsBarValue",
        "cumulative-line": "ActionsLineGraphCumulative",
        "line": "ActionsLineGraph",
        "bar": "ActionsBar",
        "area": "ActionsAreaGraph",
        "number": "BoldNumber",
        "pie": "ActionsPie",
        "table": "ActionsTable",
        "world": "WorldMap",
    }
)
"""PostHog display type for each chart type."""

COMPARE_TO_OPERATOR: MappingProxyType[str, str] = MappingProxyType(
    {
        "equals": "exact",
        "does_not_equal": "is_not",
        "contains": "icontains",
        "does_not_contain": "not_icontains",
        "matches_regex": "regex",
        "does_not_match_regex": "not_regex",
        "greater_than": "gt",
        "less_than": "lt",
        "is_set": "is_set",
        "is_not_set": "is_not_set",
    }
)
"""PostHog property operator for each filter comparison."""

MATCH_TO_GROUP_TYPE: MappingProxyType[str, str] = MappingProxyType(
    {"all": "AND", "any": "OR"}
)

EventSchema = Mapping[str, EventDefinition | Mapping[str, Any]]
"""Event name -> definition, as EventDefinition or its generated dict form."""


def _check_literal(value: str, literal_type: Any, param_name: str) -> None:
    """Raise ValueError if value is not one of a Literal's options."""
    valid_values = get_args(literal_type)
    if value not in valid_values:
        raise ValueError(
            f"Invalid {param_name}: {value!r}. "
            f"Must be one of: {', '.join(valid_values)}"
        )


def _similar_names(name: str, candidates: Sequence[str]) -> list[str]:
    """Suggest candidates matching case-insensitively or by substring."""
    lowered = name.lower()
    return [
        c
        for c in candidates
        if c.lower() == lowered or lowered in c.lower() or c.lower() in lowered
    ]


def _normalize_schema(events: EventSchema) -> dict[str, EventDefinition]:
    """Convert a schema mapping to EventDefinition values."""
    return {
        name: (
            definition
            if isinstance(definition, EventDefinition)
            else EventDefinition.from_dict({"name": name, **definition})
        )
        for name, definition in events.items()
    }


_PRESENCE_OPERATORS = frozenset({"is_set", "is_not_set"})


def _filter_to_param(f: Filter) -> dict[str, Any]:
    """Serialize a Filter as a PostHog event property filter."""
    operator = COMPARE_TO_OPERATOR[f.compare]
    return {
        "key": f.name,
        "value": operator if operator in _PRESENCE_OPERATORS else f.value,
        "operator": operator,
        "type": "event",
    }


def _groups_to_param(
    groups: Sequence[FilterGroup], match: FilterMatch = "all"
) -> dict[str, Any]:
    """Serialize filter groups as a nested PostHog property group."""
    return {
        "type": MATCH_TO_GROUP_TYPE[match],
        "values": [
            {
                "type": MATCH_TO_GROUP_TYPE[group.match],
                "values": [_filter_to_param(f) for f in group.filters],
            }
            for group in groups
        ],
    }


class PostHogQuery:
    """Immutable trend query builder.

    Accumulates series and filter groups; execute() sends the trend query
    and shapes the response for the requested chart type. execute() may be
    called repeatedly and issues a fresh request each time.

    When the owning PostHog client was given an event schema, every event
    and property name is validated as it is added.
    """

    def __init__(
        self,
        api_client: PostHogAPIClient,
        schema: Mapping[str, EventDefinition] | None = None,
        series: tuple[Series, ...] = (),
        filter_groups: tuple[FilterGroup, ...] = (),
    ) -> None:
        """Initialize a query.

        Args:
            api_client: Client used by execute().
            schema: Declared event schema, or None to skip validation.
            series: Series configured so far.
            filter_groups: Filter groups configured so far.
        """
        self._api_client = api_client
        self._schema = schema
        self._series = series
        self._filter_groups = filter_groups

    @property
    def series(self) -> tuple[Series, ...]:
        """Configured series, in insertion order."""
        return self._series

    @property
    def filter_groups(self) -> tuple[FilterGroup, ...]:
        """Configured filter groups, in insertion order."""
        return self._filter_groups

    def _replace(
        self,
        *,
        series: tuple[Series, ...] | None = None,
        filter_groups: tuple[FilterGroup, ...] | None = None,
    ) -> PostHogQuery:
        return PostHogQuery(
            self._api_client,
            self._schema,
            self._series if series is None else series,
            self._filter_groups if filter_groups is None else filter_groups,
        )

    # =========================================================================
    # Validation
    # =========================================================================

    def _require_event(self, name: str) -> EventDefinition | None:
        if self._schema is None:
            return None
        definition = self._schema.get(name)
        if definition is None:
            raise EventNotFoundError(
                name, similar_events=_similar_names(name, list(self._schema))
            )
        return definition

    def _require_property(self, property_name: str, event_names: Sequence[str]) -> None:
        if self._schema is None:
            return
        definitions = [self._schema[n] for n in event_names if n in self._schema]
        if any(d.has_property(property_name) for d in definitions):
            return
        available = sorted({p for d in definitions for p in d.property_names})
        raise PropertyNotFoundError(property_name, list(event_names), available)

    def _validate_groups(
        self, groups: Sequence[FilterGroup], event_names: Sequence[str]
    ) -> None:
        for group in groups:
            _check_literal(group.match, FilterMatch, "match")
            for f in group.filters:
                _check_literal(f.compare, FilterCompare, "compare")
                self._require_property(f.name, event_names)

    def _event_names(self) -> list[str]:
        return list(dict.fromkeys(s.name for s in self._series))

    # =========================================================================
    # Builder
    # =========================================================================

    def add_series(
        self,
        name: str,
        *,
        sampling: SamplingMode = "total",
        label: str | None = None,
        where: FilterGroup | Sequence[FilterGroup] | None = None,
        math_property: str | None = None,
    ) -> PostHogQuery:
        """Return a new query with one more series.

        Args:
            name: Event name.
            sampling: Aggregation applied to the event.
            label: Display label; defaults to the event name.
            where: Filter groups scoped to this series.
            math_property: Property aggregated by property-based samplings
                (sum, min, max, median, p90, ...).

        Returns:
            New PostHogQuery; this query is unchanged.

        Raises:
            EventNotFoundError: If name is not in the declared schema.
            PropertyNotFoundError: If a filter or math_property is not a
                property of the event.
            ValueError: If sampling, match, or compare is invalid.
        """
        _check_literal(sampling, SamplingMode, "sampling")
        self._require_event(name)

        groups: tuple[FilterGroup, ...]
        if where is None:
            groups = ()
        elif isinstance(where, FilterGroup):
            groups = (where,)
        else:
            groups = tuple(where)
        self._validate_groups(groups, [name])
        if math_property is not None:
            self._require_property(math_property, [name])

        series = Series(
            name=name,
            sampling=sampling,
            label=label,
            where=groups,
            math_property=math_property,
        )
        return self._replace(series=(*self._series, series))

    def add_filter_group(
        self,
        match: FilterMatch,
        filters: Filter | Sequence[Filter],
    ) -> PostHogQuery:
        """Return a new query with one more global filter group.

        Filter properties must belong to an event among the series added
        so far.

        Args:
            match: ``all`` or ``any``.
            filters: A single filter or a sequence of filters.

        Returns:
            New PostHogQuery; this query is unchanged.

        Raises:
            PropertyNotFoundError: If a filter property is not defined on
                any configured series' event.
            ValueError: If match or compare is invalid.
        """
        group = FilterGroup.of(match, filters)
        self._validate_groups([group], self._event_names())
        return self._replace(filter_groups=(*self._filter_groups, group))

    # =========================================================================
    # Execution
    # =========================================================================

    def build_params(
        self,
        group_by: Interval,
        type: ChartType,
        *,
        breakdown_by: str | None = None,
        compare_to_previous_period: bool = False,
        filter_match: FilterMatch = "all",
        date_from: str = "-7d",
        date_to: str | None = None,
        filter_test_accounts: bool = False,
    ) -> dict[str, Any]:
        """Build the trend payload for this query.

        Args:
            group_by: Time bucket.
            type: Target chart type (selects the PostHog display type).
            breakdown_by: Event property to break results down by.
            compare_to_previous_period: Also return the previous period.
            filter_match: How global filter groups combine.
            date_from: Start of the range (absolute or relative, e.g. -7d).
            date_to: End of the range; None means now.
            filter_test_accounts: Exclude internal/test users.

        Returns:
            Payload dict in the order it is encoded.

        Raises:
            ValueError: If group_by, type, or filter_match is invalid.
        """
        _check_literal(group_by, Interval, "group_by")
        _check_literal(type, ChartType, "type")
        _check_literal(filter_match, FilterMatch, "filter_match")

        events: list[dict[str, Any]] = []
        for order, s in enumerate(self._series):
            entry: dict[str, Any] = {
                "id": s.name,
                "name": s.name,
                "order": order,
                "type": "events",
                "math": s.sampling,
            }
            if s.math_property is not None:
                entry["math_property"] = s.math_property
            if s.label is not None:
                entry["custom_name"] = s.label
            if s.where:
                entry["properties"] = _groups_to_param(s.where)
            events.append(entry)

        params: dict[str, Any] = {
            "insight": "TRENDS",
            "refresh": False,
            "filter_test_accounts": filter_test_accounts,
            "entity_type": "events",
            "events": events,
            "properties": _groups_to_param(self._filter_groups, filter_match),
            "date_from": date_from,
            "date_to": date_to,
            "display": CHART_TYPE_TO_DISPLAY[type],
            "interval": group_by,
        }
        if breakdown_by is not None:
            params["breakdown"] = breakdown_by
            params["breakdown_type"] = "event"
        if compare_to_previous_period:
            params["compare"] = True
        return params

    def execute(
        self,
        group_by: Interval,
        type: ChartType,
        *,
        breakdown_by: str | None = None,
        compare_to_previous_period: bool = False,
        data_index: str | None = None,
        filter_match: FilterMatch = "all",
        date_from: str = "-7d",
        date_to: str | None = None,
        filter_test_accounts: bool = False,
    ) -> Chart:
        """Run the trend query and shape the response.

        Args:
            group_by: Time bucket (day, hour, week, month).
            type: Target chart type.
            breakdown_by: Event property to break results down by.
            compare_to_previous_period: Also return the previous period.
            data_index: Override for the category field name.
            filter_match: How global filter groups combine.
            date_from: Start of the range.
            date_to: End of the range.
            filter_test_accounts: Exclude internal/test users.

        Returns:
            TimeSeriesChart, NumberChart, or PieChart tagged with type.

        Raises:
            UnsupportedChartTypeError: For ``table`` and ``world``; raised
                before any request is sent.
            PropertyNotFoundError: If breakdown_by is not a property of a
                configured series' event.
            ValueError: For invalid options, an empty query, a data key
                that collides with a series label, or two time-series
                series sharing a label.
            APIError: On a non-2xx response.
        """
        _check_literal(type, ChartType, "type")
        if type in UNSUPPORTED_CHART_TYPES:
            raise UnsupportedChartTypeError(type)
        if not self._series:
            raise ValueError("Add at least one series before executing the query.")
        if breakdown_by is not None:
            self._require_property(breakdown_by, self._event_names())
        if is_time_series(type):
            labels = [s.display_label for s in self._series]
            check_data_key(data_index or default_data_key(type), labels)
            check_unique_labels(labels)

        params = self.build_params(
            group_by,
            type,
            breakdown_by=breakdown_by,
            compare_to_previous_period=compare_to_previous_period,
            filter_match=filter_match,
            date_from=date_from,
            date_to=date_to,
            filter_test_accounts=filter_test_accounts,
        )
        _logger.debug(
            "Executing %s trend query with %d series", type, len(self._series)
        )
        raw = self._api_client.trend(params)
        return shape_trend_response(raw, self._series, type, data_index)


class PostHog:
    """Entry point for PostHog trend queries and schema retrieval.

    Credentials are resolved in priority order per field:
    1. Explicit arguments
    2. Environment variables (POSTHOG_API_KEY, POSTHOG_PROJECT_ID, POSTHOG_URL)
    3. The typecharts config file

    Example:
        ```python
        ph = PostHog(api_key="phx_...", project_id="12345")
        chart = ph.query().add_series("signup").execute(group_by="day", type="number")
        ph.close()
        ```
    """

    def __init__(
        self,
        api_key: str | None = None,
        project_id: str | None = None,
        url: str | None = None,
        *,
        events: EventSchema | None = None,
        timeout: float = 120.0,
        _config_manager: ConfigManager | None = None,
        _api_client: PostHogAPIClient | None = None,
    ) -> None:
        """Create a PostHog client.

        Args:
            api_key: PostHog personal API key.
            project_id: PostHog project id.
            url: Project API base URL (default: app.posthog.com project URL).
            events: Declared event schema used to validate queries, e.g. the
                EVENTS constant of a generated events module. None disables
                validation.
            timeout: Request timeout in seconds.
            _config_manager: Injected ConfigManager for testing.
            _api_client: Injected PostHogAPIClient for testing.

        Raises:
            ConfigError: If the API key or project id cannot be resolved.
        """
        config_manager = _config_manager or ConfigManager()
        self._credentials: Credentials = config_manager.resolve_credentials(
            api_key, project_id, url
        )
        self._schema: Mapping[str, EventDefinition] | None = (
            MappingProxyType(_normalize_schema(events)) if events is not None else None
        )
        self._api_client = _api_client or PostHogAPIClient(
            self._credentials, timeout=timeout
        )
        self._definitions: DefinitionService | None = None

    @property
    def credentials(self) -> Credentials:
        """Resolved credentials."""
        return self._credentials

    @property
    def schema(self) -> Mapping[str, EventDefinition] | None:
        """Declared event schema, if any."""
        return self._schema

    @property
    def definitions(self) -> DefinitionService:
        """Definition service bound to this client."""
        if self._definitions is None:
            self._definitions = DefinitionService(self._api_client)
        return self._definitions

    def query(self) -> PostHogQuery:
        """Start an empty trend query."""
        return PostHogQuery(self._api_client, self._schema)

    def fetch_event_schema(
        self,
        on_event: Callable[[str, int], None] | None = None,
    ) -> list[EventDefinition]:
        """Fetch all event definitions with their properties.

        Args:
            on_event: Optional progress callback (event_name, property_count).

        Returns:
            One EventDefinition per event, in API order.
        """
        return self.definitions.fetch_event_schema(on_event)

    def generate(
        self,
        path: Path | None = None,
        on_event: Callable[[str, int], None] | None = None,
    ) -> Path:
        """Fetch the event schema and write it to an events module.

        Args:
            path: Output path. Default: events.py in the current directory.
            on_event: Optional progress callback (event_name, property_count).

        Returns:
            The path written.
        """
        events = self.fetch_event_schema(on_event)
        return generate_events_module(events, path)

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._api_client.close()

    def __enter__(self) -> PostHog:
        """Enter context manager."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit context manager, closing the HTTP client."""
        self.close()
