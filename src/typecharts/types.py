"""Schema and query configuration types for typecharts.

All types are immutable frozen dataclasses. Definitions come from the
PostHog definitions APIs (or from a generated events module); series and
filters describe a trend query and are accumulated by PostHogQuery.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from typecharts._literal_types import (
    FilterCompare,
    FilterMatch,
    PropertyType,
    SamplingMode,
)

# =============================================================================
# Event Schema Types
# =============================================================================


@dataclass(frozen=True)
class PropertyDefinition:
    """A property recorded on an event."""

    name: str
    """Property name."""

    type: PropertyType | None = None
    """PostHog property type (DateTime, String, Numeric, Boolean) or None."""

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {"name": self.name, "type": self.type}


@dataclass(frozen=True)
class EventDefinition:
    """An event and the properties recorded on it.

    Identity is the event name. Instances are built from the definitions
    APIs or from the dict form written to a generated events module.

    Example:
        ```python
        signup = EventDefinition.from_dict(
            {"name": "signup", "properties": [{"name": "plan", "type": "String"}]}
        )
        signup.property_names  # ["plan"]
        ```
    """

    name: str
    """Event name."""

    properties: tuple[PropertyDefinition, ...] = ()
    """Properties recorded on the event, in API order."""

    @property
    def property_names(self) -> list[str]:
        """Names of all properties on this event."""
        return [p.name for p in self.properties]

    def has_property(self, name: str) -> bool:
        """Return True if the event defines a property with this name."""
        return any(p.name == name for p in self.properties)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "name": self.name,
            "properties": [p.to_dict() for p in self.properties],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EventDefinition:
        """Build an EventDefinition from its dict form.

        Args:
            data: Mapping with ``name`` and an optional ``properties`` list of
                ``{"name", "type"}`` mappings.

        Returns:
            The parsed EventDefinition.
        """
        return cls(
            name=data["name"],
            properties=tuple(
                PropertyDefinition(name=p["name"], type=p.get("type"))
                for p in data.get("properties", ())
            ),
        )


# =============================================================================
# Query Configuration Types
# =============================================================================


@dataclass(frozen=True)
class Filter:
    """A predicate on an event property."""

    name: str
    """Property name."""

    compare: FilterCompare
    """Comparison operator."""

    value: str | int | float | bool | None = None
    """Value to compare against (ignored by is_set / is_not_set)."""


@dataclass(frozen=True)
class FilterGroup:
    """Filters combined with all/any semantics."""

    match: FilterMatch
    """``all`` requires every filter to hold, ``any`` requires one."""

    filters: tuple[Filter, ...] = ()
    """Filters in the group."""

    @classmethod
    def of(
        cls,
        match: FilterMatch,
        filters: Filter | Sequence[Filter],
    ) -> FilterGroup:
        """Build a group from a single filter or a sequence of filters."""
        if isinstance(filters, Filter):
            return cls(match=match, filters=(filters,))
        return cls(match=match, filters=tuple(filters))


@dataclass(frozen=True)
class Series:
    """One tracked event plus its aggregation mode within a query."""

    name: str
    """Event name."""

    sampling: SamplingMode = "total"
    """Aggregation applied to the event."""

    label: str | None = None
    """Display label; defaults to the event name."""

    where: tuple[FilterGroup, ...] = field(default_factory=tuple)
    """Filter groups scoped to this series."""

    math_property: str | None = None
    """Property aggregated by property-based samplings (sum, p90, ...)."""

    @property
    def display_label(self) -> str:
        """Label used for this series in chart output."""
        return self.label if self.label is not None else self.name
