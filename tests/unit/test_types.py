"""Unit tests for schema and query configuration types."""

from __future__ import annotations

import dataclasses
from typing import get_args, get_type_hints

import pytest

from typecharts._literal_types import PropertyType
from typecharts.types import (
    EventDefinition,
    Filter,
    FilterGroup,
    PropertyDefinition,
    Series,
)


class TestPropertyDefinition:
    """Tests for PropertyDefinition."""

    def test_type_annotated_with_property_literal(self) -> None:
        hints = get_type_hints(PropertyDefinition)
        assert hints["type"] == PropertyType | None

    @pytest.mark.parametrize("property_type", get_args(PropertyType))
    def test_known_types_serialize(self, property_type: PropertyType) -> None:
        prop = PropertyDefinition("plan", property_type)
        assert prop.to_dict() == {"name": "plan", "type": property_type}


class TestEventDefinition:
    """Tests for EventDefinition."""

    def test_from_dict(self) -> None:
        event = EventDefinition.from_dict(
            {
                "name": "signup",
                "properties": [
                    {"name": "plan", "type": "String"},
                    {"name": "utm_source"},
                ],
            }
        )
        assert event.name == "signup"
        assert event.properties == (
            PropertyDefinition("plan", "String"),
            PropertyDefinition("utm_source", None),
        )

    def test_from_dict_without_properties(self) -> None:
        assert EventDefinition.from_dict({"name": "x"}).properties == ()

    def test_to_dict_matches_from_dict(self) -> None:
        data = {"name": "signup", "properties": [{"name": "plan", "type": "String"}]}
        assert EventDefinition.from_dict(data).to_dict() == data

    def test_property_lookup(self) -> None:
        event = EventDefinition("signup", (PropertyDefinition("plan"),))
        assert event.property_names == ["plan"]
        assert event.has_property("plan")
        assert not event.has_property("amount")

    def test_frozen(self) -> None:
        event = EventDefinition("signup")
        with pytest.raises(dataclasses.FrozenInstanceError):
            event.name = "other"  # type: ignore[misc]


class TestFilterGroup:
    """Tests for FilterGroup.of()."""

    def test_single_filter(self) -> None:
        f = Filter("plan", "equals", "pro")
        assert FilterGroup.of("all", f).filters == (f,)

    def test_filter_sequence(self) -> None:
        filters = [Filter("plan", "equals", "pro"), Filter("plan", "is_set")]
        group = FilterGroup.of("any", filters)
        assert group.match == "any"
        assert group.filters == tuple(filters)


class TestSeries:
    """Tests for Series."""

    def test_display_label_defaults_to_name(self) -> None:
        assert Series("signup").display_label == "signup"

    def test_display_label_uses_label(self) -> None:
        assert Series("signup", label="Signups").display_label == "Signups"

    def test_defaults(self) -> None:
        series = Series("signup")
        assert series.sampling == "total"
        assert series.where == ()
        assert series.math_property is None
