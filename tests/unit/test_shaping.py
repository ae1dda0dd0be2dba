"""Unit tests for trend response shaping."""

from __future__ import annotations

import copy
from typing import Any

import pytest

from typecharts._internal.shaping import (
    check_unique_labels,
    result_label,
    shape_trend_response,
    trends_to_number,
    trends_to_pie,
    trends_to_time_series,
)
from typecharts.charts import NumberChart, PieChart, TimeSeriesChart
from typecharts.exceptions import UnsupportedChartTypeError
from typecharts.types import Series

SIGNUP_PURCHASE = (Series("signup"), Series("purchase"))


def response(*results: dict[str, Any]) -> dict[str, Any]:
    return {"result": list(results)}


class TestTimeSeries:
    """Tests for trends_to_time_series()."""

    def test_rows_per_date(self, two_series_trend: dict[str, Any]) -> None:
        chart = trends_to_time_series(two_series_trend, SIGNUP_PURCHASE)
        assert isinstance(chart, TimeSeriesChart)
        assert chart.type == "line"
        assert chart.data_key == "date"
        assert chart.data == [
            {"date": "2024-01-01", "signup": "1", "purchase": "3"},
            {"date": "2024-01-02", "signup": "2", "purchase": "4"},
        ]

    def test_idempotent_and_input_untouched(
        self, two_series_trend: dict[str, Any]
    ) -> None:
        before = copy.deepcopy(two_series_trend)
        first = trends_to_time_series(two_series_trend, SIGNUP_PURCHASE)
        second = trends_to_time_series(two_series_trend, SIGNUP_PURCHASE)
        assert first.data == second.data
        assert two_series_trend == before

    def test_misaligned_series_merge_by_date(self) -> None:
        """A shorter series fills only the dates it reports."""
        raw = response(
            {"data": [1, 2, 3], "labels": ["d1", "d2", "d3"]},
            {"data": [5, 6], "labels": ["d2", "d3"]},
        )
        chart = trends_to_time_series(raw, SIGNUP_PURCHASE)
        assert chart.data == [
            {"date": "d1", "signup": "1"},
            {"date": "d2", "signup": "2", "purchase": "5"},
            {"date": "d3", "signup": "3", "purchase": "6"},
        ]

    def test_points_without_label_skipped(self) -> None:
        raw = response({"data": [1, 2, 3], "labels": ["d1", "d2"]})
        chart = trends_to_time_series(raw, SIGNUP_PURCHASE[:1])
        assert chart.data == [
            {"date": "d1", "signup": "1"},
            {"date": "d2", "signup": "2"},
        ]

    def test_days_used_when_labels_missing(self) -> None:
        raw = response({"data": [4], "days": ["2024-02-01"]})
        chart = trends_to_time_series(raw, SIGNUP_PURCHASE[:1])
        assert chart.data == [{"date": "2024-02-01", "signup": "4"}]

    def test_value_formatting(self) -> None:
        raw = response({"data": [1.0, 2.5, 0], "labels": ["a", "b", "c"]})
        chart = trends_to_time_series(raw, SIGNUP_PURCHASE[:1])
        assert [row["signup"] for row in chart.data] == ["1", "2.5", "0"]

    def test_custom_data_key_and_type(self, two_series_trend: dict[str, Any]) -> None:
        chart = trends_to_time_series(
            two_series_trend, SIGNUP_PURCHASE, "cumulative-line", "day"
        )
        assert chart.type == "cumulative-line"
        assert chart.data[0]["day"] == "2024-01-01"
        assert "date" not in chart.data[0]

    def test_explicit_labels(self, two_series_trend: dict[str, Any]) -> None:
        series = (Series("signup", label="Signups"), Series("purchase"))
        chart = trends_to_time_series(two_series_trend, series)
        assert chart.labels == ["Signups", "purchase"]

    def test_data_key_collision(self) -> None:
        raw = response({"data": [1], "labels": ["d1"]})
        with pytest.raises(ValueError, match="collides"):
            trends_to_time_series(raw, (Series("signup", label="date"),))

    def test_later_starting_series_keeps_dates_in_order(self) -> None:
        raw = response(
            {"data": [5, 6], "labels": ["d2", "d3"]},
            {"data": [1, 2, 3], "labels": ["d1", "d2", "d3"]},
        )
        chart = trends_to_time_series(raw, SIGNUP_PURCHASE)
        assert [row["date"] for row in chart.data] == ["d1", "d2", "d3"]
        assert chart.data[0] == {"date": "d1", "purchase": "1"}
        assert chart.data[1] == {"date": "d2", "signup": "5", "purchase": "2"}

    def test_gap_filled_by_later_series(self) -> None:
        raw = response(
            {"data": [1, 4], "labels": ["d1", "d4"]},
            {"data": [1, 2], "labels": ["d1", "d2"]},
            {"data": [3, 4], "labels": ["d3", "d4"]},
        )
        series = (Series("a"), Series("b"), Series("c"))
        chart = trends_to_time_series(raw, series)
        assert [row["date"] for row in chart.data] == ["d1", "d2", "d3", "d4"]

    def test_duplicate_series_labels_rejected(self) -> None:
        """Two series with the same label would write to one column."""
        raw = response(
            {"action": {"order": 0}, "data": [10, 20], "labels": ["d1", "d2"]},
            {"action": {"order": 1}, "data": [1, 2], "labels": ["d1", "d2"]},
        )
        series = (Series("signup", "total"), Series("signup", "dau"))
        with pytest.raises(ValueError, match="more than once"):
            trends_to_time_series(raw, series)

    def test_duplicate_events_with_distinct_labels(self) -> None:
        raw = response(
            {"action": {"order": 0}, "data": [10], "labels": ["d1"]},
            {"action": {"order": 1}, "data": [1], "labels": ["d1"]},
        )
        series = (
            Series("signup", "total", label="all"),
            Series("signup", "dau", label="users"),
        )
        chart = trends_to_time_series(raw, series)
        assert chart.data == [{"date": "d1", "all": "10", "users": "1"}]

    def test_empty_result(self) -> None:
        chart = trends_to_time_series({"result": []}, SIGNUP_PURCHASE)
        assert chart.data == []


class TestResultLabel:
    """Tests for result_label()."""

    def test_action_order_selects_series(self) -> None:
        result = {"action": {"order": 1}, "label": "purchase"}
        assert result_label(result, 0, SIGNUP_PURCHASE) == "purchase"

    def test_index_used_without_order(self) -> None:
        assert result_label({"label": "x"}, 1, SIGNUP_PURCHASE) == "purchase"

    def test_api_label_for_unknown_series(self) -> None:
        assert result_label({"label": "other"}, 5, SIGNUP_PURCHASE) == "other"

    def test_breakdown_suffix(self) -> None:
        result = {"action": {"order": 0}, "breakdown_value": "pro"}
        assert result_label(result, 0, SIGNUP_PURCHASE) == "signup - pro"

    def test_compare_suffix(self) -> None:
        result = {"action": {"order": 0}, "compare": True, "compare_label": "previous"}
        assert result_label(result, 0, SIGNUP_PURCHASE) == "signup (previous)"

    def test_breakdown_results_share_a_series(self) -> None:
        raw = response(
            {
                "action": {"order": 0},
                "breakdown_value": "pro",
                "data": [1],
                "labels": ["d1"],
            },
            {
                "action": {"order": 0},
                "breakdown_value": "free",
                "data": [2],
                "labels": ["d1"],
            },
        )
        chart = trends_to_time_series(raw, SIGNUP_PURCHASE[:1])
        assert chart.data == [{"date": "d1", "signup - pro": "1", "signup - free": "2"}]


class TestPie:
    """Tests for trends_to_pie()."""

    def test_slices(self, two_series_trend: dict[str, Any]) -> None:
        chart = trends_to_pie(two_series_trend, SIGNUP_PURCHASE)
        assert isinstance(chart, PieChart)
        assert chart.to_dict() == {
            "type": "pie",
            "dataKey": "value",
            "data": [
                {"label": "signup", "value": 3},
                {"label": "purchase", "value": 7},
            ],
        }

    def test_missing_aggregate_is_zero(self) -> None:
        chart = trends_to_pie(response({"aggregated_value": None}), SIGNUP_PURCHASE)
        assert chart.data[0].value == 0

    def test_bar_total(self, two_series_trend: dict[str, Any]) -> None:
        chart = shape_trend_response(two_series_trend, SIGNUP_PURCHASE, "bar-total")
        assert isinstance(chart, PieChart)
        assert chart.type == "bar-total"
        assert chart.total == 10


class TestNumber:
    """Tests for trends_to_number()."""

    def test_first_aggregate(self, two_series_trend: dict[str, Any]) -> None:
        chart = trends_to_number(two_series_trend, SIGNUP_PURCHASE)
        assert isinstance(chart, NumberChart)
        assert chart.data == 3
        assert chart.data_key == "signup"

    def test_data_key_override(self, two_series_trend: dict[str, Any]) -> None:
        chart = trends_to_number(two_series_trend, SIGNUP_PURCHASE, "signups")
        assert chart.data_key == "signups"

    def test_series_label_beats_api_label(
        self, two_series_trend: dict[str, Any]
    ) -> None:
        chart = trends_to_number(two_series_trend, (Series("signup", label="Joins"),))
        assert chart.data_key == "Joins"

    def test_empty_result(self) -> None:
        chart = trends_to_number({"result": []}, SIGNUP_PURCHASE)
        assert chart.data == 0
        assert chart.data_key == "value"


class TestShapeTrendResponse:
    """Tests for chart type dispatch."""

    @pytest.mark.parametrize("chart_type", ["line", "bar", "area", "cumulative-line"])
    def test_time_series_types(
        self, two_series_trend: dict[str, Any], chart_type: str
    ) -> None:
        chart = shape_trend_response(two_series_trend, SIGNUP_PURCHASE, chart_type)
        assert isinstance(chart, TimeSeriesChart)
        assert chart.type == chart_type
        assert chart.data_key == "date"

    def test_data_index(self, two_series_trend: dict[str, Any]) -> None:
        chart = shape_trend_response(
            two_series_trend, SIGNUP_PURCHASE, "pie", data_index="count"
        )
        assert chart.data_key == "count"

    def test_number(self, two_series_trend: dict[str, Any]) -> None:
        chart = shape_trend_response(two_series_trend, SIGNUP_PURCHASE, "number")
        assert isinstance(chart, NumberChart)

    @pytest.mark.parametrize("chart_type", ["table", "world"])
    def test_unsupported(
        self, two_series_trend: dict[str, Any], chart_type: str
    ) -> None:
        with pytest.raises(UnsupportedChartTypeError, match="Unsupported type"):
            shape_trend_response(two_series_trend, SIGNUP_PURCHASE, chart_type)

    def test_unknown(self, two_series_trend: dict[str, Any]) -> None:
        with pytest.raises(ValueError, match="Unknown chart type"):
            shape_trend_response(two_series_trend, SIGNUP_PURCHASE, "scatter")


class TestCheckUniqueLabels:
    """Tests for check_unique_labels()."""

    def test_distinct(self) -> None:
        check_unique_labels(["signup", "purchase"])

    def test_repeated(self) -> None:
        with pytest.raises(ValueError, match="'signup'"):
            check_unique_labels(["signup", "purchase", "signup"])
