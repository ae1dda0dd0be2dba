"""Unit tests for CLI helpers: formatters, validators, schema loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import typer
from rich.console import Console

from typecharts._literal_types import Interval
from typecharts.cli.commands.query import load_schema
from typecharts.cli.formatters import format_json, format_jsonl, format_table
from typecharts.cli.utils import ExitCode
from typecharts.cli.validators import validate_literal
from typecharts.exceptions import ConfigError


class TestFormatters:
    """Tests for output formatters."""

    def test_json(self) -> None:
        assert json.loads(format_json({"a": 1, "b": ["x"]})) == {"a": 1, "b": ["x"]}

    def test_jsonl_list(self) -> None:
        output = format_jsonl([{"a": 1}, {"a": 2}])
        assert output.splitlines() == ['{"a": 1}', '{"a": 2}']

    def test_jsonl_dict(self) -> None:
        assert format_jsonl({"a": 1}) == '{"a": 1}'

    def test_table_collects_columns_across_rows(self) -> None:
        table = format_table([{"date": "d1", "signup": "1"}, {"date": "d2", "buy": "2"}])
        assert [c.header for c in table.columns] == ["DATE", "SIGNUP", "BUY"]
        assert table.row_count == 2

    def test_table_renders_cells(self) -> None:
        console = Console(width=120, record=True)
        console.print(format_table([{"name": "plan", "is_numerical": False}]))
        text = console.export_text()
        assert "plan" in text
        assert "No" in text

    def test_empty_table(self) -> None:
        assert format_table([]).row_count == 0


class TestValidateLiteral:
    """Tests for validate_literal()."""

    def test_valid(self) -> None:
        assert validate_literal("week", Interval, "--group-by") == "week"

    def test_invalid_exits_with_invalid_args(self) -> None:
        with pytest.raises(typer.Exit) as exc:
            validate_literal("year", Interval, "--group-by")
        assert exc.value.exit_code == ExitCode.INVALID_ARGS


class TestLoadSchema:
    """Tests for load_schema()."""

    def test_json(self, temp_dir: Path) -> None:
        path = temp_dir / "events.json"
        path.write_text('{"signup": {"name": "signup"}}', encoding="utf-8")
        assert load_schema(path) == {"signup": {"name": "signup"}}

    def test_python_module(self, temp_dir: Path) -> None:
        path = temp_dir / "events.py"
        path.write_text(
            "from typing import Final\n"
            "EVENTS: Final = {'signup': {'name': 'signup', 'properties': []}}\n",
            encoding="utf-8",
        )
        assert load_schema(path) == {"signup": {"name": "signup", "properties": []}}

    def test_missing_file(self, temp_dir: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_schema(temp_dir / "nope.py")

    def test_module_without_events(self, temp_dir: Path) -> None:
        path = temp_dir / "events.py"
        path.write_text("OTHER = 1\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="events mapping"):
            load_schema(path)

    def test_invalid_json(self, temp_dir: Path) -> None:
        path = temp_dir / "events.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_schema(path)
