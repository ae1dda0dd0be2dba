"""Output formatters for CLI commands.

- JSON: Pretty-printed JSON
- JSONL: Newline-delimited JSON (one object per line)
- Table: Rich ASCII table
"""

from __future__ import annotations

import json
from typing import Any

from rich.table import Table


def format_json(data: dict[str, Any] | list[Any]) -> str:
    """Format data as pretty-printed JSON with 2-space indentation."""
    return json.dumps(data, indent=2, default=str, ensure_ascii=False)


def format_jsonl(data: dict[str, Any] | list[Any]) -> str:
    """Format data as newline-delimited JSON.

    For lists, outputs one JSON object per line.
    For dicts, outputs a single JSON object.
    """
    if isinstance(data, list):
        return "\n".join(
            json.dumps(item, default=str, ensure_ascii=False) for item in data
        )
    return json.dumps(data, default=str, ensure_ascii=False)


def format_table(
    data: dict[str, Any] | list[Any],
    columns: list[str] | None = None,
) -> Table:
    """Format data as a Rich ASCII table.

    Args:
        data: Data to format (dict or list of dicts).
        columns: Column names to display. If None, collected from all rows.

    Returns:
        Rich Table object ready for printing.
    """
    table = Table(show_header=True, header_style="bold")

    if isinstance(data, dict):
        data = [data]

    if not data:
        return table

    if columns is None:
        seen: dict[str, None] = {}
        for item in data:
            for key in item if isinstance(item, dict) else ["value"]:
                seen.setdefault(key, None)
        columns = list(seen)

    for col in columns:
        table.add_column(col.upper().replace("_", " "))

    for item in data:
        if isinstance(item, dict):
            row = [_format_cell(item.get(col, "")) for col in columns]
        else:
            row = [_format_cell(item)]
        table.add_row(*row)

    return table


def _format_cell(value: Any) -> str:
    """Format a single cell value for table display."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, list | dict):
        return json.dumps(value, default=str, ensure_ascii=False)
    return str(value)
