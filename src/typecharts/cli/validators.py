"""CLI parameter validators for Literal types.

Validates string inputs from Typer against Literal types before
passing them to the query builder, providing early error feedback.
"""

from __future__ import annotations

from typing import Any, get_args

import typer

from typecharts.cli.utils import ExitCode, err_console


def validate_literal(value: str, literal_type: Any, param_name: str) -> Any:
    """Validate a CLI string against a Literal type.

    Args:
        value: String value from CLI.
        literal_type: The Literal type to validate against.
        param_name: Parameter name for error message.

    Returns:
        The validated value.

    Raises:
        typer.Exit: With code 3 (INVALID_ARGS) if invalid.
    """
    valid_values = get_args(literal_type)
    if value not in valid_values:
        err_console.print(
            f"[red]Error:[/red] Invalid value for {param_name}: '{value}'"
        )
        err_console.print(f"Valid options: {', '.join(valid_values)}")
        raise typer.Exit(ExitCode.INVALID_ARGS)
    return value
