"""Shared fixtures for CLI tests."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest
from typer.testing import CliRunner

from typecharts._internal.api_client import PostHogAPIClient
from typecharts._internal.config import ConfigManager
from typecharts.query import PostHog


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a CLI runner for testing commands."""
    return CliRunner()


@pytest.fixture
def posthog_handler(
    two_series_trend: dict[str, Any],
) -> Callable[[httpx.Request], httpx.Response]:
    """Serve definitions and trend responses for a small project."""
    properties = {
        "signup": [
            {"name": "plan", "property_type": "String", "is_numerical": False},
        ],
        "purchase": [
            {"name": "amount", "property_type": "Numeric", "is_numerical": True},
        ],
    }

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path.endswith("/event_definitions/"):
            results: list[dict[str, Any]] = [
                {"name": "signup", "last_seen_at": "2024-01-02", "tags": []},
                {"name": "purchase", "last_seen_at": None, "tags": ["revenue"]},
            ]
        elif path.endswith("/property_definitions/"):
            (event,) = json.loads(request.url.params["event_names"])
            results = properties.get(event, [])
        else:
            return httpx.Response(200, json=two_series_trend)
        return httpx.Response(200, json={"next": None, "results": results})

    return handler


@pytest.fixture
def mock_posthog(
    clean_env: None,
    config_manager: ConfigManager,
    mock_client_factory: Callable[..., PostHogAPIClient],
    posthog_handler: Callable[[httpx.Request], httpx.Response],
) -> PostHog:
    """PostHog client backed by a mock transport."""
    return PostHog(
        "phx_test_key",
        "12345",
        _config_manager=config_manager,
        _api_client=mock_client_factory(posthog_handler),
    )


@pytest.fixture
def cli_obj(config_manager: ConfigManager, mock_posthog: PostHog) -> dict[str, Any]:
    """Context object injecting the test config and client."""
    return {"config": config_manager, "posthog": mock_posthog}
