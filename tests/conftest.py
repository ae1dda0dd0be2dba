"""Shared fixtures for typecharts tests."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx
import pytest
from hypothesis import Phase, Verbosity, settings
from pydantic import SecretStr

# =============================================================================
# Hypothesis Configuration
# =============================================================================

settings.register_profile(
    "default",
    max_examples=100,
    verbosity=Verbosity.normal,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.target, Phase.shrink],
)

settings.register_profile(
    "ci",
    max_examples=200,
    verbosity=Verbosity.normal,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.target, Phase.shrink],
    derandomize=True,
)

settings.register_profile(
    "dev",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.target, Phase.shrink],
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "default"))

if TYPE_CHECKING:
    from typecharts._internal.api_client import PostHogAPIClient
    from typecharts._internal.config import ConfigManager, Credentials

BASE_URL = "https://app.posthog.com/api/projects/12345"


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config_path(temp_dir: Path) -> Path:
    """Return path for a temporary config file."""
    return temp_dir / "config.toml"


@pytest.fixture
def config_manager(config_path: Path) -> ConfigManager:
    """Create a ConfigManager with a temporary config file."""
    from typecharts._internal.config import ConfigManager

    return ConfigManager(config_path=config_path)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove PostHog environment variables for the test."""
    for var in ("POSTHOG_API_KEY", "POSTHOG_PROJECT_ID", "POSTHOG_URL"):
        monkeypatch.delenv(var, raising=False)


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def mock_credentials() -> Credentials:
    """Create mock credentials for API client testing."""
    from typecharts._internal.config import Credentials

    return Credentials(
        api_key=SecretStr("phx_test_key"),
        project_id="12345",
        url=BASE_URL,
    )


@pytest.fixture
def mock_client_factory(
    mock_credentials: Credentials,
) -> Callable[[Callable[[httpx.Request], httpx.Response]], PostHogAPIClient]:
    """Factory for creating mock API clients.

    Usage:
        def test_something(mock_client_factory):
            def handler(request):
                return httpx.Response(200, json={"results": [], "next": None})

            with mock_client_factory(handler) as client:
                client.get_event_definitions()
    """
    from typecharts._internal.api_client import PostHogAPIClient

    def factory(
        handler: Callable[[httpx.Request], httpx.Response],
    ) -> PostHogAPIClient:
        transport = httpx.MockTransport(handler)
        return PostHogAPIClient(mock_credentials, _transport=transport)

    return factory


@pytest.fixture
def two_series_trend() -> dict[str, Any]:
    """Trend response for a signup / purchase query over two days."""
    return {
        "type": "Trends",
        "is_cached": False,
        "last_refresh": "2024-01-03T00:00:00Z",
        "timezone": "UTC",
        "next": None,
        "result": [
            {
                "action": {"order": 0, "id": "signup"},
                "label": "signup",
                "count": 3,
                "data": [1, 2],
                "labels": ["2024-01-01", "2024-01-02"],
                "days": ["2024-01-01", "2024-01-02"],
                "aggregated_value": 3,
            },
            {
                "action": {"order": 1, "id": "purchase"},
                "label": "purchase",
                "count": 7,
                "data": [3, 4],
                "labels": ["2024-01-01", "2024-01-02"],
                "days": ["2024-01-01", "2024-01-02"],
                "aggregated_value": 7,
            },
        ],
    }


@pytest.fixture
def event_schema() -> dict[str, Any]:
    """Event schema in generated-module form."""
    return {
        "signup": {
            "name": "signup",
            "properties": [
                {"name": "plan", "type": "String"},
                {"name": "$browser", "type": "String"},
            ],
        },
        "purchase": {
            "name": "purchase",
            "properties": [
                {"name": "amount", "type": "Numeric"},
                {"name": "plan", "type": "String"},
            ],
        },
        "$pageview": {
            "name": "$pageview",
            "properties": [{"name": "$current_url", "type": "String"}],
        },
    }
