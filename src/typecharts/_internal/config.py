"""Configuration management for typecharts.

Handles credential resolution and storage. Credentials are resolved from
explicit arguments, then environment variables, then a TOML config file
stored at ~/.typecharts/config.toml by default.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

import tomli_w
from pydantic import BaseModel, ConfigDict, SecretStr, field_validator

from typecharts.exceptions import ConfigError

DEFAULT_HOST = "https://app.posthog.com"

ENV_API_KEY = "POSTHOG_API_KEY"
ENV_PROJECT_ID = "POSTHOG_PROJECT_ID"
ENV_URL = "POSTHOG_URL"
ENV_CONFIG_PATH = "TYPECHARTS_CONFIG_PATH"


def default_project_url(project_id: str, host: str = DEFAULT_HOST) -> str:
    """Return the project API base URL for a PostHog host."""
    return f"{host.rstrip('/')}/api/projects/{project_id}"


class Credentials(BaseModel):
    """Immutable credentials for PostHog API authentication.

    This is a frozen Pydantic model that ensures:
    - All fields are validated on construction
    - The API key is never exposed in repr/str output
    - The object cannot be modified after creation
    """

    model_config = ConfigDict(frozen=True)

    api_key: SecretStr
    """Personal API key (redacted in output)."""

    project_id: str
    """PostHog project identifier."""

    url: str
    """Project API base URL, without trailing slash."""

    @field_validator("project_id", "url")
    @classmethod
    def validate_non_empty(cls, v: str) -> str:
        """Validate string fields are non-empty."""
        if not v or not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip()

    @field_validator("url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL so paths can be appended with '/'."""
        return v.rstrip("/")

    def __repr__(self) -> str:
        """Return string representation with redacted API key."""
        return (
            f"Credentials(api_key=***, project_id={self.project_id!r}, "
            f"url={self.url!r})"
        )

    def __str__(self) -> str:
        """Return string representation with redacted API key."""
        return self.__repr__()


class ConfigManager:
    """Resolves and stores PostHog credentials.

    Config file location (in priority order):
    1. Explicit config_path parameter
    2. TYPECHARTS_CONFIG_PATH environment variable
    3. Default: ~/.typecharts/config.toml

    The file holds a single ``[posthog]`` table with ``api_key``,
    ``project_id`` and optional ``url`` keys.
    """

    DEFAULT_CONFIG_PATH = Path.home() / ".typecharts" / "config.toml"

    def __init__(self, config_path: Path | None = None) -> None:
        """Initialize ConfigManager.

        Args:
            config_path: Override config file location.
        """
        if config_path is not None:
            self._config_path = config_path
        elif ENV_CONFIG_PATH in os.environ:
            self._config_path = Path(os.environ[ENV_CONFIG_PATH])
        else:
            self._config_path = self.DEFAULT_CONFIG_PATH

    @property
    def config_path(self) -> Path:
        """Return the config file path."""
        return self._config_path

    def _read_config(self) -> dict[str, Any]:
        """Read and parse the config file.

        Returns:
            Parsed config dictionary, or empty dict if file doesn't exist.
        """
        if not self._config_path.exists():
            return {}

        try:
            with self._config_path.open("rb") as f:
                return dict(tomllib.load(f))
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(
                f"Invalid TOML in config file: {e}",
                details={"path": str(self._config_path)},
            ) from e

    def _write_config(self, config: dict[str, Any]) -> None:
        """Write config to file, creating directory if needed."""
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        with self._config_path.open("wb") as f:
            tomli_w.dump(config, f)

    def get_stored(self) -> dict[str, str]:
        """Return the stored ``[posthog]`` table (empty if none)."""
        section = self._read_config().get("posthog", {})
        if not isinstance(section, dict):
            return {}
        return {k: str(v) for k, v in section.items()}

    def resolve_credentials(
        self,
        api_key: str | None = None,
        project_id: str | None = None,
        url: str | None = None,
    ) -> Credentials:
        """Resolve credentials using priority order.

        Each field is resolved independently:
        1. Explicit argument
        2. Environment variable (POSTHOG_API_KEY, POSTHOG_PROJECT_ID, POSTHOG_URL)
        3. Config file ``[posthog]`` table

        When no URL is found, the app.posthog.com project URL is used.

        Args:
            api_key: Explicit API key.
            project_id: Explicit project id.
            url: Explicit project API base URL.

        Returns:
            Immutable Credentials object.

        Raises:
            ConfigError: If the API key or project id cannot be resolved.
        """
        stored = self.get_stored()

        api_key = api_key or os.environ.get(ENV_API_KEY) or stored.get("api_key")
        if not api_key:
            raise ConfigError(
                "PostHog API key is required. "
                f"Pass api_key, set {ENV_API_KEY}, or run 'typecharts auth set'.",
                details={"missing": "api_key"},
            )

        project_id = (
            project_id or os.environ.get(ENV_PROJECT_ID) or stored.get("project_id")
        )
        if not project_id:
            raise ConfigError(
                "PostHog project id is required. "
                f"Pass project_id, set {ENV_PROJECT_ID}, or run 'typecharts auth set'.",
                details={"missing": "project_id"},
            )

        url = (
            url
            or os.environ.get(ENV_URL)
            or stored.get("url")
            or default_project_url(project_id)
        )

        try:
            return Credentials(
                api_key=SecretStr(api_key), project_id=project_id, url=url
            )
        except ValueError as e:
            raise ConfigError(f"Invalid credentials: {e}") from e

    def set_credentials(
        self,
        api_key: str,
        project_id: str,
        url: str | None = None,
    ) -> None:
        """Store credentials in the config file, replacing any stored ones.

        Args:
            api_key: PostHog personal API key.
            project_id: PostHog project id.
            url: Optional project API base URL.
        """
        config = self._read_config()
        section: dict[str, str] = {"api_key": api_key, "project_id": project_id}
        if url:
            section["url"] = url
        config["posthog"] = section
        self._write_config(config)

    def clear(self) -> bool:
        """Remove stored credentials.

        Returns:
            True if credentials were stored and have been removed.
        """
        config = self._read_config()
        if "posthog" not in config:
            return False
        del config["posthog"]
        self._write_config(config)
        return True
