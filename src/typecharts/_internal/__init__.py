"""Internal implementation modules. Not part of the public API."""

from typecharts._internal.api_client import PostHogAPIClient
from typecharts._internal.config import ConfigManager, Credentials

__all__ = ["ConfigManager", "Credentials", "PostHogAPIClient"]
