"""Service layer for typecharts.

This package contains high-level service classes that orchestrate
operations using the lower-level API client.
"""

from typecharts._internal.services.definitions import DefinitionService

__all__ = ["DefinitionService"]
