"""Definition Service for PostHog schema retrieval.

Fetches event definitions and, per event, property definitions, following
the ``next`` cursor of each paginated response until it is exhausted.
Pages and events are fetched strictly one at a time.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from typecharts.types import EventDefinition, PropertyDefinition

if TYPE_CHECKING:
    from typecharts._internal.api_client import PostHogAPIClient

_logger = logging.getLogger(__name__)


def _collect_pages(
    first_page: dict[str, Any],
    fetch_next: Callable[[str], dict[str, Any]],
) -> list[dict[str, Any]]:
    """Concatenate ``results`` across pages until ``next`` is null.

    Args:
        first_page: Envelope returned by the initial request.
        fetch_next: Fetches the page at a cursor URL.

    Returns:
        All results, in page order.
    """
    results: list[dict[str, Any]] = list(first_page.get("results", []))
    next_url = first_page.get("next")
    pages = 1
    while next_url:
        page = fetch_next(next_url)
        results.extend(page.get("results", []))
        next_url = page.get("next")
        pages += 1
    _logger.debug("Collected %d results across %d pages", len(results), pages)
    return results


def _parse_property(data: dict[str, Any]) -> PropertyDefinition:
    """Parse a property definitions API result."""
    return PropertyDefinition(name=data["name"], type=data.get("property_type"))


class DefinitionService:
    """Schema retrieval service for PostHog projects.

    No failure is recovered from: the first non-2xx response aborts the
    whole operation and discards what was collected for that call.

    Example:
        ```python
        from typecharts._internal.api_client import PostHogAPIClient
        from typecharts._internal.services.definitions import DefinitionService

        with PostHogAPIClient(credentials) as client:
            definitions = DefinitionService(client)
            events = definitions.fetch_event_schema()
        ```
    """

    def __init__(self, api_client: PostHogAPIClient) -> None:
        """Initialize definition service.

        Args:
            api_client: Authenticated PostHog API client.
        """
        self._api_client = api_client

    def fetch_all_events(self) -> list[dict[str, Any]]:
        """Fetch every event definition in the project.

        Returns:
            Raw event definition dicts (id, name, tags, last_seen_at, ...)
            in API order.

        Raises:
            APIError: On the first non-2xx response.
        """
        first = self._api_client.get_event_definitions()
        return _collect_pages(
            first,
            lambda url: self._api_client.get_event_definitions(next_url=url),
        )

    def fetch_all_properties_of_event(self, event_name: str) -> list[dict[str, Any]]:
        """Fetch every property definition seen on an event.

        Args:
            event_name: Event whose properties to list.

        Returns:
            Raw property definition dicts (name, property_type,
            is_numerical, ...) in API order.

        Raises:
            APIError: On the first non-2xx response.
        """
        first = self._api_client.get_property_definitions(event_name)
        return _collect_pages(
            first,
            lambda url: self._api_client.get_property_definitions(next_url=url),
        )

    def fetch_event_schema(
        self,
        on_event: Callable[[str, int], None] | None = None,
    ) -> list[EventDefinition]:
        """Fetch all events together with their properties.

        Events are processed sequentially in the order the API returns them.

        Args:
            on_event: Optional callback invoked with (event_name,
                property_count) after each event's properties are fetched.

        Returns:
            One EventDefinition per event definition.

        Raises:
            APIError: On the first non-2xx response.
        """
        raw_events = self.fetch_all_events()
        _logger.info("Fetching properties for %d events", len(raw_events))

        events: list[EventDefinition] = []
        for raw_event in raw_events:
            name = raw_event["name"]
            raw_properties = self.fetch_all_properties_of_event(name)
            _logger.info(
                "Fetched %d properties for event %s", len(raw_properties), name
            )
            events.append(
                EventDefinition(
                    name=name,
                    properties=tuple(_parse_property(p) for p in raw_properties),
                )
            )
            if on_event is not None:
                on_event(name, len(raw_properties))
        return events
