"""PostHog API Client.

Low-level HTTP client for the PostHog project APIs used by typecharts:
event definitions, property definitions, and legacy trend insights.
Handles bearer-token authentication and maps error responses onto the
typecharts exception hierarchy. Requests are never retried.

This is a private implementation detail. Users should use the PostHog class
or the service layer instead of accessing this module directly.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

import httpx

from typecharts._internal.config import Credentials
from typecharts._internal.params import to_params
from typecharts.exceptions import (
    AuthenticationError,
    QueryError,
    RateLimitError,
    ServerError,
    TypechartsError,
)

if TYPE_CHECKING:
    from types import TracebackType

logger = logging.getLogger(__name__)


class PostHogAPIClient:
    """Low-level HTTP client for PostHog project APIs.

    Example:
        ```python
        from typecharts._internal.config import ConfigManager
        from typecharts._internal.api_client import PostHogAPIClient

        credentials = ConfigManager().resolve_credentials()

        with PostHogAPIClient(credentials) as client:
            page = client.get_event_definitions()
            print(page["count"])
        ```
    """

    def __init__(
        self,
        credentials: Credentials,
        *,
        timeout: float = 120.0,
        _transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the API client.

        Args:
            credentials: Immutable authentication credentials.
            timeout: Request timeout in seconds.
            _transport: Internal parameter for testing with MockTransport.
        """
        self._credentials = credentials
        self._timeout = timeout
        self._client: httpx.Client | None = None
        self._transport = _transport

    def _get_auth_header(self) -> str:
        """Return the bearer Authorization header value."""
        return f"Bearer {self._credentials.api_key.get_secret_value()}"

    def _build_url(self, path: str, query: str = "") -> str:
        """Build the full URL for a project API path.

        Args:
            path: Endpoint path (e.g., "event_definitions").
            query: Pre-encoded query string, without the leading '?'.

        Returns:
            Full URL ending in '/', followed by '?query' when given.
        """
        path = path.strip("/")
        url = f"{self._credentials.url}/{path}/"
        return f"{url}?{query}" if query else url

    def _ensure_client(self) -> httpx.Client:
        """Ensure HTTP client is initialized."""
        if self._client is None:
            self._client = httpx.Client(
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client and release resources."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> PostHogAPIClient:
        """Enter context manager."""
        self._ensure_client()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit context manager, closing client."""
        self.close()

    @property
    def project_id(self) -> str:
        """The PostHog project id from credentials."""
        return self._credentials.project_id

    @property
    def base_url(self) -> str:
        """The project API base URL from credentials."""
        return self._credentials.url

    def _handle_response(
        self,
        response: httpx.Response,
        *,
        request_method: str,
        request_url: str,
        request_params: dict[str, Any] | None = None,
    ) -> Any:
        """Return the parsed JSON body or raise for non-2xx responses.

        Status code handling:
            - 200-299: Parse and return JSON response
            - 401, 403: AuthenticationError
            - 429: RateLimitError (not retried)
            - other 4xx: QueryError
            - 5xx: ServerError

        Every error message includes the status code and the response body.
        """
        if response.is_success:
            try:
                return response.json()
            except json.JSONDecodeError as e:
                raise TypechartsError(
                    f"Invalid JSON response from {request_url}: {e}",
                    code="INVALID_RESPONSE",
                    details={
                        "status_code": response.status_code,
                        "response_body": response.text[:500],
                        "request_method": request_method,
                        "request_url": request_url,
                    },
                ) from e

        response_body: str | dict[str, Any] | None = None
        try:
            response_body = response.json()
        except json.JSONDecodeError:
            response_body = response.text[:500] if response.text else None

        status = response.status_code
        body_text = (
            json.dumps(response_body)
            if isinstance(response_body, dict | list)
            else (response_body or "")
        )
        message = (
            f"HTTP error! Status: {status} {response.reason_phrase} {body_text}"
        ).rstrip()
        context: dict[str, Any] = {
            "status_code": status,
            "response_body": response_body,
            "request_method": request_method,
            "request_url": request_url,
            "request_params": request_params,
        }

        logger.debug("%s %s failed with status %d", request_method, request_url, status)

        if status in (401, 403):
            raise AuthenticationError(message, **context)
        if status == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                message,
                retry_after=int(retry_after)
                if retry_after and retry_after.isdigit()
                else None,
                **context,
            )
        if status >= 500:
            raise ServerError(message, **context)
        raise QueryError(message, **context)

    def request(
        self,
        url: str,
        *,
        request_params: dict[str, Any] | None = None,
    ) -> Any:
        """Issue an authenticated GET against an absolute URL.

        Args:
            url: Full URL, including any encoded query string.
            request_params: Unencoded parameters, kept for error context.

        Returns:
            Parsed JSON response.

        Raises:
            AuthenticationError: Invalid API key (401/403).
            RateLimitError: Rate limit exceeded (429).
            QueryError: Other 4xx responses.
            ServerError: Server-side errors (5xx).
            TypechartsError: Network/connection errors.
        """
        client = self._ensure_client()
        logger.debug("GET %s", url)
        try:
            response = client.get(
                url,
                headers={"Authorization": self._get_auth_header()},
            )
        except httpx.HTTPError as e:
            raise TypechartsError(
                f"HTTP error: {e}",
                code="HTTP_ERROR",
                details={
                    "error": str(e),
                    "request_method": "GET",
                    "request_url": url,
                },
            ) from e

        return self._handle_response(
            response,
            request_method="GET",
            request_url=url,
            request_params=request_params,
        )

    # =========================================================================
    # Definitions API
    # =========================================================================

    def get_event_definitions(self, *, next_url: str | None = None) -> dict[str, Any]:
        """Fetch one page of event definitions.

        Args:
            next_url: Cursor URL from a previous page's ``next`` field.

        Returns:
            Page envelope with keys: count, next, previous, results.
        """
        url = next_url or self._build_url("event_definitions")
        result: dict[str, Any] = self.request(url)
        return result

    def get_property_definitions(
        self,
        event_name: str | None = None,
        *,
        next_url: str | None = None,
    ) -> dict[str, Any]:
        """Fetch one page of property definitions seen on an event.

        Args:
            event_name: Event whose properties to list. Ignored when next_url
                is given, since the cursor already encodes the filter.
            next_url: Cursor URL from a previous page's ``next`` field.

        Returns:
            Page envelope with keys: count, next, previous, results.
        """
        if next_url is not None:
            result: dict[str, Any] = self.request(next_url)
            return result

        params: dict[str, Any] = {
            "event_names": [event_name] if event_name is not None else None,
            "filter_by_event_names": True if event_name is not None else None,
        }
        url = self._build_url("property_definitions", to_params(params))
        result = self.request(url, request_params=params)
        return result

    # =========================================================================
    # Insights API
    # =========================================================================

    def trend(self, params: dict[str, Any]) -> dict[str, Any]:
        """Run a legacy trends insight query.

        Args:
            params: Trend payload; nested values are JSON-encoded into the
                query string.

        Returns:
            Raw response with keys: type, is_cached, last_refresh, result,
            timezone, next.
        """
        url = self._build_url("insights/trend", to_params(params))
        result: dict[str, Any] = self.request(url, request_params=params)
        return result
