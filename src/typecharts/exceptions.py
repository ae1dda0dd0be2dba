"""Exception hierarchy for typecharts.

All library exceptions inherit from TypechartsError, enabling callers to
catch every library error with a single except clause while still allowing
fine-grained handling when needed.

API errors carry the HTTP status code, the response body, and the original
request context so a failed trend query or definition fetch can be diagnosed
without re-running it.
"""

from __future__ import annotations

from typing import Any


class TypechartsError(Exception):
    """Base exception for all typecharts errors.

    All library exceptions inherit from this class, allowing callers to:
    - Catch all library errors: except TypechartsError
    - Handle specific errors: except EventNotFoundError
    - Serialize errors: error.to_dict()
    """

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Human-readable error message.
            code: Machine-readable error code for programmatic handling.
            details: Additional structured data about the error.
        """
        super().__init__(message)
        self._message = message
        self._code = code
        self._details = details or {}

    @property
    def code(self) -> str:
        """Machine-readable error code."""
        return self._code

    @property
    def message(self) -> str:
        """Human-readable error message."""
        return self._message

    @property
    def details(self) -> dict[str, Any]:
        """Additional structured error data."""
        return self._details

    def to_dict(self) -> dict[str, Any]:
        """Serialize exception for logging/JSON output.

        Returns:
            Dictionary with keys: code, message, details.
        """
        return {
            "code": self._code,
            "message": self._message,
            "details": self._details,
        }

    def __str__(self) -> str:
        """Return human-readable error message."""
        return self._message

    def __repr__(self) -> str:
        """Return detailed string representation."""
        return (
            f"{self.__class__.__name__}(message={self._message!r}, code={self._code!r})"
        )


# API Exceptions


class APIError(TypechartsError):
    """Base class for PostHog API HTTP errors.

    Provides structured access to the request/response pair that failed.

    Example:
        ```python
        try:
            chart = query.execute(group_by="day", type="line")
        except APIError as e:
            print(f"Status: {e.status_code}")
            print(f"Response: {e.response_body}")
            print(f"Request URL: {e.request_url}")
        ```
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        response_body: str | dict[str, Any] | None = None,
        request_method: str | None = None,
        request_url: str | None = None,
        request_params: dict[str, Any] | None = None,
        code: str = "API_ERROR",
    ) -> None:
        """Initialize APIError.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code from response.
            response_body: Raw response body (string or parsed dict).
            request_method: HTTP method used.
            request_url: Full request URL.
            request_params: Query parameters sent.
            code: Machine-readable error code.
        """
        self._status_code = status_code
        self._response_body = response_body
        self._request_method = request_method
        self._request_url = request_url
        self._request_params = request_params

        details: dict[str, Any] = {
            "status_code": status_code,
        }
        if response_body is not None:
            details["response_body"] = response_body
        if request_method is not None:
            details["request_method"] = request_method
        if request_url is not None:
            details["request_url"] = request_url
        if request_params is not None:
            details["request_params"] = request_params

        super().__init__(message, code=code, details=details)

    @property
    def status_code(self) -> int:
        """HTTP status code from response."""
        return self._status_code

    @property
    def response_body(self) -> str | dict[str, Any] | None:
        """Raw response body (string or parsed dict)."""
        return self._response_body

    @property
    def request_method(self) -> str | None:
        """HTTP method used."""
        return self._request_method

    @property
    def request_url(self) -> str | None:
        """Full request URL."""
        return self._request_url

    @property
    def request_params(self) -> dict[str, Any] | None:
        """Query parameters sent."""
        return self._request_params


class AuthenticationError(APIError):
    """PostHog rejected the API key (HTTP 401 or 403)."""

    def __init__(
        self,
        message: str = "Authentication failed",
        *,
        status_code: int = 401,
        response_body: str | dict[str, Any] | None = None,
        request_method: str | None = None,
        request_url: str | None = None,
        request_params: dict[str, Any] | None = None,
    ) -> None:
        """Initialize AuthenticationError.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code (default 401).
            response_body: Raw response body.
            request_method: HTTP method used.
            request_url: Full request URL.
            request_params: Query parameters sent.
        """
        super().__init__(
            message,
            status_code=status_code,
            response_body=response_body,
            request_method=request_method,
            request_url=request_url,
            request_params=request_params,
            code="AUTH_FAILED",
        )


class RateLimitError(APIError):
    """PostHog API rate limit exceeded (HTTP 429).

    Requests are never retried internally. The retry_after property reports
    the Retry-After header so callers can decide when to try again.
    """

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        *,
        retry_after: int | None = None,
        status_code: int = 429,
        response_body: str | dict[str, Any] | None = None,
        request_method: str | None = None,
        request_url: str | None = None,
        request_params: dict[str, Any] | None = None,
    ) -> None:
        """Initialize RateLimitError.

        Args:
            message: Human-readable error message.
            retry_after: Seconds until retry is allowed (from Retry-After header).
            status_code: HTTP status code (default 429).
            response_body: Raw response body.
            request_method: HTTP method used.
            request_url: Full request URL.
            request_params: Query parameters sent.
        """
        self._retry_after = retry_after
        if retry_after is not None:
            message = f"{message}. Retry after {retry_after} seconds."

        super().__init__(
            message,
            status_code=status_code,
            response_body=response_body,
            request_method=request_method,
            request_url=request_url,
            request_params=request_params,
            code="RATE_LIMITED",
        )
        if retry_after is not None:
            self._details["retry_after"] = retry_after

    @property
    def retry_after(self) -> int | None:
        """Seconds until retry is allowed, or None if unknown."""
        return self._retry_after


class QueryError(APIError):
    """Request rejected by PostHog (HTTP 4xx other than auth and rate limit).

    Example:
        ```python
        try:
            query.execute(group_by="day", type="line")
        except QueryError as e:
            print(f"Query failed: {e.message}")
            print(f"Response: {e.response_body}")
        ```
    """

    def __init__(
        self,
        message: str = "Query execution failed",
        *,
        status_code: int = 400,
        response_body: str | dict[str, Any] | None = None,
        request_method: str | None = None,
        request_url: str | None = None,
        request_params: dict[str, Any] | None = None,
    ) -> None:
        """Initialize QueryError.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code (default 400).
            response_body: Raw response body with error details.
            request_method: HTTP method used.
            request_url: Full request URL.
            request_params: Query parameters sent.
        """
        super().__init__(
            message,
            status_code=status_code,
            response_body=response_body,
            request_method=request_method,
            request_url=request_url,
            request_params=request_params,
            code="QUERY_FAILED",
        )


class ServerError(APIError):
    """PostHog server error (HTTP 5xx)."""

    def __init__(
        self,
        message: str = "Server error",
        *,
        status_code: int = 500,
        response_body: str | dict[str, Any] | None = None,
        request_method: str | None = None,
        request_url: str | None = None,
        request_params: dict[str, Any] | None = None,
    ) -> None:
        """Initialize ServerError.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code (5xx).
            response_body: Raw response body with error details.
            request_method: HTTP method used.
            request_url: Full request URL.
            request_params: Query parameters sent.
        """
        super().__init__(
            message,
            status_code=status_code,
            response_body=response_body,
            request_method=request_method,
            request_url=request_url,
            request_params=request_params,
            code="SERVER_ERROR",
        )


# Configuration Exceptions


class ConfigError(TypechartsError):
    """Missing or invalid configuration.

    Raised when the API key or project id cannot be resolved, or when the
    config file cannot be parsed.
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize ConfigError.

        Args:
            message: Human-readable error message.
            details: Additional structured data.
        """
        super().__init__(message, code="CONFIG_ERROR", details=details)


# Schema Exceptions


class EventNotFoundError(TypechartsError):
    """Event name not found in the declared event schema.

    Includes suggestions for similar event names based on case-insensitive
    and substring matching.

    Example:
        ```python
        try:
            query.add_series("sign up", sampling="total")
        except EventNotFoundError as e:
            if e.similar_events:
                print(f"Did you mean: {', '.join(e.similar_events)}")
        ```
    """

    def __init__(
        self,
        event_name: str,
        similar_events: list[str] | None = None,
    ) -> None:
        """Initialize EventNotFoundError.

        Args:
            event_name: The event name that was not found.
            similar_events: List of similar event names to suggest.
        """
        self._event_name = event_name
        self._similar_events = similar_events or []

        message = f"Event '{event_name}' not found."
        if self._similar_events:
            suggestions = ", ".join(f"'{e}'" for e in self._similar_events[:5])
            message += f" Did you mean: {suggestions}?"

        details: dict[str, Any] = {
            "event_name": event_name,
            "similar_events": self._similar_events,
        }

        super().__init__(message, code="EVENT_NOT_FOUND", details=details)

    @property
    def event_name(self) -> str:
        """The event name that was not found."""
        return self._event_name

    @property
    def similar_events(self) -> list[str]:
        """List of similar event names."""
        return self._similar_events


class PropertyNotFoundError(TypechartsError):
    """Property name not defined on any of the events it was used with."""

    def __init__(
        self,
        property_name: str,
        event_names: list[str],
        available_properties: list[str] | None = None,
    ) -> None:
        """Initialize PropertyNotFoundError.

        Args:
            property_name: The property name that was not found.
            event_names: Events whose schemas were searched.
            available_properties: Property names those events do define.
        """
        self._property_name = property_name
        self._event_names = event_names
        self._available_properties = available_properties or []

        events_str = ", ".join(f"'{e}'" for e in event_names) or "no events"
        message = f"Property '{property_name}' not found on {events_str}."

        details: dict[str, Any] = {
            "property_name": property_name,
            "event_names": event_names,
            "available_properties": self._available_properties,
        }
        super().__init__(message, code="PROPERTY_NOT_FOUND", details=details)

    @property
    def property_name(self) -> str:
        """The property name that was not found."""
        return self._property_name

    @property
    def event_names(self) -> list[str]:
        """Events whose schemas were searched."""
        return self._event_names

    @property
    def available_properties(self) -> list[str]:
        """Property names defined on the searched events."""
        return self._available_properties


# Chart Exceptions


class UnsupportedChartTypeError(TypechartsError):
    """Chart type has a display mapping but no response shaper.

    Raised for the ``table`` and ``world`` chart types.
    """

    def __init__(self, chart_type: str) -> None:
        """Initialize UnsupportedChartTypeError.

        Args:
            chart_type: The chart type that cannot be shaped.
        """
        self._chart_type = chart_type
        super().__init__(
            f"Unsupported type: {chart_type}",
            code="UNSUPPORTED_CHART_TYPE",
            details={"chart_type": chart_type},
        )

    @property
    def chart_type(self) -> str:
        """The chart type that cannot be shaped."""
        return self._chart_type
