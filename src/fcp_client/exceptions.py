"""Exception classes for the FCP client."""

from __future__ import annotations

from typing import Any


class FCPError(Exception):
    """Base exception for all FCP client errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigurationError(FCPError):
    """The client or the requested call is misconfigured.

    This error is raised before any I/O when:
    - Username, password or hostname is missing
    - The hostname has no scheme
    - An environment name or index is unknown
    """


class UnknownEndpointError(ConfigurationError):
    """No endpoint is registered for an (action, resource) pair."""

    def __init__(self, action: str, resource: str) -> None:
        self.action = action
        self.resource = resource
        super().__init__(f"Unknown choice combination: {action} {resource}")


class ValidationError(FCPError):
    """A required field is still missing after solicitation.

    Attributes:
        field: Name of the offending field, if known.
    """

    def __init__(self, message: str = "Validation error", field: str | None = None) -> None:
        self.field = field
        full_message = f"{message} (field: {field})" if field else message
        super().__init__(full_message)


class ContentResolutionError(FCPError):
    """A required content field could not be produced from any fallback."""

    _DESCRIPTIONS = {
        "code": "Missing code buffer, unable to create zip folder to send with request.",
        "config": "Missing config string, unable to create js file to send with request.",
        "file": "Missing file buffer, unable to create zip folder to send with request.",
        "json": "Missing json string, unable to create json file to send with request.",
        "module": "Missing module buffer, unable to create zip folder to send with request.",
    }

    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        super().__init__(
            message or self._DESCRIPTIONS.get(field, f"Missing content for '{field}'.")
        )


class APIError(FCPError):
    """Error returned from the FCP API.

    Attributes:
        status_code: HTTP status code from the API (0 when no response was parsed).
        message: Error message.
        details: Additional error details from the API.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.status_code = status_code
        self.details = details or {}
        super().__init__(f"[{status_code}] {message}")

    @property
    def is_retryable(self) -> bool:
        """Check if this error could be resolved by repeating the call.

        The client itself never retries.
        """
        return self.status_code == 429 or self.status_code >= 500


class ConnectionError(FCPError):
    """Failed to connect to the FCP API."""

    def __init__(
        self,
        message: str = "Failed to connect to FCP API",
        cause: Exception | None = None,
    ) -> None:
        self.cause = cause
        super().__init__(message)


class TimeoutError(FCPError):
    """Request timed out."""

    def __init__(
        self,
        message: str = "Request timed out",
        timeout_seconds: float | None = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__(message)


class DecodeError(FCPError):
    """An archive response could not be decoded (bad zip or CRC mismatch)."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.cause = cause
        super().__init__(message)


def error_for_status(status_code: int, response_data: Any = None) -> APIError | None:
    """Build the exception describing a non-2xx HTTP status.

    Args:
        status_code: HTTP status code.
        response_data: Parsed JSON response data, if any.

    Returns:
        An APIError for 4xx/5xx status codes, None otherwise.
    """
    if status_code < 400:
        return None

    data = response_data if isinstance(response_data, dict) else {}
    message = data.get("message") or data.get("detail") or data.get("error") or "Unknown error"
    if not isinstance(message, str):
        message = str(message)
    details = data.get("details")
    return APIError(status_code, message, details if isinstance(details, dict) else None)
