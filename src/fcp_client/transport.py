"""HTTP transport for FCP calls."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .config import DEFAULT_TIMEOUT, USER_AGENT
from .exceptions import APIError, ConnectionError, TimeoutError, error_for_status
from .results import Failure, RawResponse

logger = logging.getLogger(__name__)


class Transport:
    """Sends one request per call with HTTP Basic authentication.

    Network errors and non-2xx responses are returned as ``Failure``
    values rather than raised. No retries are attempted.
    """

    def __init__(
        self,
        username: str,
        password: str,
        timeout: float | None = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._auth = httpx.BasicAuth(username, password)
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def open(self) -> httpx.AsyncClient:
        """Ensure the HTTP client is initialized."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                headers={"User-Agent": USER_AGENT},
            )
        return self._client

    @property
    def is_open(self) -> bool:
        return self._client is not None

    async def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def send(
        self,
        method: str,
        url: str,
        body: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> RawResponse | Failure:
        """Issue a request.

        Args:
            method: HTTP method. GET requests never carry a body.
            url: Fully qualified URL.
            body: Encoded request body.
            headers: Extra headers, such as the body content type.

        Returns:
            The raw response for 2xx statuses, otherwise a Failure.
        """
        client = await self.open()
        method = method.upper()
        content = None if method == "GET" else body

        try:
            response = await client.request(
                method,
                url,
                content=content,
                headers=headers or {},
                auth=self._auth,
            )
        except httpx.TimeoutException:
            logger.warning(f"{method} {url} timed out")
            return Failure(
                error=TimeoutError(f"Request timed out after {self._timeout}s", self._timeout)
            )
        except httpx.HTTPError as e:
            logger.warning(f"{method} {url} failed: {e}")
            return Failure(error=ConnectionError(f"Cannot connect to FCP API: {e}", e))

        if not response.is_success:
            error = error_for_status(response.status_code, _safe_json(response)) or APIError(
                response.status_code, response.reason_phrase or "Unexpected status"
            )
            logger.warning(f"{method} {url} returned {response.status_code}")
            return Failure(error=error, status_code=response.status_code)

        return RawResponse(
            status_code=response.status_code,
            content_type=response.headers.get("content-type", ""),
            content=response.content,
        )


def _safe_json(response: httpx.Response) -> Any:
    try:
        return response.json() if response.content else {}
    except ValueError:
        return {}
