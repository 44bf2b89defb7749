"""Async client for the FCP API."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from .config import (
    DEFAULT_TIMEOUT,
    FCP_ENVIRONMENT_VAR,
    default_environment,
    resolve_environment,
)
from .content import FileSystem
from .endpoints import EndpointDescriptor, lookup
from .exceptions import APIError, ConfigurationError
from .forms import encode_body
from .log import EventLog
from .prompts import ClickInputProvider, InputProvider
from .resolver import resolve_required
from .results import ArchiveFiles, CallResult, Failure, decode_response
from .transport import Transport
from .urls import build_url

logger = logging.getLogger(__name__)


class FCPClient:
    """Async client for the FCP publishing API.

    Every operation goes through ``call``: the (action, resource) pair picks
    an endpoint, missing required fields are solicited from the input
    provider, and the decoded response comes back as one of the result
    variants in ``fcp_client.results``.

    Example:
        ```python
        import asyncio
        from fcp_client import FCPClient

        async def main():
            async with FCPClient("me", "secret", "https://dev-fcp.foresee.com") as client:
                result = await client.call("list", "sites")
                for site in result.items:
                    print(site["name"])

        asyncio.run(main())
        ```
    """

    def __init__(
        self,
        username: str,
        password: str,
        hostname: str,
        timeout: float | None = DEFAULT_TIMEOUT,
        input_provider: InputProvider | None = None,
        file_system: FileSystem | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the FCP client.

        Args:
            username: FCP username.
            password: FCP password.
            hostname: Base URL such as ``https://fcp.foresee.com``, without a trailing path.
            timeout: Request timeout in seconds, or None for no timeout.
            input_provider: Source of values for missing required fields.
                Defaults to terminal prompts.
            file_system: File access used to read content paths.
            http_client: Preconfigured httpx client to send requests with.

        Raises:
            ConfigurationError: If a credential or the hostname is missing or malformed.
        """
        if not username:
            raise ConfigurationError("Missing username")
        if not password:
            raise ConfigurationError("Missing password")
        if not hostname:
            raise ConfigurationError("Missing hostname")
        if ":/" not in hostname:
            raise ConfigurationError(
                "Hostname should look like https://bla.bla.com with no trailing slashes"
            )

        self.username = username
        self.hostname = hostname.rstrip("/")
        self._input_provider = input_provider or ClickInputProvider()
        self._file_system = file_system
        self._transport = Transport(username, password, timeout=timeout, client=http_client)
        self._log = EventLog()

    @classmethod
    def for_environment(
        cls,
        username: str,
        password: str,
        environment: int | str | None = None,
        **kwargs: Any,
    ) -> FCPClient:
        """Create a client for a named environment (``dev``, ``prod``, ...) or its index.

        Without an explicit environment, ``FCP_ENVIRONMENT`` is used.

        Raises:
            ConfigurationError: If no environment is given or it is unknown.
        """
        if environment is None:
            environment = default_environment()
        if environment is None:
            raise ConfigurationError(f"No environment given and {FCP_ENVIRONMENT_VAR} is not set")
        return cls(username, password, resolve_environment(environment).fcp_url, **kwargs)

    async def __aenter__(self) -> FCPClient:
        """Enter async context manager."""
        await self._transport.open()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager."""
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._transport.close()

    @property
    def log(self) -> tuple[str, ...]:
        """Lines logged so far, oldest first."""
        return self._log.entries

    async def call(
        self,
        action: str,
        resource: str,
        options: Mapping[str, Any] | None = None,
        *,
        interactive: bool = True,
    ) -> CallResult:
        """Perform one API operation.

        Args:
            action: One of ``create``, ``get``, ``list``, ``set``.
            resource: Resource name, singular or plural (``site`` or ``sites``).
            options: Field values for the request. Not modified.
                A true ``disableNotes`` stops writes from asking for ``notes``.
            interactive: Whether missing required fields may be solicited.
                When False they stay absent and the server decides.

        Returns:
            The decoded result, or a Failure for network and server errors.

        Raises:
            UnknownEndpointError: If the (action, resource) pair is not registered.
            ValidationError: If a required field is still missing.
            ContentResolutionError: If a required content field cannot be produced.
            DecodeError: If an archive response is corrupt.
        """
        endpoint = lookup(action, resource)
        options = dict(options or {})
        required = endpoint.solicited_fields
        if options.get("disableNotes"):
            required = tuple(name for name in required if name != "notes")
        resolved = await resolve_required(
            options,
            required,
            self._input_provider,
            interactive=interactive,
            fs=self._file_system,
        )
        return await self._send(endpoint, resolved)

    async def _send(self, endpoint: EndpointDescriptor, options: dict[str, Any]) -> CallResult:
        url = build_url(self.hostname, endpoint.url_template, options, with_query=endpoint.is_read)

        body: bytes | None = None
        headers: dict[str, str] = {}
        if not endpoint.is_read:
            body, headers = encode_body(options, endpoint.multipart)

        logger.info(f"Making FCP call to {url}")
        self._log.append(endpoint.http_method, url)

        raw = await self._transport.send(endpoint.http_method, url, body, headers)
        if isinstance(raw, Failure):
            return raw
        return decode_response(raw, endpoint.resource)

    async def download_code(self, code_id: int | str) -> ArchiveFiles | Failure:
        """Download and extract a code package."""
        return await self._download("code", {"codeId": code_id})

    async def download_module(self, module_md5: str) -> ArchiveFiles | Failure:
        """Download and extract a shared module."""
        return await self._download("module", {"moduleMD5": module_md5})

    async def _download(self, resource: str, options: dict[str, Any]) -> ArchiveFiles | Failure:
        result = await self.call("get", resource, options, interactive=False)
        if isinstance(result, (ArchiveFiles, Failure)):
            return result
        return Failure(
            error=APIError(0, f"Expected an archive for get {resource}, got {result.kind}")
        )
