"""Synchronous wrapper for the FCP client."""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Mapping
from typing import Any

from .client import FCPClient
from .results import ArchiveFiles, CallResult, Failure


def _run_sync(coro: Any) -> Any:
    """Run a coroutine synchronously.

    This handles the case where we may or may not already be in an event loop.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = None

    if loop is None:
        return asyncio.run(coro)

    result: Any = None
    exception: Exception | None = None

    def run_in_thread() -> None:
        nonlocal result, exception
        try:
            result = asyncio.run(coro)
        except Exception as e:
            exception = e

    thread = threading.Thread(target=run_in_thread)
    thread.start()
    thread.join()

    if exception is not None:
        raise exception
    return result


class FCPClientSync:
    """Synchronous client for the FCP API.

    This is a blocking wrapper around the async FCPClient. Each call runs on
    its own event loop, so the underlying HTTP client is opened and closed
    per call.

    Example:
        ```python
        from fcp_client import FCPClientSync

        client = FCPClientSync("me", "secret", "https://dev-fcp.foresee.com")
        result = client.call("get", "site", {"sitekey": "acme"})
        print(result.data)
        ```
    """

    def __init__(self, username: str, password: str, hostname: str, **kwargs: Any) -> None:
        """Initialize the synchronous client.

        Accepts the same arguments as FCPClient.
        """
        self._async_client = FCPClient(username, password, hostname, **kwargs)

    @classmethod
    def for_environment(
        cls,
        username: str,
        password: str,
        environment: int | str | None = None,
        **kwargs: Any,
    ) -> FCPClientSync:
        """Create a client for a named environment or its index."""
        instance = cls.__new__(cls)
        instance._async_client = FCPClient.for_environment(
            username, password, environment, **kwargs
        )
        return instance

    def __enter__(self) -> FCPClientSync:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client."""
        _run_sync(self._async_client.close())

    @property
    def log(self) -> tuple[str, ...]:
        return self._async_client.log

    async def _call_and_close(self, coro: Any) -> Any:
        try:
            return await coro
        finally:
            await self._async_client.close()

    def call(
        self,
        action: str,
        resource: str,
        options: Mapping[str, Any] | None = None,
        *,
        interactive: bool = True,
    ) -> CallResult:
        """Perform one API operation. See FCPClient.call."""
        return _run_sync(
            self._call_and_close(
                self._async_client.call(action, resource, options, interactive=interactive)
            )
        )

    def download_code(self, code_id: int | str) -> ArchiveFiles | Failure:
        """Download and extract a code package."""
        return _run_sync(self._call_and_close(self._async_client.download_code(code_id)))

    def download_module(self, module_md5: str) -> ArchiveFiles | Failure:
        """Download and extract a shared module."""
        return _run_sync(self._call_and_close(self._async_client.download_module(module_md5)))
