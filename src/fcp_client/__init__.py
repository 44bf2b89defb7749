"""Python client for the FCP content and configuration publishing API.

The client manages clients, sites, containers, configs, products, code
packages and shared modules. Every operation is an (action, resource)
pair looked up in a static endpoint registry; missing required fields are
solicited from an input provider and the response is decoded into one
result variant.

Basic Usage:
    ```python
    from fcp_client import FCPClient, Entity

    async with FCPClient("me", "secret", "https://dev-fcp.foresee.com") as client:
        result = await client.call(
            "create", "code", {"version": "1.2.3", "notes": "release", "codePath": "~/build"}
        )
        if isinstance(result, Entity):
            print(result["code_md5"])
    ```

Non-interactive usage:
    ```python
    result = await client.call("list", "sites", {"active": True}, interactive=False)
    ```
"""

from ._sync import FCPClientSync
from .archive import ExtractedFile, compress_directory, extract
from .auth import Credentials, normalize_username, prompt_for_credentials
from .client import FCPClient
from .config import Environment, resolve_environment
from .content import ContentField, FileSystem, LocalFileSystem, resolve_content
from .endpoints import REGISTRY, EndpointDescriptor, lookup, valid_endpoints
from .exceptions import (
    APIError,
    ConfigurationError,
    ConnectionError,
    ContentResolutionError,
    DecodeError,
    FCPError,
    TimeoutError,
    UnknownEndpointError,
    ValidationError,
)
from .fields import AliasedField, normalize
from .prompts import ClickInputProvider, FieldPrompt, InputProvider
from .results import (
    ArchiveFiles,
    CallResult,
    ConfigPayload,
    DecodedResult,
    Entity,
    EntityList,
    Failure,
    FilesListing,
    StatusMessage,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Main clients
    "FCPClient",
    "FCPClientSync",
    # Endpoints
    "REGISTRY",
    "EndpointDescriptor",
    "lookup",
    "valid_endpoints",
    # Fields and content
    "AliasedField",
    "normalize",
    "ContentField",
    "FileSystem",
    "LocalFileSystem",
    "resolve_content",
    # Input
    "InputProvider",
    "ClickInputProvider",
    "FieldPrompt",
    # Results
    "CallResult",
    "DecodedResult",
    "ConfigPayload",
    "FilesListing",
    "StatusMessage",
    "Entity",
    "EntityList",
    "ArchiveFiles",
    "Failure",
    # Archives
    "ExtractedFile",
    "extract",
    "compress_directory",
    # Auth and config
    "Credentials",
    "normalize_username",
    "prompt_for_credentials",
    "Environment",
    "resolve_environment",
    # Exceptions
    "FCPError",
    "ConfigurationError",
    "UnknownEndpointError",
    "ValidationError",
    "ContentResolutionError",
    "APIError",
    "ConnectionError",
    "TimeoutError",
    "DecodeError",
]
