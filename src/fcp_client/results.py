"""Call results and response decoding.

Every call ends in exactly one of the variants below, selected purely from
the shape of the response. ``Failure`` carries transport and server errors
so callers can tell them apart by type.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .archive import ExtractedFile, extract
from .exceptions import APIError, FCPError

logger = logging.getLogger(__name__)

ARCHIVE_CONTENT_TYPES = frozenset(
    {"application/octet-stream", "application/zip", "application/x-zip-compressed"}
)

# Resources whose envelope-less responses are the config itself.
CONFIG_RESOURCES = frozenset({"default", "config"})


class RawResponse(BaseModel):
    """An HTTP response as received, before decoding."""

    status_code: int
    content_type: str = ""
    content: bytes = b""

    @property
    def is_archive(self) -> bool:
        media_type = self.content_type.split(";", 1)[0].strip().lower()
        return media_type in ARCHIVE_CONTENT_TYPES


class ConfigPayload(BaseModel):
    """The whole response body is a config document."""

    kind: Literal["config"] = "config"
    payload: Any = None


class FilesListing(BaseModel):
    """An envelope without a message; the top-level body is the listing."""

    kind: Literal["files"] = "files"
    payload: Any = None


class StatusMessage(BaseModel):
    """A plain status message such as ``"ok"``."""

    kind: Literal["status"] = "status"
    message: Any
    status_code: int | None = None


class Entity(BaseModel):
    """A single object returned by the API."""

    kind: Literal["entity"] = "entity"
    data: dict[str, Any] = Field(default_factory=dict)
    status_code: int | None = None

    def __getitem__(self, key: str) -> Any:
        return self.data[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)


class EntityList(BaseModel):
    """An ordered list of objects returned by the API."""

    kind: Literal["entities"] = "entities"
    items: list[Any] = Field(default_factory=list)
    status_code: int | None = None

    def __len__(self) -> int:
        return len(self.items)


class ArchiveFiles(BaseModel):
    """Files extracted from an archive response."""

    kind: Literal["archive"] = "archive"
    files: list[ExtractedFile] = Field(default_factory=list)


class Failure(BaseModel):
    """A network failure, non-2xx status or malformed body."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    kind: Literal["failure"] = "failure"
    error: FCPError
    status_code: int = 0

    @property
    def message(self) -> str:
        return self.error.message


DecodedResult = ConfigPayload | FilesListing | StatusMessage | Entity | EntityList | ArchiveFiles
CallResult = DecodedResult | Failure


def classify_envelope(data: Any, resource: str) -> DecodedResult:
    """Classify a parsed JSON body by the shape of its ``message``.

    Args:
        data: Parsed response body.
        resource: Resource name of the endpoint that was called.

    Returns:
        The matching result variant. A one-element message array is
        unwrapped for every resource, to an entity or a status message.
    """
    envelope = data if isinstance(data, dict) else {}
    message = envelope.get("message")
    status_code = envelope.get("statusCode")

    if message is None:
        if resource in CONFIG_RESOURCES:
            return ConfigPayload(payload=data)
        return FilesListing(payload=data)

    if isinstance(message, list) and len(message) == 1:
        message = message[0]

    if isinstance(message, list):
        return EntityList(items=message, status_code=status_code)

    if isinstance(message, dict):
        return Entity(data=message, status_code=status_code)

    return StatusMessage(message=message, status_code=status_code)


def decode_response(response: RawResponse, resource: str) -> CallResult:
    """Decode a successful HTTP response.

    Archive bodies are extracted; everything else is parsed as JSON and
    classified. An unparseable JSON body becomes a Failure.

    Raises:
        DecodeError: If an archive body is corrupt.
    """
    if response.is_archive:
        return ArchiveFiles(files=extract(response.content))

    try:
        data = json.loads(response.content) if response.content else {}
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning(f"Malformed response body ({response.status_code}): {e}")
        return Failure(
            error=APIError(response.status_code, "Unexpected response from server."),
            status_code=response.status_code,
        )

    return classify_envelope(data, resource)
