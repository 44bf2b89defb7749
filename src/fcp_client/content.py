"""Resolution of file-like payload fields.

Each content field can be supplied three ways, tried in this order:

1. the final value itself (``code``),
2. a raw buffer or string (``codeBuf``), promoted to the final value,
3. a path (``codePath``), read from disk and promoted to raw, then final.

Directories are zipped in memory; regular files are read as text for the
text fields (config, json) and as bytes for the archive fields. Results
are written back into the options mapping, so resolving a field twice
does no extra I/O.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any, Protocol

from .archive import compress_directory
from .exceptions import ContentResolutionError
from .fields import is_present

logger = logging.getLogger(__name__)


class ContentField(str, Enum):
    """Payload slots that may carry file-like data."""

    CODE = "code"
    CONFIG = "config"
    FILE = "file"
    JSON = "json"
    MODULE = "module"

    @property
    def path_key(self) -> str:
        return f"{self.value}Path"

    @property
    def raw_key(self) -> str:
        return f"{self.value}Str" if self.is_text else f"{self.value}Buf"

    @property
    def is_text(self) -> bool:
        return self in (ContentField.CONFIG, ContentField.JSON)


CONTENT_FIELDS = frozenset(f.value for f in ContentField)

# Intermediate spellings that only feed resolution.
CONTENT_INPUT_KEYS = frozenset(
    key for f in ContentField for key in (f.path_key, f.raw_key)
)


class FileSystem(Protocol):
    """File access used to turn content paths into bytes."""

    def is_dir(self, path: Path) -> bool: ...

    def read_file(self, path: Path) -> bytes: ...

    def zip_directory(self, path: Path) -> bytes: ...


class LocalFileSystem:
    """FileSystem backed by the local disk."""

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def read_file(self, path: Path) -> bytes:
        return path.read_bytes()

    def zip_directory(self, path: Path) -> bytes:
        return compress_directory(path)


def expand_home(path: str) -> Path:
    """Expand a leading ``~`` to the current user's home directory."""
    if path.startswith("~"):
        return Path(str(Path.home()) + path[1:])
    return Path(path)


def has_content(options: Mapping[str, Any], field: ContentField) -> bool:
    """True if any representation of the field was supplied."""
    return any(
        is_present(options.get(key)) for key in (field.value, field.raw_key, field.path_key)
    )


def _to_final(field: ContentField, raw: Any) -> bytes:
    if isinstance(raw, str):
        return raw.encode("utf-8")
    if isinstance(raw, (bytes, bytearray, memoryview)):
        return bytes(raw)
    raise ContentResolutionError(
        field.value, f"{field.raw_key} must be bytes or str, got {type(raw).__name__}"
    )


def _read_path(field: ContentField, path: str, fs: FileSystem) -> Any:
    target = expand_home(path)
    if fs.is_dir(target):
        logger.debug(f"Zipping directory {target} for {field.value}")
        return fs.zip_directory(target)
    logger.debug(f"Reading {target} for {field.value}")
    data = fs.read_file(target)
    return data.decode("utf-8") if field.is_text else data


def resolve_content(
    options: dict[str, Any],
    field: ContentField | str,
    *,
    required: bool = False,
    fs: FileSystem | None = None,
) -> bytes | None:
    """Resolve a content field from whichever representation was supplied.

    Args:
        options: Call options; updated in place with the raw and final values.
        field: The content field to resolve.
        required: Whether failing to produce a value is fatal.
        fs: File access for path lookups. Defaults to the local disk.

    Returns:
        The final bytes, or None if nothing was supplied and the field is optional.

    Raises:
        ContentResolutionError: If the field is required and no value could be produced,
            or if the raw value is neither bytes nor str.
    """
    field = ContentField(field)

    final = options.get(field.value)
    if is_present(final):
        return final

    raw = options.get(field.raw_key)
    path = options.get(field.path_key)
    if not is_present(raw) and is_present(path):
        try:
            raw = _read_path(field, str(path), fs or LocalFileSystem())
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Unable to read {field.path_key} {path!r}: {e}")
            if required:
                raise ContentResolutionError(field.value) from e
            return None
        options[field.raw_key] = raw

    if is_present(raw):
        options[field.value] = _to_final(field, raw)
        return options[field.value]

    if required:
        raise ContentResolutionError(field.value)
    return None
