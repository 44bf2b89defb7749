"""Request body encoding."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

from urllib3.filepost import encode_multipart_formdata

from .content import CONTENT_FIELDS, CONTENT_INPUT_KEYS
from .fields import to_wire_value, wire_fields

# Filename and content type attached to each content field in multipart bodies.
FILE_PARTS: Mapping[str, tuple[str, str]] = {
    "code": ("code.zip", "application/octet-stream"),
    "config": ("config.js", "application/javascript"),
    "file": ("file.zip", "application/octet-stream"),
    "json": ("config.json", "application/json"),
    "module": ("module.zip", "application/octet-stream"),
}


def _body_fields(options: Mapping[str, Any]) -> list[tuple[str, Any]]:
    return [
        (name, value)
        for name, value in wire_fields(options)
        if name not in CONTENT_INPUT_KEYS
    ]


def encode_body(
    options: Mapping[str, Any], multipart: bool = False
) -> tuple[bytes, dict[str, str]]:
    """Encode options as a request body.

    Content fields become file parts in multipart bodies, using the fixed
    filename and content type for each. Booleans are sent as ``true``/``false``.
    Path and raw-buffer spellings of content fields are never sent.

    Args:
        options: Resolved call options.
        multipart: Whether to build multipart/form-data instead of a urlencoded form.

    Returns:
        Tuple of (body bytes, headers to send with it).
    """
    fields = _body_fields(options)

    if not multipart:
        body = urlencode([(name, to_wire_value(value)) for name, value in fields])
        return body.encode("ascii"), {"Content-Type": "application/x-www-form-urlencoded"}

    parts: list[tuple[str, Any]] = []
    for name, value in fields:
        if name in CONTENT_FIELDS:
            filename, content_type = FILE_PARTS[name]
            data = value.encode("utf-8") if isinstance(value, str) else bytes(value)
            parts.append((name, (filename, data, content_type)))
        elif isinstance(value, bytes):
            parts.append((name, value))
        else:
            parts.append((name, to_wire_value(value)))

    body, content_type = encode_multipart_formdata(parts)
    return body, {"Content-Type": content_type}
