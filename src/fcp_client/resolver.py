"""Resolution of the fields an endpoint requires."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from .content import CONTENT_FIELDS, ContentField, FileSystem, has_content, resolve_content
from .exceptions import ValidationError
from .fields import get_option, is_present, normalize
from .prompts import FieldPrompt, InputProvider, collect

logger = logging.getLogger(__name__)

FILE_PATH_MESSAGE = "This is the relative or absolute path to the file, including the extension"
VENDOR_CODE_MESSAGE = "8 char limit, accepted chars A-Z/a-z"

FIELD_PROMPTS: dict[str, FieldPrompt] = {
    "clientId": FieldPrompt(type="integer", message="Client ID should be a non-zero integer."),
    "codeId": FieldPrompt(type="integer", message="Code ID should be a non-zero integer."),
    "metadata": FieldPrompt(
        message="Metadata can be the website URL, client contact name, other trademarks, "
        "etc. This is useful for searching."
    ),
    "vendorCode": FieldPrompt(message=VENDOR_CODE_MESSAGE),
    "prereleaseCode": FieldPrompt(message=VENDOR_CODE_MESSAGE),
    "latest": FieldPrompt(pattern="^(true|false|invalid)$", message="Latest: true/false/invalid."),
}


def _is_missing(options: Mapping[str, Any], name: str) -> bool:
    if name in CONTENT_FIELDS:
        return not has_content(options, ContentField(name))
    if name == "latest":
        return options.get("latest") is None
    return not is_present(get_option(options, name))


def build_prompt_schema(
    options: Mapping[str, Any], required_fields: Iterable[str]
) -> dict[str, FieldPrompt]:
    """Describe the required fields that have not been supplied.

    Content fields are asked for by path (``codePath``, ``configPath``, ...).
    """
    schema: dict[str, FieldPrompt] = {}
    for name in required_fields:
        if not _is_missing(options, name):
            continue
        if name in CONTENT_FIELDS:
            schema[ContentField(name).path_key] = FieldPrompt(message=FILE_PATH_MESSAGE)
        else:
            schema[name] = FIELD_PROMPTS.get(name, FieldPrompt())
    return schema


async def resolve_required(
    options: Mapping[str, Any],
    required_fields: Iterable[str],
    provider: InputProvider | None = None,
    *,
    interactive: bool = True,
    fs: FileSystem | None = None,
) -> dict[str, Any]:
    """Fill in required fields and resolve content payloads.

    Missing fields are solicited from the input provider; empty answers are
    dropped and count as still missing. When ``interactive`` is False nothing
    is solicited and missing fields stay absent for the server to reject, but
    required content that was supplied must still resolve.

    Args:
        options: Caller options. Not modified.
        required_fields: Fields the endpoint needs.
        provider: Source of answers for missing fields.
        interactive: Whether to solicit missing fields at all.
        fs: File access for content paths.

    Returns:
        A new options dict with aliases normalized and content resolved.

    Raises:
        ValidationError: If the provider fails or a required field is still missing.
        ContentResolutionError: If a required content field cannot be produced.
    """
    required = tuple(required_fields)
    resolved = normalize(options)

    schema = build_prompt_schema(resolved, required)
    if schema and interactive:
        if provider is None:
            raise ValidationError("Missing required fields", field=next(iter(schema)))
        logger.debug(f"Soliciting {', '.join(schema)}")
        resolved.update(await collect(provider, schema))
        resolved = normalize(resolved)

    for field in ContentField:
        # Supplied content must resolve even when nothing may be solicited.
        resolve_content(
            resolved,
            field,
            required=field.value in required and (interactive or has_content(resolved, field)),
            fs=fs,
        )

    if interactive:
        for name in required:
            if name not in CONTENT_FIELDS and _is_missing(resolved, name):
                raise ValidationError("Missing required field", field=name)

    return resolved
