"""Canonical field names and their wire-format aliases.

Several options can be spelled two ways: the camelCase name callers pass
(``clientId``) and the snake_case name the API expects (``client_id``).
``normalize`` makes both spellings agree; the wire helpers rename to the
snake_case form when options leave the process.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from enum import Enum
from typing import Any

# Keys used to steer the client itself; never sent to the API.
META_KEYS = frozenset({"commands", "disableNotes"})


class AliasedField(str, Enum):
    """Options with a camelCase name and a distinct wire name."""

    CLIENT_ID = "clientId"
    SITEKEY = "sitekey"
    CONFIG_TAG = "configTag"
    VENDOR_CODE = "vendorCode"
    PRERELEASE_CODE = "prereleaseCode"
    CODE_ID = "codeId"
    MODULE_NAME = "moduleName"
    MODULE_MD5 = "moduleMD5"

    @property
    def wire(self) -> str:
        return WIRE_NAMES[self]


WIRE_NAMES: Mapping[AliasedField, str] = {
    AliasedField.CLIENT_ID: "client_id",
    AliasedField.SITEKEY: "site",
    AliasedField.CONFIG_TAG: "config_tag",
    AliasedField.VENDOR_CODE: "vendor_code",
    AliasedField.PRERELEASE_CODE: "prerelease_code",
    AliasedField.CODE_ID: "code_id",
    AliasedField.MODULE_NAME: "module_name",
    AliasedField.MODULE_MD5: "module_md5",
}

_BY_NAME: dict[str, AliasedField] = {
    **{field.value: field for field in AliasedField},
    **{field.wire: field for field in AliasedField},
}


def is_present(value: Any) -> bool:
    """True if an option value counts as supplied."""
    return value is not None and value != ""


def aliases_of(name: str) -> tuple[str, ...]:
    """Return every spelling of a field, starting with the one given."""
    field = _BY_NAME.get(name)
    if field is None:
        return (name,)
    other = field.wire if name == field.value else field.value
    return (name, other)


def get_option(options: Mapping[str, Any], name: str) -> Any:
    """Look up an option under any of its spellings."""
    for key in aliases_of(name):
        value = options.get(key)
        if is_present(value):
            return value
    return None


def normalize(options: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of options where both spellings of each aliased field agree.

    The camelCase value wins when both are present; otherwise whichever
    spelling was supplied is copied to the other.
    """
    result = dict(options)
    for field in AliasedField:
        camel, wire = field.value, field.wire
        if is_present(result.get(camel)):
            result[wire] = result[camel]
        elif is_present(result.get(wire)):
            result[camel] = result[wire]
    return result


def to_wire_value(value: Any) -> str:
    """Stringify an option value the way the API expects it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(to_wire_value(v) for v in value)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def wire_fields(options: Mapping[str, Any]) -> Iterator[tuple[str, Any]]:
    """Yield (wire name, value) pairs, one per field.

    Aliased fields are emitted once under their wire name. Meta keys and
    absent values are skipped.
    """
    seen: set[str] = set()
    for key, value in options.items():
        if key in META_KEYS or value is None:
            continue
        field = _BY_NAME.get(key)
        name = field.wire if field is not None else key
        if name in seen:
            continue
        if field is not None:
            value = get_option(options, field.wire)
            if value is None:
                continue
        seen.add(name)
        yield name, value
