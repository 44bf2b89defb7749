"""URL construction for endpoint templates."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

from .fields import get_option, to_wire_value

# Placeholder names understood in URL templates.
PLACEHOLDERS = frozenset(
    {"clientId", "site", "container", "configTag", "product", "codeId", "moduleMD5"}
)

# Options that may travel in a query string, by internal name.
QUERY_PARAMS: Mapping[str, str] = {
    "active": "active",
    "clientId": "client_id",
    "deleted": "deleted",
    "duplicates": "duplicates",
    "fromDate": "from_date",
    "inactive": "inactive",
    "latest": "latest",
    "searchTerms": "search",
    "toDate": "to_date",
    "vendorCode": "vendor_code",
}

_PLACEHOLDER_RE = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)")


def build_path(url_template: str, options: Mapping[str, Any]) -> str:
    """Substitute ``:name`` placeholders with option values.

    A known placeholder without a matching option becomes the literal text
    ``undefined``. Unknown ``:names`` are left untouched.
    """

    def substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in PLACEHOLDERS:
            return match.group(0)
        value = get_option(options, name)
        if value is None:
            return "undefined"
        return quote(to_wire_value(value), safe="")

    return _PLACEHOLDER_RE.sub(substitute, url_template)


def build_query(
    options: Mapping[str, Any], allowed: Mapping[str, str] = QUERY_PARAMS
) -> str:
    """Build a query string from allow-listed options.

    Keys not in ``allowed`` are skipped. List values are comma-joined.
    """
    pairs = [
        f"{allowed[key]}={quote(to_wire_value(value), safe=',')}"
        for key, value in options.items()
        if key in allowed and value is not None
    ]
    return "&".join(pairs)


def build_url(
    hostname: str, url_template: str, options: Mapping[str, Any], with_query: bool = False
) -> str:
    """Join the hostname and the filled-in template, plus a query for reads."""
    path = build_path(url_template, options).lstrip("/")
    url = f"{hostname.rstrip('/')}/{path}"
    if with_query:
        query = build_query(options)
        if query:
            url = f"{url}?{query}"
    return url
