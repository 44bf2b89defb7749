"""Static endpoint registry for the FCP API.

Each (action, resource) pair maps to an immutable EndpointDescriptor that
says how to build the request: HTTP method, URL template with ``:name``
placeholders, the fields that must be present, and whether the body is
multipart.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Literal

from pydantic import BaseModel, ConfigDict

from .exceptions import UnknownEndpointError

Action = Literal["create", "get", "list", "set"]


class EndpointDescriptor(BaseModel):
    """How to build a request for one (action, resource) pair."""

    model_config = ConfigDict(frozen=True)

    action: Action
    resource: str
    http_method: Literal["GET", "POST"]
    url_template: str
    required_fields: tuple[str, ...] = ()
    multipart: bool = False

    @property
    def is_read(self) -> bool:
        """True for GET endpoints, which take a query string and no body."""
        return self.http_method == "GET"

    @property
    def solicited_fields(self) -> tuple[str, ...]:
        """Required fields plus ``notes``, which every write asks for."""
        if self.is_read or "notes" in self.required_fields:
            return self.required_fields
        return (*self.required_fields, "notes")


def _endpoint(
    action: Action,
    resource: str,
    http_method: Literal["GET", "POST"],
    url_template: str,
    required_fields: tuple[str, ...] = (),
    multipart: bool = False,
) -> EndpointDescriptor:
    return EndpointDescriptor(
        action=action,
        resource=resource,
        http_method=http_method,
        url_template=url_template,
        required_fields=required_fields,
        multipart=multipart,
    )


_ENDPOINTS = (
    # create
    _endpoint("create", "client", "POST", "clients", ("clientId", "name", "metadata", "notes")),
    _endpoint("create", "code", "POST", "code", ("code", "notes", "version"), multipart=True),
    _endpoint(
        "create",
        "config",
        "POST",
        "sites/:site/containers/:container/configs",
        ("sitekey", "container", "notes", "config", "vendorCode"),
        multipart=True,
    ),
    _endpoint(
        "create", "container", "POST", "sites/:site/containers", ("sitekey", "name", "notes")
    ),
    _endpoint(
        "create", "default", "POST", "defaultconfig", ("config", "vendorCode"), multipart=True
    ),
    _endpoint(
        "create",
        "module",
        "POST",
        "modules",
        ("module", "moduleName", "version", "notes"),
        multipart=True,
    ),
    _endpoint(
        "create",
        "product",
        "POST",
        "sites/:site/containers/:container/products/:product",
        ("sitekey", "container", "product", "notes", "config", "vendorCode"),
        multipart=True,
    ),
    _endpoint("create", "site", "POST", "sites", ("clientId", "name", "notes")),
    # get
    _endpoint("get", "client", "GET", "clients/:clientId", ("clientId",)),
    _endpoint("get", "code", "GET", "code/files/:codeId", ("codeId",)),
    _endpoint(
        "get",
        "config",
        "GET",
        "sites/:site/containers/:container/configs/files/:configTag",
        ("sitekey", "container", "configTag"),
    ),
    _endpoint(
        "get", "container", "GET", "sites/:site/containers/:container", ("sitekey", "container")
    ),
    _endpoint("get", "default", "GET", "defaultconfig"),
    _endpoint("get", "module", "GET", "modules/files/:moduleMD5", ("moduleMD5",)),
    _endpoint("get", "site", "GET", "sites/:site", ("sitekey",)),
    # list
    _endpoint("list", "client", "GET", "clients"),
    _endpoint("list", "code", "GET", "code"),
    _endpoint(
        "list",
        "config",
        "GET",
        "sites/:site/containers/:container/configs",
        ("sitekey", "container"),
    ),
    _endpoint("list", "container", "GET", "sites/:site/containers", ("sitekey",)),
    _endpoint("list", "module", "GET", "modules"),
    _endpoint(
        "list",
        "product",
        "GET",
        "sites/:site/containers/:container/products",
        ("sitekey", "container"),
    ),
    _endpoint("list", "site", "GET", "sites"),
    # set
    _endpoint("set", "code_invalid", "POST", "code/:codeId/invalid", ("codeId",)),
    _endpoint("set", "code_latest", "POST", "code/:codeId/latest", ("codeId",)),
    _endpoint(
        "set",
        "config",
        "POST",
        "sites/:site/containers/:container/configs/:configTag",
        ("sitekey", "container", "configTag", "notes"),
    ),
    _endpoint(
        "set",
        "product",
        "POST",
        "sites/:site/containers/:container/products/:product/:configTag",
        ("sitekey", "container", "product", "configTag", "notes"),
    ),
)

REGISTRY: MappingProxyType[str, MappingProxyType[str, EndpointDescriptor]] = MappingProxyType(
    {
        action: MappingProxyType({e.resource: e for e in _ENDPOINTS if e.action == action})
        for action in ("create", "get", "list", "set")
    }
)


def lookup(action: str, resource: str) -> EndpointDescriptor:
    """Find the endpoint for an (action, resource) pair.

    A plural resource spelling ("sites") is accepted by retrying with the
    trailing "s" removed.

    Raises:
        UnknownEndpointError: If neither spelling is registered.
    """
    resources = REGISTRY.get(action)
    if resources is not None:
        if resource in resources:
            return resources[resource]
        if resource.endswith("s") and resource[:-1] in resources:
            return resources[resource[:-1]]
    raise UnknownEndpointError(action, resource)


def valid_endpoints() -> list[str]:
    """List every registered resource name, action by action."""
    return [resource for resources in REGISTRY.values() for resource in resources]
