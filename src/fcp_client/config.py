"""FCP client configuration constants."""

from __future__ import annotations

import os
from importlib.metadata import version

from pydantic import BaseModel

from .exceptions import ConfigurationError

USER_AGENT = f"fcp-client-python/{version('fcp-client')}"
DEFAULT_TIMEOUT = 30.0  # seconds
DEFAULT_USERNAME_DOMAIN = "aws.foreseeresults.com"
FCP_ENVIRONMENT_VAR = "FCP_ENVIRONMENT"

# Index order matters: environments may be selected by position.
ENVIRONMENT_SHORT = ("dev", "qa", "qa2", "stg", "prod", "local")

FCP_URLS = {
    "local": "http://localhost:3001",
    "dev": "https://dev-fcp.foresee.com",
    "qa": "https://qa-fcp.foresee.com",
    "qa2": "https://qa2-fcp.foresee.com",
    "stg": "https://stg-fcp.foresee.com",
    "prod": "https://fcp.foresee.com",
}

GATEWAY_URLS = {
    "local": "http://localhost:3001",
    "dev": "https://dev-gateway.foresee.com",
    "qa": "https://qa-gateway.foresee.com",
    "qa2": "https://qa2-gateway.foresee.com",
    "stg": "https://stg-gateway.foresee.com",
    "prod": "https://gateway.foresee.com",
}

ENVIRONMENT_HINT = "0 = dev, 1 = QA, 2 = QA2, 3 = stg, 4 = prod, 5 = localhost:3001"


class Environment(BaseModel):
    """A named FCP deployment."""

    index: int
    name: str
    fcp_url: str
    gateway_url: str


def resolve_environment(value: int | str) -> Environment:
    """Resolve an environment index or short name.

    Args:
        value: Index into ENVIRONMENT_SHORT (int or digit string) or a short name.

    Returns:
        The matching Environment.

    Raises:
        ConfigurationError: If the value names no known environment.
    """
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid environment: {value!r}")

    if isinstance(value, int) or (isinstance(value, str) and value.strip().isdigit()):
        index = int(value)
        if not 0 <= index < len(ENVIRONMENT_SHORT):
            raise ConfigurationError(f"Invalid environment: {value!r}")
        name = ENVIRONMENT_SHORT[index]
    elif isinstance(value, str) and value.strip().lower() in ENVIRONMENT_SHORT:
        name = value.strip().lower()
        index = ENVIRONMENT_SHORT.index(name)
    else:
        raise ConfigurationError(f"Invalid environment: {value!r}")

    return Environment(
        index=index,
        name=name,
        fcp_url=FCP_URLS[name],
        gateway_url=GATEWAY_URLS[name],
    )


def default_environment() -> str | None:
    """Environment named by ``FCP_ENVIRONMENT``, if set."""
    return os.environ.get(FCP_ENVIRONMENT_VAR) or None
