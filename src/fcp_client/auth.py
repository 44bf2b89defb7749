"""Credentials handling for the FCP client."""

from __future__ import annotations

from pydantic import BaseModel, Field

from .config import (
    DEFAULT_USERNAME_DOMAIN,
    ENVIRONMENT_HINT,
    Environment,
    default_environment,
    resolve_environment,
)
from .exceptions import ConfigurationError, ValidationError
from .fields import is_present
from .prompts import FieldPrompt, InputProvider, collect


class Credentials(BaseModel):
    """Username and password for HTTP Basic authentication."""

    username: str = Field(..., description="FCP username, including the @domain")
    password: str = Field(..., description="FCP password")
    environment: Environment | None = Field(None, description="Selected FCP environment")

    @property
    def fcp_url(self) -> str | None:
        return self.environment.fcp_url if self.environment else None

    @property
    def gateway_url(self) -> str | None:
        return self.environment.gateway_url if self.environment else None


def normalize_username(username: str) -> str:
    """Append the default domain to a username given without one."""
    username = username.strip()
    if "@" not in username:
        username = f"{username}@{DEFAULT_USERNAME_DOMAIN}"
    return username


async def prompt_for_credentials(
    provider: InputProvider,
    username: str | None = None,
    password: str | None = None,
    environment: int | str | None = None,
    require_environment: bool = True,
) -> Credentials:
    """Collect whatever credentials were not passed in.

    Args:
        provider: Source of answers for the missing values.
        username: Username, with or without the @domain.
        password: Password.
        environment: Environment index or short name. Falls back to ``FCP_ENVIRONMENT``.
        require_environment: Whether an environment must be chosen.

    Returns:
        Credentials with the environment resolved.

    Raises:
        ValidationError: If the provider fails or leaves a value empty.
        ConfigurationError: If the environment is not a known one.
    """
    if not is_present(environment):
        environment = default_environment()

    schema: dict[str, FieldPrompt] = {}
    if not is_present(username):
        schema["username"] = FieldPrompt()
    if not is_present(password):
        schema["password"] = FieldPrompt(hidden=True)
    if require_environment and not is_present(environment):
        schema["environment"] = FieldPrompt(type="integer", message=ENVIRONMENT_HINT)

    answers = await collect(provider, schema) if schema else {}

    username = username if is_present(username) else answers.get("username")
    password = password if is_present(password) else answers.get("password")
    environment = environment if is_present(environment) else answers.get("environment")

    if not username:
        raise ValidationError("Missing username", field="username")
    if not password:
        raise ValidationError("Missing password", field="password")

    resolved: Environment | None = None
    if is_present(environment):
        resolved = resolve_environment(environment)
    elif require_environment:
        raise ConfigurationError("Invalid environment.")

    return Credentials(
        username=normalize_username(str(username)),
        password=str(password),
        environment=resolved,
    )
