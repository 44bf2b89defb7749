"""Input provider interface for soliciting missing fields."""

from __future__ import annotations

import inspect
import re
from collections.abc import Awaitable, Mapping
from typing import Any, Literal, Protocol

import click
from pydantic import BaseModel, Field

from .exceptions import ValidationError
from .fields import is_present


class FieldPrompt(BaseModel):
    """Describes one field the caller must be asked for."""

    required: bool = True
    type: Literal["string", "integer"] = "string"
    hidden: bool = False
    pattern: str | None = Field(None, description="Regex the answer must match")
    message: str | None = Field(None, description="Hint shown to the user")


PromptSchema = Mapping[str, FieldPrompt]


class InputProvider(Protocol):
    """Collects values for missing fields.

    Implementations may be plain callables or coroutine functions. They
    return a mapping of field name to value, or raise to abort the call.
    """

    def __call__(
        self, schema: PromptSchema
    ) -> Mapping[str, Any] | Awaitable[Mapping[str, Any]]: ...


class ClickInputProvider:
    """Terminal input provider built on click prompts."""

    def __call__(self, schema: PromptSchema) -> dict[str, Any]:
        answers: dict[str, Any] = {}
        for name, prompt in schema.items():
            if prompt.message:
                click.echo(prompt.message)
            answers[name] = self._ask(name, prompt)
        return answers

    @staticmethod
    def _ask(name: str, prompt: FieldPrompt) -> Any:
        value_type = click.INT if prompt.type == "integer" else click.STRING
        while True:
            value = click.prompt(
                name,
                type=value_type,
                hide_input=prompt.hidden,
                default="" if not prompt.required else None,
                show_default=False,
            )
            if prompt.pattern and not re.fullmatch(prompt.pattern, str(value)):
                click.echo(f"Error: {name} must match {prompt.pattern}", err=True)
                continue
            return value


async def collect(provider: InputProvider, schema: PromptSchema) -> dict[str, Any]:
    """Ask the provider for the fields in schema.

    Empty answers are dropped, so callers see them as still missing.

    Raises:
        ValidationError: If the provider fails.
    """
    try:
        answers = provider(schema)
        if inspect.isawaitable(answers):
            answers = await answers
    except Exception as e:
        raise ValidationError(f"Unable to collect {', '.join(schema)}: {e}") from e
    return {k: v for k, v in (answers or {}).items() if is_present(v)}
