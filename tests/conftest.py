"""Shared fixtures and configuration for tests."""

from __future__ import annotations

import io
import json
import zipfile
from collections.abc import Mapping
from typing import Any

import pytest
import respx

from fcp_client import FCPClient
from fcp_client.prompts import FieldPrompt

# ==================== MOCK DATA ====================

HOSTNAME = "https://fcp.example.com"


def make_envelope(message: Any = None, status_code: int = 200) -> dict[str, Any]:
    """Create a response envelope."""
    envelope: dict[str, Any] = {"statusCode": status_code}
    if message is not None:
        envelope["message"] = message
    return envelope


def make_site_dict(name: str = "acme", client_id: int = 42) -> dict[str, Any]:
    """Create a mock site dictionary."""
    return {"name": name, "client_id": client_id, "alias": name, "deleted": 0}


def make_zip(entries: Mapping[str, bytes | None]) -> bytes:
    """Build a zip archive; a None value adds a directory entry."""
    out = io.BytesIO()
    with zipfile.ZipFile(out, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data in entries.items():
            if data is None:
                zf.writestr(zipfile.ZipInfo(name), b"")
            else:
                zf.writestr(name, data)
    return out.getvalue()


class RecordingProvider:
    """Input provider that answers from a fixed mapping and records each schema."""

    def __init__(self, answers: Mapping[str, Any] | None = None) -> None:
        self.answers = dict(answers or {})
        self.schemas: list[dict[str, FieldPrompt]] = []

    def __call__(self, schema: Mapping[str, FieldPrompt]) -> dict[str, Any]:
        self.schemas.append(dict(schema))
        return {name: self.answers[name] for name in schema if name in self.answers}

    @property
    def asked(self) -> list[str]:
        return [name for schema in self.schemas for name in schema]


class FailingProvider:
    """Input provider that always aborts."""

    def __call__(self, schema: Mapping[str, FieldPrompt]) -> dict[str, Any]:
        raise RuntimeError("prompt aborted")


# ==================== FIXTURES ====================


@pytest.fixture(autouse=True)
def _no_environment_override(monkeypatch):
    """Keep a developer's FCP_ENVIRONMENT out of the tests."""
    monkeypatch.delenv("FCP_ENVIRONMENT", raising=False)


@pytest.fixture
def hostname() -> str:
    """Base URL for API mocks."""
    return HOSTNAME


@pytest.fixture
def provider() -> RecordingProvider:
    """Input provider with no answers."""
    return RecordingProvider()


@pytest.fixture
def client(provider: RecordingProvider) -> FCPClient:
    """FCP client wired to the recording provider."""
    return FCPClient("user@example.com", "secret", HOSTNAME, input_provider=provider)


@pytest.fixture
def respx_mock():
    """Fixture for respx mocking."""
    with respx.mock(assert_all_called=False) as mock:
        yield mock


@pytest.fixture
def code_dir(tmp_path):
    """A small source tree to upload as code."""
    root = tmp_path / "build"
    (root / "lib").mkdir(parents=True)
    (root / "index.js").write_text("console.log('hi');")
    (root / "lib" / "util.js").write_text("module.exports = {};")
    return root


def json_body(data: Any) -> bytes:
    """Encode a JSON response body."""
    return json.dumps(data).encode()
