"""End-to-end tests for FCPClient.call against a mocked API."""

from __future__ import annotations

import asyncio
import base64

import httpx
import pytest
from httpx import Response

from fcp_client import FCPClient
from fcp_client.config import USER_AGENT
from fcp_client.exceptions import (
    APIError,
    ConfigurationError,
    ConnectionError,
    ContentResolutionError,
    DecodeError,
    TimeoutError,
    UnknownEndpointError,
    ValidationError,
)
from fcp_client.results import ArchiveFiles, ConfigPayload, Entity, EntityList, Failure

from .conftest import HOSTNAME, RecordingProvider, make_envelope, make_site_dict, make_zip


class TestClientInit:
    """Tests for client construction."""

    @pytest.mark.parametrize(
        "username,password,hostname,message",
        [
            ("", "pw", HOSTNAME, "Missing username"),
            ("me", "", HOSTNAME, "Missing password"),
            ("me", "pw", "", "Missing hostname"),
            ("me", "pw", "fcp.example.com", "Hostname should look like"),
        ],
    )
    def test_invalid_arguments(self, username, password, hostname, message):
        with pytest.raises(ConfigurationError, match=message):
            FCPClient(username, password, hostname)

    def test_trailing_slash_stripped(self):
        client = FCPClient("me", "pw", "https://fcp.example.com/")

        assert client.hostname == "https://fcp.example.com"

    def test_for_environment(self):
        client = FCPClient.for_environment("me", "pw", "prod")

        assert client.hostname == "https://fcp.foresee.com"

    def test_for_environment_by_index(self):
        assert FCPClient.for_environment("me", "pw", 5).hostname == "http://localhost:3001"

    def test_for_environment_from_env_var(self, monkeypatch):
        monkeypatch.setenv("FCP_ENVIRONMENT", "stg")

        client = FCPClient.for_environment("me", "pw")

        assert client.hostname == "https://stg-fcp.foresee.com"

    def test_for_environment_unset(self):
        with pytest.raises(ConfigurationError, match="FCP_ENVIRONMENT"):
            FCPClient.for_environment("me", "pw")

    @pytest.mark.asyncio
    async def test_async_context_manager(self):
        async with FCPClient("me", "pw", HOSTNAME) as client:
            assert client._transport.is_open

        assert not client._transport.is_open


class TestCall:
    """Tests for complete calls."""

    @pytest.mark.asyncio
    async def test_create_code_from_buffer(self, client, respx_mock, provider):
        """Test a code upload from a raw buffer needs no path."""
        route = respx_mock.post(f"{HOSTNAME}/code").mock(
            return_value=Response(
                200, json=make_envelope({"code_md5": "abc", "version": "1.2.3"})
            )
        )

        result = await client.call(
            "create", "code", {"version": "1.2.3", "notes": "release", "codeBuf": b"PK\x03\x04"}
        )

        assert isinstance(result, Entity)
        assert result["version"] == "1.2.3"
        assert provider.schemas == []
        request = route.calls.last.request
        assert request.headers["Content-Type"].startswith("multipart/form-data")
        assert b'filename="code.zip"' in request.content
        assert b"codeBuf" not in request.content

    @pytest.mark.asyncio
    async def test_create_code_from_directory(self, client, respx_mock, code_dir):
        """Test a directory path is zipped and uploaded."""
        route = respx_mock.post(f"{HOSTNAME}/code").mock(
            return_value=Response(200, json=make_envelope({"version": "2.0.0"}))
        )

        await client.call(
            "create", "code", {"version": "2.0.0", "notes": "n", "codePath": str(code_dir)}
        )

        assert b"lib/util.js" in route.calls.last.request.content

    @pytest.mark.asyncio
    async def test_basic_auth(self, client, respx_mock):
        """Test requests carry HTTP Basic credentials."""
        route = respx_mock.get(f"{HOSTNAME}/clients").mock(
            return_value=Response(200, json=make_envelope([]))
        )

        await client.call("list", "clients")

        expected = base64.b64encode(b"user@example.com:secret").decode()
        assert route.calls.last.request.headers["Authorization"] == f"Basic {expected}"

    @pytest.mark.asyncio
    async def test_user_agent(self, client, respx_mock):
        route = respx_mock.get(f"{HOSTNAME}/clients").mock(
            return_value=Response(200, json=make_envelope([]))
        )

        await client.call("list", "clients")

        assert route.calls.last.request.headers["User-Agent"] == USER_AGENT

    @pytest.mark.asyncio
    async def test_get_sends_no_body(self, client, respx_mock):
        route = respx_mock.get(f"{HOSTNAME}/sites/acme").mock(
            return_value=Response(200, json=make_envelope([make_site_dict()]))
        )

        result = await client.call("get", "site", {"sitekey": "acme", "notes": "ignored"})

        assert isinstance(result, Entity)
        assert result["name"] == "acme"
        assert route.calls.last.request.content == b""

    @pytest.mark.asyncio
    async def test_list_with_query(self, client, respx_mock):
        """Test list calls append allow-listed options as a query."""
        route = respx_mock.get(url__startswith=f"{HOSTNAME}/sites").mock(
            return_value=Response(
                200, json=make_envelope([make_site_dict("a"), make_site_dict("b")])
            )
        )

        result = await client.call(
            "list", "sites", {"clientId": 42, "active": True, "color": "blue"}
        )

        assert isinstance(result, EntityList)
        assert [s["name"] for s in result.items] == ["a", "b"]
        url = route.calls.last.request.url
        assert url.path == "/sites"
        assert url.params["client_id"] == "42"
        assert url.params["active"] == "true"
        assert "color" not in url.params

    @pytest.mark.asyncio
    async def test_solicits_missing_fields(self, respx_mock):
        """Test missing URL fields are asked for and substituted."""
        provider = RecordingProvider({"sitekey": "acme", "container": "prod"})
        client = FCPClient("me", "pw", HOSTNAME, input_provider=provider)
        respx_mock.get(f"{HOSTNAME}/sites/acme/containers/prod").mock(
            return_value=Response(200, json=make_envelope({"name": "prod"}))
        )

        result = await client.call("get", "container")

        assert provider.asked == ["sitekey", "container"]
        assert result["name"] == "prod"

    @pytest.mark.asyncio
    async def test_set_config_urlencoded(self, client, respx_mock):
        route = respx_mock.post(f"{HOSTNAME}/sites/acme/containers/prod/configs/v3").mock(
            return_value=Response(200, json=make_envelope("ok"))
        )

        result = await client.call(
            "set",
            "config",
            {"site": "acme", "container": "prod", "config_tag": "v3", "notes": "promote"},
        )

        assert result.kind == "status"
        body = route.calls.last.request.content.decode()
        assert "notes=promote" in body
        assert "config_tag=v3" in body
        assert "configTag" not in body

    @pytest.mark.asyncio
    async def test_get_default_config(self, client, respx_mock):
        respx_mock.get(f"{HOSTNAME}/defaultconfig").mock(
            return_value=Response(200, json={"brainUrl": "https://brain"})
        )

        result = await client.call("get", "default")

        assert isinstance(result, ConfigPayload)
        assert result.payload == {"brainUrl": "https://brain"}

    @pytest.mark.asyncio
    async def test_non_interactive_missing_fields(self, client, respx_mock, provider):
        """Test non-interactive calls send what they have."""
        route = respx_mock.get(f"{HOSTNAME}/modules/files/undefined").mock(
            return_value=Response(404, json=make_envelope("Module not found", 404))
        )

        result = await client.call("get", "module", interactive=False)

        assert provider.schemas == []
        assert route.called
        assert isinstance(result, Failure)
        assert result.status_code == 404

    @pytest.mark.asyncio
    async def test_writes_ask_for_notes(self, respx_mock):
        """Test writes without notes in their required fields still ask for them."""
        provider = RecordingProvider({"notes": "mark latest"})
        client = FCPClient("me", "pw", HOSTNAME, input_provider=provider)
        route = respx_mock.post(f"{HOSTNAME}/code/5/latest").mock(
            return_value=Response(200, json=make_envelope("ok"))
        )

        await client.call("set", "code_latest", {"codeId": 5})

        assert provider.asked == ["notes"]
        assert "notes=mark+latest" in route.calls.last.request.content.decode()

    @pytest.mark.asyncio
    async def test_disable_notes(self, client, respx_mock, provider):
        route = respx_mock.post(f"{HOSTNAME}/code/5/invalid").mock(
            return_value=Response(200, json=make_envelope("ok"))
        )

        await client.call("set", "code_invalid", {"codeId": 5, "disableNotes": True})

        assert provider.schemas == []
        assert "disableNotes" not in route.calls.last.request.content.decode()

    @pytest.mark.asyncio
    async def test_reads_never_ask_for_notes(self, client, respx_mock, provider):
        respx_mock.get(f"{HOSTNAME}/sites/acme").mock(
            return_value=Response(200, json=make_envelope({"name": "acme"}))
        )

        await client.call("get", "site", {"sitekey": "acme"})

        assert provider.schemas == []

    @pytest.mark.asyncio
    async def test_caller_options_untouched(self, client, respx_mock):
        respx_mock.post(f"{HOSTNAME}/sites").mock(
            return_value=Response(200, json=make_envelope({"name": "acme"}))
        )
        options = {"clientId": 42, "name": "acme", "notes": "n"}

        await client.call("create", "site", options)

        assert options == {"clientId": 42, "name": "acme", "notes": "n"}

    @pytest.mark.asyncio
    async def test_concurrent_calls(self, client, respx_mock):
        """Test overlapping calls keep their own options."""
        respx_mock.get(f"{HOSTNAME}/sites/one").mock(
            return_value=Response(200, json=make_envelope({"name": "one"}))
        )
        respx_mock.get(f"{HOSTNAME}/sites/two").mock(
            return_value=Response(200, json=make_envelope({"name": "two"}))
        )

        first, second = await asyncio.gather(
            client.call("get", "site", {"sitekey": "one"}),
            client.call("get", "site", {"sitekey": "two"}),
        )

        assert first["name"] == "one"
        assert second["name"] == "two"
        assert len(client.log) == 2

    @pytest.mark.asyncio
    async def test_event_log(self, client, respx_mock):
        respx_mock.get(f"{HOSTNAME}/code").mock(return_value=Response(200, json=make_envelope([])))

        await client.call("list", "code")

        assert client.log == (f'"GET" "{HOSTNAME}/code"',)


class TestCallErrors:
    """Tests for raised errors and returned failures."""

    @pytest.mark.asyncio
    async def test_unknown_endpoint_before_io(self, client, respx_mock):
        with pytest.raises(UnknownEndpointError):
            await client.call("delete", "site")

        assert respx_mock.calls.call_count == 0

    @pytest.mark.asyncio
    async def test_missing_content_before_io(self, respx_mock, tmp_path):
        provider = RecordingProvider({"modulePath": str(tmp_path / "missing")})
        client = FCPClient("me", "pw", HOSTNAME, input_provider=provider)

        with pytest.raises(ContentResolutionError) as exc_info:
            await client.call(
                "create", "module", {"moduleName": "m", "version": "1", "notes": "n"}
            )

        assert exc_info.value.field == "module"
        assert respx_mock.calls.call_count == 0

    @pytest.mark.asyncio
    async def test_unreadable_path_non_interactive(self, client, respx_mock, tmp_path):
        """Test a supplied but unreadable path fails even without prompting."""
        route = respx_mock.post(f"{HOSTNAME}/code").mock(
            return_value=Response(200, json=make_envelope("ok"))
        )

        with pytest.raises(ContentResolutionError) as exc_info:
            await client.call(
                "create",
                "code",
                {"version": "1", "notes": "n", "codePath": str(tmp_path / "missing")},
                interactive=False,
            )

        assert exc_info.value.field == "code"
        assert not route.called

    @pytest.mark.asyncio
    async def test_absent_content_non_interactive(self, client, respx_mock):
        """Test content that was never supplied is left for the server."""
        route = respx_mock.post(f"{HOSTNAME}/code").mock(
            return_value=Response(400, json=make_envelope("code is required", 400))
        )

        result = await client.call(
            "create", "code", {"version": "1", "notes": "n"}, interactive=False
        )

        assert route.called
        assert isinstance(result, Failure)

    @pytest.mark.asyncio
    async def test_missing_field_before_io(self, client, respx_mock):
        with pytest.raises(ValidationError) as exc_info:
            await client.call("create", "container", {"sitekey": "acme", "notes": "n"})

        assert exc_info.value.field == "name"
        assert respx_mock.calls.call_count == 0

    @pytest.mark.asyncio
    async def test_server_error_returned(self, client, respx_mock):
        """Test non-2xx responses come back as a Failure."""
        respx_mock.get(f"{HOSTNAME}/clients").mock(
            return_value=Response(500, json=make_envelope("database unavailable", 500))
        )

        result = await client.call("list", "client")

        assert isinstance(result, Failure)
        assert isinstance(result.error, APIError)
        assert result.error.status_code == 500
        assert result.error.is_retryable
        assert "database unavailable" in result.message

    @pytest.mark.asyncio
    async def test_connection_error_returned(self, client, respx_mock):
        respx_mock.get(f"{HOSTNAME}/clients").mock(side_effect=httpx.ConnectError("refused"))

        result = await client.call("list", "client")

        assert isinstance(result, Failure)
        assert isinstance(result.error, ConnectionError)

    @pytest.mark.asyncio
    async def test_timeout_returned(self, client, respx_mock):
        respx_mock.get(f"{HOSTNAME}/clients").mock(side_effect=httpx.ReadTimeout("slow"))

        result = await client.call("list", "client")

        assert isinstance(result, Failure)
        assert isinstance(result.error, TimeoutError)

    @pytest.mark.asyncio
    async def test_corrupt_archive_raises(self, client, respx_mock):
        respx_mock.get(f"{HOSTNAME}/code/files/17").mock(
            return_value=Response(
                200, content=b"broken", headers={"content-type": "application/octet-stream"}
            )
        )

        with pytest.raises(DecodeError):
            await client.call("get", "code", {"codeId": 17})


class TestDownloads:
    """Tests for archive download helpers."""

    @pytest.mark.asyncio
    async def test_download_code(self, client, respx_mock):
        archive = make_zip({"src/": None, "src/main.js": b"main"})
        respx_mock.get(f"{HOSTNAME}/code/files/17").mock(
            return_value=Response(
                200, content=archive, headers={"content-type": "application/octet-stream"}
            )
        )

        result = await client.download_code(17)

        assert isinstance(result, ArchiveFiles)
        assert [(f.folder, f.name, f.buffer) for f in result.files] == [
            (True, "src/", None),
            (False, "src/main.js", b"main"),
        ]

    @pytest.mark.asyncio
    async def test_download_module_json_answer(self, client, respx_mock):
        respx_mock.get(f"{HOSTNAME}/modules/files/d41d8").mock(
            return_value=Response(200, json=make_envelope("not ready"))
        )

        result = await client.download_module("d41d8")

        assert isinstance(result, Failure)
        assert "status" in result.message
