"""Tests for the single-request operations of ComfyDeployClient."""

from __future__ import annotations

import json

import httpx
import pytest

from comfy_deploy_sdk import (
    ComfyDeployClient,
    FailureKind,
    OutputFile,
    RunHandle,
    RunStatus,
    UploadTicket,
    WebsocketEndpoint,
)
from comfy_deploy_sdk.run_client import DEFAULT_API_BASE


@pytest.mark.asyncio
async def test_client_uses_hosted_api_by_default():
    async with httpx.AsyncClient() as http_client:
        client = ComfyDeployClient(api_token="secret", client=http_client)
        assert client.api_base == DEFAULT_API_BASE == "https://www.comfydeploy.com/api"


@pytest.mark.asyncio
async def test_client_appends_api_suffix_to_custom_base():
    async with httpx.AsyncClient() as http_client:
        client = ComfyDeployClient(
            api_token="secret", api_base="http://localhost:3000/", client=http_client
        )
        assert client.api_base == "http://localhost:3000/api"


def test_client_requires_token():
    with pytest.raises(ValueError, match="api_token"):
        ComfyDeployClient(api_token="")


@pytest.mark.asyncio
async def test_run_posts_payload_with_auth(make_client, sent_requests):
    client = make_client(lambda request: httpx.Response(200, json={"run_id": "run-1"}))

    result = await client.run("dep-1", inputs={"prompt": "a cat"})

    assert result.ok
    assert result.value == RunHandle(run_id="run-1")
    assert len(sent_requests) == 1
    request = sent_requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://www.comfydeploy.com/api/run"
    assert request.headers["authorization"] == "Bearer test-token"
    assert request.headers["cache-control"] == "no-store"
    assert request.headers["content-type"] == "application/json"
    # Unset optional fields are omitted from the body
    assert json.loads(request.content) == {
        "deployment_id": "dep-1",
        "inputs": {"prompt": "a cat"},
    }


@pytest.mark.asyncio
async def test_run_includes_webhook_when_given(make_client, sent_requests):
    client = make_client(lambda request: httpx.Response(200, json={"run_id": "run-2"}))

    await client.run("dep-1", webhook="https://example.com/hook")

    assert json.loads(sent_requests[0].content) == {
        "deployment_id": "dep-1",
        "webhook": "https://example.com/hook",
    }


@pytest.mark.asyncio
async def test_get_run_parses_snapshot(make_client, sent_requests, run_output_payload):
    client = make_client(
        lambda request: httpx.Response(200, json=run_output_payload("running"))
    )

    result = await client.get_run("run-1")

    assert result.ok
    assert result.value.status is RunStatus.RUNNING
    assert result.value.progress == 0
    assert result.value.live_status is None
    request = sent_requests[0]
    assert request.method == "GET"
    assert request.url.path == "/api/run"
    assert request.url.params["run_id"] == "run-1"


@pytest.mark.asyncio
async def test_get_run_rejects_unknown_status(make_client, run_output_payload):
    client = make_client(
        lambda request: httpx.Response(200, json=run_output_payload("exploded"))
    )

    result = await client.get_run("run-1")

    assert result.value is None
    assert result.error.kind is FailureKind.VALIDATION
    assert not result.error.transient


@pytest.mark.asyncio
async def test_get_run_keeps_output_files_unchanged(make_client, run_output_payload):
    image = {"url": "https://cdn.example.com/a b.png?sig=1", "filename": "a b.png"}
    body = run_output_payload(
        "success",
        outputs=[{"data": {"images": [image], "gifs": []}}],
        live_status="Executing KSampler",
        progress=0.75,
    )
    client = make_client(lambda request: httpx.Response(200, json=body))

    result = await client.get_run("run-1")

    output = result.value
    assert output.outputs[0].data.images == [OutputFile(**image)]
    assert output.outputs[0].data.gifs == []
    assert output.outputs[0].data.files is None
    assert output.live_status == "Executing KSampler"
    assert output.progress == 0.75


@pytest.mark.asyncio
async def test_get_upload_url_sends_size_as_string(make_client, sent_requests):
    ticket = {
        "upload_url": "https://storage.example.com/put",
        "file_id": "file-1",
        "download_url": "https://storage.example.com/get",
    }
    client = make_client(lambda request: httpx.Response(200, json=ticket))

    result = await client.get_upload_url("image/png", 1024)

    assert result.value == UploadTicket(**ticket)
    request = sent_requests[0]
    assert request.url.path == "/api/upload-url"
    assert dict(request.url.params) == {"type": "image/png", "file_size": "1024"}
    assert request.headers["authorization"] == "Bearer test-token"


@pytest.mark.asyncio
async def test_get_websocket_url(make_client, sent_requests):
    client = make_client(
        lambda request: httpx.Response(
            200, json={"ws_connection_url": "wss://ws.example.com/dep-1"}
        ),
        api_base="http://localhost:3000",
    )

    result = await client.get_websocket_url("dep-1")

    assert result.value == WebsocketEndpoint(ws_connection_url="wss://ws.example.com/dep-1")
    assert str(sent_requests[0].url) == "http://localhost:3000/api/websocket/dep-1"


@pytest.mark.asyncio
async def test_transport_failure_is_reported_as_network_error(make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(handler)

    result = await client.run("dep-1")

    assert result.value is None
    assert result.error.kind is FailureKind.NETWORK
    assert result.error.status_code is None
    assert result.error.transient


@pytest.mark.asyncio
async def test_error_status_is_reported_with_code(make_client):
    client = make_client(lambda request: httpx.Response(401, json={"error": "nope"}))

    result = await client.get_websocket_url("dep-1")

    assert result.error.kind is FailureKind.NETWORK
    assert result.error.status_code == 401
    assert not result.error.transient


@pytest.mark.asyncio
async def test_non_json_body_is_reported_as_decode_error(make_client):
    client = make_client(lambda request: httpx.Response(200, text="<html>oops</html>"))

    result = await client.get_run("run-1")

    assert result.value is None
    assert result.error.kind is FailureKind.DECODE


@pytest.mark.asyncio
async def test_injected_client_is_not_closed():
    http_client = httpx.AsyncClient()
    async with ComfyDeployClient(api_token="secret", client=http_client):
        pass

    assert not http_client.is_closed
    await http_client.aclose()


@pytest.mark.asyncio
@pytest.mark.parametrize("inputs", [{"steps": 20}, {"seed": None}])
async def test_run_rejects_non_string_inputs(make_client, sent_requests, inputs):
    client = make_client(lambda request: httpx.Response(200, json={"run_id": "run-1"}))

    result = await client.run("dep-1", inputs=inputs)

    assert result.value is None
    assert result.error.kind is FailureKind.VALIDATION
    assert sent_requests == []


@pytest.mark.asyncio
async def test_control_character_in_path_is_reported(make_client, sent_requests):
    client = make_client(
        lambda request: httpx.Response(200, json={"ws_connection_url": "wss://x"})
    )

    result = await client.get_websocket_url("dep\n1")

    assert result.value is None
    assert result.error.kind is FailureKind.VALIDATION
    assert sent_requests == []


@pytest.mark.asyncio
async def test_request_on_closed_client_is_reported(make_client, run_output_payload):
    client = make_client(
        lambda request: httpx.Response(200, json=run_output_payload("running"))
    )
    await client._client.aclose()

    result = await client.get_run("run-1")

    assert result.value is None
    assert result.error.kind is FailureKind.NETWORK
