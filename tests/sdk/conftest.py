"""SDK test fixtures ensuring isolation from the hosted ComfyDeploy service."""

from typing import Any, Callable, Dict, List

import httpx
import pytest
import pytest_asyncio

from comfy_deploy_sdk import ComfyDeployClient

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture(autouse=True)
def configure_sdk_test_env(monkeypatch):
    """Keep developer environment variables out of SDK tests."""

    for name in (
        "COMFY_DEPLOY_API_BASE",
        "COMFY_DEPLOY_API_TOKEN",
        "COMFY_DEPLOY_REQUEST_TIMEOUT",
        "COMFY_DEPLOY_POLL_INTERVAL_SECONDS",
        "COMFY_DEPLOY_POLL_MAX_ATTEMPTS",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sent_requests() -> List[httpx.Request]:
    """Requests captured by the stub transport, in order."""
    return []


@pytest_asyncio.fixture
async def make_client(sent_requests: List[httpx.Request]):
    """Build a client whose HTTP traffic is served by an in-process handler."""

    http_clients: List[httpx.AsyncClient] = []

    def _make(handler: Handler, **kwargs: Any) -> ComfyDeployClient:
        def _recording_handler(request: httpx.Request) -> httpx.Response:
            sent_requests.append(request)
            return handler(request)

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(_recording_handler))
        http_clients.append(http_client)
        kwargs.setdefault("api_token", "test-token")
        return ComfyDeployClient(client=http_client, **kwargs)

    yield _make

    for http_client in http_clients:
        await http_client.aclose()


@pytest.fixture
def run_output_payload() -> Callable[..., Dict[str, Any]]:
    """Factory for RunOutput-shaped response bodies."""

    def _payload(status: str = "running", run_id: str = "run-1", **extra: Any):
        body: Dict[str, Any] = {"id": run_id, "status": status, "outputs": []}
        body.update(extra)
        return body

    return _payload
