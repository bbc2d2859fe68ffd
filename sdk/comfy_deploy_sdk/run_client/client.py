"""HTTP client for the ComfyDeploy run API."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Dict, Optional, Type, TypeVar, Union

import httpx
from pydantic import BaseModel, ValidationError

from ..config import ComfyDeploySettings, PollingConfig
from .results import CallResult, FailureKind
from .schemas import (
    PendingRun,
    RunHandle,
    RunOutput,
    RunRequest,
    RunStatus,
    UploadTicket,
    WebsocketEndpoint,
)

if TYPE_CHECKING:
    from .protocol import ComfyDeployClientProtocol

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://www.comfydeploy.com/api"

ModelT = TypeVar("ModelT", bound=BaseModel)


class ComfyDeployClient:
    """Asynchronous client that wraps the ComfyDeploy run endpoints.

    Every operation returns a ``CallResult``. Transport failures, non-JSON
    bodies and schema mismatches are logged and reported through
    ``CallResult.error``; nothing is raised to the caller.

    Example:
        async with ComfyDeployClient(api_token="...") as client:
            result = await client.run_sync("deployment-id", inputs={"prompt": "cat"})
            if result.ok:
                print(result.value)
    """

    def __init__(
        self,
        api_token: str,
        api_base: Optional[str] = None,
        *,
        polling: Optional[PollingConfig] = None,
        timeout: float = 60.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if not api_token:
            raise ValueError("api_token is required to call the ComfyDeploy API.")

        self.api_base = f"{api_base.rstrip('/')}/api" if api_base else DEFAULT_API_BASE
        self.api_token = api_token
        self.polling = polling or PollingConfig()
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None

    @classmethod
    def from_settings(
        cls,
        settings: Optional[ComfyDeploySettings] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
    ) -> "ComfyDeployClient":
        """Build a client from environment-backed settings."""

        settings = settings or ComfyDeploySettings()
        if settings.api_token is None:
            raise ValueError("COMFY_DEPLOY_API_TOKEN is not configured.")
        return cls(
            api_token=settings.api_token.get_secret_value(),
            api_base=settings.api_base,
            polling=settings.polling,
            timeout=settings.request_timeout,
            client=client,
        )

    async def run(
        self,
        deployment_id: str,
        inputs: Optional[Dict[str, str]] = None,
        webhook: Optional[str] = None,
    ) -> CallResult[RunHandle]:
        """Start a run of the given deployment."""

        try:
            payload = RunRequest(
                deployment_id=deployment_id, inputs=inputs, webhook=webhook
            ).to_payload()
        except ValidationError as exc:
            logger.error(f"Invalid run request for deployment {deployment_id}: {exc}")
            return CallResult.failure(FailureKind.VALIDATION, str(exc))
        return await self._request("POST", "/run", RunHandle, json=payload)

    async def get_run(self, run_id: str) -> CallResult[RunOutput]:
        """Fetch the current status and outputs of a run."""

        return await self._request("GET", "/run", RunOutput, params={"run_id": run_id})

    async def get_upload_url(
        self, type: str, file_size: int
    ) -> CallResult[UploadTicket]:
        """Request a one-shot upload URL for a file of the given MIME type and size."""

        params = {"type": type, "file_size": str(file_size)}
        return await self._request("GET", "/upload-url", UploadTicket, params=params)

    async def get_websocket_url(
        self, deployment_id: str
    ) -> CallResult[WebsocketEndpoint]:
        """Fetch the websocket endpoint streaming live progress for a deployment."""

        return await self._request(
            "GET", f"/websocket/{deployment_id}", WebsocketEndpoint
        )

    async def run_sync(
        self,
        deployment_id: str,
        inputs: Optional[Dict[str, str]] = None,
        webhook: Optional[str] = None,
        *,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> CallResult[Union[RunOutput, PendingRun]]:
        """
        Start a run and poll it until it succeeds or the polling budget runs out.

        Args:
            deployment_id: Deployment to execute
            inputs: Optional workflow inputs
            webhook: Optional webhook URL forwarded to the service
            cancel_event: Optional event; once set, polling stops

        Returns:
            The successful RunOutput, a PendingRun carrying only the run id when
            no poll reported success, the submission failure when the run could
            not be started, or a CANCELLED failure.
        """
        submitted = await self.run(deployment_id, inputs=inputs, webhook=webhook)
        if submitted.value is None:
            return CallResult(error=submitted.error)

        run_id = submitted.value.run_id
        logger.info(f"Started run {run_id} for deployment {deployment_id}")

        max_attempts = self.polling.max_attempts
        for attempt in range(1, max_attempts + 1):
            if cancel_event is not None and cancel_event.is_set():
                return self._cancelled(run_id)

            polled = await self.get_run(run_id)
            if polled.value is not None and polled.value.status is RunStatus.SUCCESS:
                logger.info(f"Run {run_id} succeeded after {attempt} poll(s)")
                return polled

            status = polled.value.status.value if polled.value else "unavailable"
            logger.debug(
                f"Run {run_id} not finished "
                f"(attempt {attempt}/{max_attempts}, status={status})"
            )
            if attempt < max_attempts and await self._wait(cancel_event):
                return self._cancelled(run_id)

        logger.info(f"Run {run_id} did not succeed within {max_attempts} polls")
        return CallResult.success(PendingRun(id=run_id))

    async def aclose(self) -> None:
        """Close the underlying HTTP client when this instance owns it."""

        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "ComfyDeployClient":
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        await self.aclose()

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_token}",
            "Cache-Control": "no-store",
        }

    async def _request(
        self,
        method: str,
        path: str,
        model: Type[ModelT],
        *,
        params: Optional[Dict[str, str]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> CallResult[ModelT]:
        url = f"{self.api_base}{path}"
        try:
            response = await self._client.request(
                method, url, params=params, json=json, headers=self._headers()
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error(f"ComfyDeploy {method} {path} returned an error status: {exc}")
            return CallResult.failure(
                FailureKind.NETWORK, str(exc), exc.response.status_code
            )
        except httpx.HTTPError as exc:
            logger.error(f"ComfyDeploy {method} {path} request failed: {exc}")
            return CallResult.failure(FailureKind.NETWORK, str(exc))
        except httpx.InvalidURL as exc:
            logger.error(f"ComfyDeploy {method} {path} has an invalid URL: {exc}")
            return CallResult.failure(FailureKind.VALIDATION, str(exc))
        except RuntimeError as exc:
            # httpx refuses to send once the client has been closed
            logger.error(f"ComfyDeploy {method} {path} could not be sent: {exc}")
            return CallResult.failure(FailureKind.NETWORK, str(exc))

        try:
            data = response.json()
        except ValueError as exc:
            logger.error(f"ComfyDeploy {method} {path} returned a non-JSON body: {exc}")
            return CallResult.failure(
                FailureKind.DECODE, str(exc), response.status_code
            )

        try:
            return CallResult.success(model.model_validate(data))
        except ValidationError as exc:
            logger.error(f"Invalid ComfyDeploy {method} {path} response: {exc}")
            return CallResult.failure(
                FailureKind.VALIDATION, str(exc), response.status_code
            )

    async def _wait(self, cancel_event: Optional[asyncio.Event]) -> bool:
        """Sleep for one poll interval; return True if cancelled meanwhile."""

        interval = self.polling.interval_seconds
        if cancel_event is None:
            await asyncio.sleep(interval)
            return False
        try:
            await asyncio.wait_for(cancel_event.wait(), timeout=interval)
        except asyncio.TimeoutError:
            return False
        return True

    @staticmethod
    def _cancelled(run_id: str) -> CallResult[Union[RunOutput, PendingRun]]:
        logger.info(f"Polling for run {run_id} cancelled")
        return CallResult.failure(
            FailureKind.CANCELLED, f"Polling for run {run_id} was cancelled."
        )


if TYPE_CHECKING:
    # Static interface check to guarantee protocol compatibility during type checking
    _: ComfyDeployClientProtocol = ComfyDeployClient(api_token="token")
