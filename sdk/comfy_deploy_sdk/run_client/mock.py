"""Mock implementation of the ComfyDeploy client for local testing."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from .results import CallResult, FailureKind
from .schemas import (
    OutputData,
    OutputFile,
    OutputGroup,
    PendingRun,
    RunHandle,
    RunOutput,
    RunStatus,
    UploadTicket,
    WebsocketEndpoint,
)

if TYPE_CHECKING:
    from .protocol import ComfyDeployClientProtocol


class MockComfyDeployClient:
    """In-memory client that simulates successful ComfyDeploy responses."""

    def __init__(self, api_base: str = "http://mock.test/api") -> None:
        self.api_base = api_base
        self.call_history: List[Dict[str, Any]] = []
        self._run_counter = 0

    async def run(
        self,
        deployment_id: str,
        inputs: Optional[Dict[str, str]] = None,
        webhook: Optional[str] = None,
    ) -> CallResult[RunHandle]:
        """Record the submission and hand out a sequential run id."""

        self.call_history.append(
            {
                "operation": "run",
                "deployment_id": deployment_id,
                "inputs": inputs,
                "webhook": webhook,
            }
        )
        self._run_counter += 1
        return CallResult.success(RunHandle(run_id=f"mock-run-{self._run_counter}"))

    async def get_run(self, run_id: str) -> CallResult[RunOutput]:
        """Report every run as finished with a single image output."""

        self.call_history.append({"operation": "get_run", "run_id": run_id})
        return CallResult.success(
            RunOutput(
                id=run_id,
                status=RunStatus.SUCCESS,
                outputs=[
                    OutputGroup(
                        data=OutputData(
                            images=[
                                OutputFile(
                                    url=f"{self.api_base}/outputs/{run_id}.png",
                                    filename=f"{run_id}.png",
                                )
                            ]
                        )
                    )
                ],
                progress=1,
            )
        )

    async def get_upload_url(
        self, type: str, file_size: int
    ) -> CallResult[UploadTicket]:
        self.call_history.append(
            {"operation": "get_upload_url", "type": type, "file_size": file_size}
        )
        file_id = f"mock-file-{len(self.call_history)}"
        return CallResult.success(
            UploadTicket(
                upload_url=f"{self.api_base}/uploads/{file_id}",
                file_id=file_id,
                download_url=f"{self.api_base}/files/{file_id}",
            )
        )

    async def get_websocket_url(
        self, deployment_id: str
    ) -> CallResult[WebsocketEndpoint]:
        self.call_history.append(
            {"operation": "get_websocket_url", "deployment_id": deployment_id}
        )
        return CallResult.success(
            WebsocketEndpoint(ws_connection_url=f"ws://mock.test/ws/{deployment_id}")
        )

    async def run_sync(
        self,
        deployment_id: str,
        inputs: Optional[Dict[str, str]] = None,
        webhook: Optional[str] = None,
        *,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> CallResult[Union[RunOutput, PendingRun]]:
        """Submit and immediately return the finished run.

        An already-set ``cancel_event`` skips the poll and reports cancellation.
        """

        submitted = await self.run(deployment_id, inputs=inputs, webhook=webhook)
        if submitted.value is None:
            return CallResult(error=submitted.error)

        run_id = submitted.value.run_id
        if cancel_event is not None and cancel_event.is_set():
            return CallResult.failure(
                FailureKind.CANCELLED, f"Polling for run {run_id} was cancelled."
            )
        return await self.get_run(run_id)


if TYPE_CHECKING:
    # Interface check for static type analysis
    _: ComfyDeployClientProtocol = MockComfyDeployClient()
