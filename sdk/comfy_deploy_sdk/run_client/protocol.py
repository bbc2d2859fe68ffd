"""Protocol definitions for the ComfyDeploy client SDK."""

import asyncio
from typing import Dict, Optional, Protocol, Union

from .results import CallResult
from .schemas import PendingRun, RunHandle, RunOutput, UploadTicket, WebsocketEndpoint


class ComfyDeployClientProtocol(Protocol):
    """Typed interface for ComfyDeploy run API clients."""

    async def run(
        self,
        deployment_id: str,
        inputs: Optional[Dict[str, str]] = None,
        webhook: Optional[str] = None,
    ) -> CallResult[RunHandle]:
        """Start a run of the given deployment."""
        ...

    async def get_run(self, run_id: str) -> CallResult[RunOutput]:
        """Fetch a status snapshot of a run."""
        ...

    async def get_upload_url(
        self, type: str, file_size: int
    ) -> CallResult[UploadTicket]:
        """Request upload credentials for a single file."""
        ...

    async def get_websocket_url(
        self, deployment_id: str
    ) -> CallResult[WebsocketEndpoint]:
        """Fetch the live-progress websocket endpoint of a deployment."""
        ...

    async def run_sync(
        self,
        deployment_id: str,
        inputs: Optional[Dict[str, str]] = None,
        webhook: Optional[str] = None,
        *,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> CallResult[Union[RunOutput, PendingRun]]:
        """Start a run and wait for it to succeed."""
        ...
