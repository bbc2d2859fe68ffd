"""Pydantic models for the ComfyDeploy run API payloads."""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RunStatus(str, Enum):
    """Lifecycle states reported by the run API."""

    NOT_STARTED = "not-started"
    RUNNING = "running"
    UPLOADING = "uploading"
    SUCCESS = "success"
    FAILED = "failed"
    STARTED = "started"
    QUEUED = "queued"
    TIMEOUT = "timeout"


class RunRequest(BaseModel):
    """Payload for starting a deployment run."""

    model_config = ConfigDict(frozen=True)

    deployment_id: str = Field(..., description="Deployment to execute.")
    inputs: Optional[Dict[str, str]] = Field(
        None, description="Named workflow inputs passed to the deployment."
    )
    webhook: Optional[str] = Field(
        None, description="URL notified by the service when the run changes state."
    )

    def to_payload(self) -> Dict[str, object]:
        """Serialize the request, omitting optional fields that were not set."""

        return self.model_dump(exclude_none=True)


class RunHandle(BaseModel):
    """Identifier returned after a run is accepted."""

    run_id: str


class OutputFile(BaseModel):
    url: str
    filename: str


class OutputData(BaseModel):
    images: Optional[List[OutputFile]] = None
    files: Optional[List[OutputFile]] = None
    gifs: Optional[List[OutputFile]] = None


class OutputGroup(BaseModel):
    data: OutputData


class RunOutput(BaseModel):
    """Status snapshot of a run, including any outputs produced so far."""

    id: str
    status: RunStatus
    outputs: List[OutputGroup]
    live_status: Optional[str] = None
    progress: float = 0


class PendingRun(BaseModel):
    """Result of a synchronous run whose polling budget ran out."""

    id: str


class UploadTicket(BaseModel):
    """One-shot credentials for uploading a single file."""

    upload_url: str
    file_id: str
    download_url: str


class WebsocketEndpoint(BaseModel):
    ws_connection_url: str


class WebhookRequestBody(BaseModel):
    """Body delivered by the service to a run's webhook URL."""

    status: RunStatus
    run_id: str
    outputs: List[OutputGroup]
