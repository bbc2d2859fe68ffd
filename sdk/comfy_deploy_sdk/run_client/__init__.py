"""Run API client exports."""

from .client import DEFAULT_API_BASE, ComfyDeployClient
from .mock import MockComfyDeployClient
from .protocol import ComfyDeployClientProtocol
from .results import CallError, CallResult, FailureKind
from .schemas import (
    OutputData,
    OutputFile,
    OutputGroup,
    PendingRun,
    RunHandle,
    RunOutput,
    RunRequest,
    RunStatus,
    UploadTicket,
    WebhookRequestBody,
    WebsocketEndpoint,
)

__all__ = [
    "DEFAULT_API_BASE",
    "ComfyDeployClient",
    "MockComfyDeployClient",
    "ComfyDeployClientProtocol",
    "CallError",
    "CallResult",
    "FailureKind",
    "OutputData",
    "OutputFile",
    "OutputGroup",
    "PendingRun",
    "RunHandle",
    "RunOutput",
    "RunRequest",
    "RunStatus",
    "UploadTicket",
    "WebhookRequestBody",
    "WebsocketEndpoint",
]
