"""Python SDK for the ComfyDeploy run API."""

from .config import ComfyDeploySettings, PollingConfig
from .run_client import (
    CallError,
    CallResult,
    ComfyDeployClient,
    ComfyDeployClientProtocol,
    FailureKind,
    MockComfyDeployClient,
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
from .webhooks import parse_data_safe, parse_webhook_data_safe

__all__ = [
    "ComfyDeployClient",
    "MockComfyDeployClient",
    "ComfyDeployClientProtocol",
    "ComfyDeploySettings",
    "PollingConfig",
    "CallError",
    "CallResult",
    "FailureKind",
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
    "parse_data_safe",
    "parse_webhook_data_safe",
]
