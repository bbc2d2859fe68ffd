"""Configuration module for the ComfyDeploy SDK."""

from .client_settings import ComfyDeploySettings, PollingConfig

__all__ = [
    "ComfyDeploySettings",
    "PollingConfig",
]
