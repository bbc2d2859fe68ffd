"""ComfyDeploy API settings for the SDK client."""

from __future__ import annotations

from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class PollingConfig(BaseModel):
    """Cadence and budget used when waiting for a run to finish."""

    interval_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Delay between two status polls.",
    )
    max_attempts: int = Field(
        default=300,
        ge=1,
        description="Number of status polls before giving up on a run.",
    )


class ComfyDeploySettings(BaseSettings):
    """Configuration values for talking to the ComfyDeploy API."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    api_base: str | None = Field(
        default=None,
        title="API Base URL",
        description="Service origin; '/api' is appended. Uses the hosted service when unset.",
        alias="COMFY_DEPLOY_API_BASE",
    )
    api_token: SecretStr | None = Field(
        default=None,
        title="API Token",
        description="Bearer token sent with every request.",
        alias="COMFY_DEPLOY_API_TOKEN",
    )
    request_timeout: float = Field(
        default=60.0,
        title="Request Timeout",
        description="Timeout in seconds for a single HTTP request.",
        alias="COMFY_DEPLOY_REQUEST_TIMEOUT",
    )
    poll_interval_seconds: float = Field(
        default=1.0,
        ge=0,
        title="Poll Interval",
        description="Seconds to wait between status polls in run_sync.",
        alias="COMFY_DEPLOY_POLL_INTERVAL_SECONDS",
    )
    poll_max_attempts: int = Field(
        default=300,
        ge=1,
        title="Poll Attempts",
        description="Maximum number of status polls in run_sync.",
        alias="COMFY_DEPLOY_POLL_MAX_ATTEMPTS",
    )

    @property
    def polling(self) -> PollingConfig:
        """Return the polling parameters as a standalone config object."""

        return PollingConfig(
            interval_seconds=self.poll_interval_seconds,
            max_attempts=self.poll_max_attempts,
        )
