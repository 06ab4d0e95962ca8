"""Application settings for Conductor.

Every section reads its own environment prefix so deployments can override a
single value without touching the rest:

    CONDUCTOR_LOG_LEVEL=DEBUG
    CONDUCTOR_DISCOVERY_ADDRESSES='["http://localhost:3001"]'
    CONDUCTOR_DISCOVERY_TIMEOUT=10
    CONDUCTOR_DELEGATION_TIMEOUT=30
    CONDUCTOR_WORKER_HOST=localhost
    CONDUCTOR_WORKER_WEB_PORT=3001
    CONDUCTOR_WORKER_CRM_PORT=3002

Settings are resolved once at import time into ``app_settings``.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Process-wide logging configuration."""

    model_config = SettingsConfigDict(env_prefix="CONDUCTOR_LOG_", extra="ignore")

    level: str = "INFO"


class DiscoverySettings(BaseSettings):
    """Where the orchestrator looks for workers and how long it waits."""

    model_config = SettingsConfigDict(
        env_prefix="CONDUCTOR_DISCOVERY_", extra="ignore"
    )

    addresses: list[str] = Field(
        default_factory=lambda: ["http://localhost:3001", "http://localhost:3002"]
    )
    timeout: float = 10.0


class DelegationSettings(BaseSettings):
    """Deadline applied to each delegated worker call."""

    model_config = SettingsConfigDict(
        env_prefix="CONDUCTOR_DELEGATION_", extra="ignore"
    )

    timeout: float = 30.0


class WorkerSettings(BaseSettings):
    """Bind addresses for the bundled demonstration workers."""

    model_config = SettingsConfigDict(env_prefix="CONDUCTOR_WORKER_", extra="ignore")

    host: str = "localhost"
    web_port: int = 3001
    crm_port: int = 3002


class Settings(BaseSettings):
    """Root settings object."""

    model_config = SettingsConfigDict(extra="ignore")

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    discovery: DiscoverySettings = Field(default_factory=DiscoverySettings)
    delegation: DelegationSettings = Field(default_factory=DelegationSettings)
    worker: WorkerSettings = Field(default_factory=WorkerSettings)


app_settings = Settings()
