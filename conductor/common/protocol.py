"""Pydantic models for the orchestrator-to-worker wire protocol.

Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WireModel(BaseModel):
    """Base model serialized with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class WorkerDescriptor(WireModel):
    """Self-reported identity and capability record of a worker.

    Served by ``GET /agent-card``. ``discovered_at`` is never sent by a
    worker; the registry stamps it when the descriptor is obtained.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    name: str
    description: str = ""
    capabilities: list[str] = Field(default_factory=list)
    supported_task_types: list[str] = Field(default_factory=list)
    endpoint: str
    protocol_version: str = "1.0.0"
    protocols: list[str] = Field(default_factory=lambda: ["A2A", "MCP"])
    created_at: datetime = Field(default_factory=utcnow)
    discovered_at: datetime | None = None

    def supports(self, task_type: str) -> bool:
        return task_type in self.supported_task_types

    def eligible_task_types(self, task_types: list[str]) -> list[str]:
        """Requested task types this worker advertises, in request order."""
        return [t for t in task_types if t in self.supported_task_types]


class TaskRequest(WireModel):
    """Body of ``POST /process``."""

    message: str
    task_type: list[str] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=utcnow)

    @field_validator("task_type", mode="before")
    @classmethod
    def _single_task_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value


class TaskResponse(WireModel):
    """Success or error envelope returned by ``POST /process``."""

    success: bool
    agent: str
    task_type: list[str] | None = None
    result: Any = None
    error: str | None = None
    timestamp: datetime = Field(default_factory=utcnow)
