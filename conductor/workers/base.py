"""Base worker service exposing the descriptor and task endpoints.

Routes:
    GET  /agent-card    - worker descriptor used for discovery
    POST /process       - execute a task, answers a success or error envelope
    GET  /capabilities  - schemas of the worker's tools and resources
    GET  /health        - liveness probe

Subclasses register their tools in ``register_tools`` and implement
``process_task``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import ValidationError
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from conductor.common.protocol import TaskRequest, TaskResponse, WorkerDescriptor
from conductor.utils.logging import get_logger
from conductor.workers.tools import ToolRegistry


class WorkerService(ABC):
    """A worker reachable over HTTP.

    Args:
        descriptor: Identity and capabilities served at ``/agent-card``
        logger: Optional logger; defaults to one bound to the worker name
    """

    def __init__(self, descriptor: WorkerDescriptor, logger=None) -> None:
        self.descriptor = descriptor
        self.logger = logger or get_logger(f"conductor.workers.{descriptor.name}")
        self.tools = ToolRegistry()
        self.register_tools()
        self.app = self.build_app()

    @property
    def name(self) -> str:
        return self.descriptor.name

    @abstractmethod
    def register_tools(self) -> None:
        """Register tools and resources on ``self.tools``."""

    @abstractmethod
    async def process_task(self, message: str, task_types: list[str]) -> Any:
        """Execute one task and return its opaque result payload."""

    def select_task_type(self, task_types: list[str]) -> str | None:
        """First requested task type this worker supports."""
        eligible = self.descriptor.eligible_task_types(task_types)
        return eligible[0] if eligible else None

    def build_app(self) -> Starlette:
        return Starlette(
            routes=[
                Route("/agent-card", self.agent_card_endpoint, methods=["GET"]),
                Route("/process", self.process_endpoint, methods=["POST"]),
                Route("/capabilities", self.capabilities_endpoint, methods=["GET"]),
                Route("/health", self.health_endpoint, methods=["GET"]),
            ]
        )

    async def agent_card_endpoint(self, request: Request) -> JSONResponse:
        return JSONResponse(self.descriptor.to_wire())

    async def capabilities_endpoint(self, request: Request) -> JSONResponse:
        return JSONResponse(self.tools.capabilities())

    async def health_endpoint(self, request: Request) -> JSONResponse:
        return JSONResponse({"status": "ok", "agent": self.name})

    async def process_endpoint(self, request: Request) -> JSONResponse:
        """Validate the task request, run it and wrap the outcome in an envelope."""
        try:
            task = TaskRequest.model_validate(await request.json())
        except (ValueError, ValidationError) as e:
            self.logger.warning(f"Rejected malformed task request: {e}")
            return self._error_response(f"Invalid task request: {e}", status_code=400)

        self.logger.info(f"{self.name} processing: {task.message} ({task.task_type})")

        try:
            result = await self.process_task(task.message, task.task_type)
        except Exception as e:
            self.logger.exception(f"{self.name} failed to process task")
            return self._error_response(str(e), status_code=500)

        response = TaskResponse(
            success=True,
            agent=self.name,
            task_type=task.task_type,
            result=result,
        )
        return JSONResponse(response.to_wire())

    def _error_response(self, error: str, status_code: int) -> JSONResponse:
        response = TaskResponse(success=False, agent=self.name, error=error)
        return JSONResponse(response.to_wire(), status_code=status_code)
