"""HTTP transport between the orchestrator and its workers."""

from __future__ import annotations

from typing import Any

import httpx

from conductor.common.errors import WorkerTaskError, WorkerUnreachableError
from conductor.common.protocol import TaskRequest, TaskResponse, WorkerDescriptor
from conductor.utils.logging import get_logger

AGENT_CARD_PATH = "/agent-card"
PROCESS_PATH = "/process"


class WorkerClient:
    """
    Calls worker endpoints over an ``httpx.AsyncClient``.

    Transport failures are raised as ``WorkerUnreachableError`` with the
    underlying message preserved; an error envelope from the worker is
    raised as ``WorkerTaskError``.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
        logger=None,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self.logger = logger or get_logger("conductor.orchestration.client")

    async def __aenter__(self) -> WorkerClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch_descriptor(self, address: str) -> WorkerDescriptor:
        """
        Fetch the descriptor a worker serves at ``/agent-card``.

        Args:
            address: Base URL of the worker (e.g. http://localhost:3001)

        Returns:
            Validated worker descriptor

        Raises:
            WorkerUnreachableError: On transport errors, non-2xx status or
                a body that is not a valid descriptor
        """
        url = f"{address.rstrip('/')}{AGENT_CARD_PATH}"
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except Exception as e:
            raise WorkerUnreachableError(address, _describe_transport_error(e)) from e

        try:
            return WorkerDescriptor.model_validate(response.json())
        except ValueError as e:
            raise WorkerUnreachableError(address, f"Invalid agent card: {e}") from e

    async def execute(
        self, worker: WorkerDescriptor, message: str, task_types: list[str]
    ) -> Any:
        """
        Ask *worker* to process *message* tagged with *task_types*.

        Returns:
            The opaque ``result`` of the worker's success envelope
        """
        request = TaskRequest(message=message, task_type=list(task_types))
        url = f"{worker.endpoint.rstrip('/')}{PROCESS_PATH}"

        self.logger.debug(f"POST {url} task_types={list(task_types)}")

        try:
            response = await self._client.post(url, json=request.to_wire())
        except Exception as e:
            raise WorkerUnreachableError(
                worker.endpoint, _describe_transport_error(e)
            ) from e

        try:
            envelope = TaskResponse.model_validate(response.json())
        except ValueError as e:
            if response.is_error:
                raise WorkerUnreachableError(
                    worker.endpoint, f"HTTP {response.status_code}"
                ) from e
            raise WorkerTaskError(worker.name, "Invalid response format") from e

        if response.is_error or not envelope.success:
            raise WorkerTaskError(
                worker.name, envelope.error or f"HTTP {response.status_code}"
            )

        return envelope.result


def _describe_transport_error(error: Exception) -> str:
    # Malformed addresses fail inside httpx with errors outside HTTPError.
    if isinstance(error, httpx.InvalidURL):
        return f"Invalid address: {error}"
    if isinstance(error, httpx.TimeoutException):
        return "Request timeout"
    if isinstance(error, httpx.ConnectError):
        return "Connection failed - agent may not be running"
    if isinstance(error, httpx.HTTPStatusError):
        return f"HTTP {error.response.status_code}"
    return str(error) or error.__class__.__name__
