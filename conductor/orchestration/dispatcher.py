"""Concurrent delegation of one subtask to its matched workers."""

from __future__ import annotations

import anyio

from conductor.common.errors import ConductorError, TaskTypeUnsupportedError
from conductor.common.models import (
    NO_SUITABLE_AGENTS,
    DelegationOutcome,
    Subtask,
    TaskResult,
)
from conductor.common.protocol import WorkerDescriptor
from conductor.orchestration.client import WorkerClient
from conductor.utils.logging import get_logger


class Dispatcher:
    """
    Fans a subtask out to every matched worker and waits for all of them.

    A failing call never cancels its siblings: every call is converted into
    a ``DelegationOutcome`` inside its own task, and outcomes are returned in
    the order the workers were given.
    """

    def __init__(self, client: WorkerClient, timeout: float = 30.0, logger=None):
        self.client = client
        self.timeout = timeout
        self.logger = logger or get_logger("conductor.orchestration.dispatcher")

    async def delegate(
        self,
        workers: list[WorkerDescriptor],
        text: str,
        task_types: list[str],
    ) -> list[DelegationOutcome]:
        """
        Send *text* to every worker concurrently.

        Args:
            workers: Matched workers, in routing order
            text: Subtask text
            task_types: Subtask task-type tags

        Returns:
            One outcome per worker, in input order
        """
        outcomes: list[DelegationOutcome | None] = [None] * len(workers)

        async def _run(index: int, worker: WorkerDescriptor) -> None:
            outcomes[index] = await self._delegate_one(worker, text, task_types)

        async with anyio.create_task_group() as tg:
            for index, worker in enumerate(workers):
                tg.start_soon(_run, index, worker)

        return [o for o in outcomes if o is not None]

    async def _delegate_one(
        self, worker: WorkerDescriptor, text: str, task_types: list[str]
    ) -> DelegationOutcome:
        if not worker.eligible_task_types(task_types):
            error = TaskTypeUnsupportedError(worker.name, task_types)
            self.logger.debug(str(error))
            return DelegationOutcome.failed(worker.name, str(error))

        try:
            with anyio.fail_after(self.timeout):
                payload = await self.client.execute(worker, text, task_types)
        except TimeoutError:
            self.logger.warning(f"Agent {worker.name} timed out after {self.timeout}s")
            return DelegationOutcome.failed(
                worker.name, f"Agent {worker.name} timed out after {self.timeout}s"
            )
        except ConductorError as e:
            self.logger.warning(str(e))
            return DelegationOutcome.failed(worker.name, str(e))

        self.logger.debug(f"Agent {worker.name} completed task")
        return DelegationOutcome.ok(worker.name, payload)

    @staticmethod
    def aggregate(
        subtask: Subtask,
        workers: list[WorkerDescriptor],
        outcomes: list[DelegationOutcome],
    ) -> TaskResult:
        """Wrap the outcomes of one subtask into a ``TaskResult``."""
        if not workers:
            return TaskResult(
                subtask=subtask,
                success=False,
                summary_text=NO_SUITABLE_AGENTS,
            )

        succeeded = sum(1 for o in outcomes if o.success)
        if succeeded:
            summary = f"Successfully processed by {succeeded} agent(s)"
        else:
            summary = "All agents failed to process the request"

        return TaskResult(
            subtask=subtask,
            success=True,
            matched_workers=list(workers),
            outcomes=list(outcomes),
            summary_text=summary,
        )
