"""End-to-end orchestration pipeline.

Architecture:
    User input → TaskDecomposer → WorkerRegistry.match (per tag)
               → Dispatcher.delegate (concurrent per subtask)
               → per-task TaskResult → cross-task OrchestrationResult

Subtasks are resolved strictly one after another; only the calls for a
single subtask run concurrently.
"""

from __future__ import annotations

from conductor.common.errors import RegistryNotReadyError
from conductor.common.models import (
    NO_SUITABLE_AGENTS,
    NO_VALID_TASKS,
    ErrorEntry,
    OrchestrationResult,
    ResultEntry,
    Subtask,
    TaskResult,
)
from conductor.common.protocol import WorkerDescriptor
from conductor.orchestration.client import WorkerClient
from conductor.orchestration.decomposer import TaskDecomposer
from conductor.orchestration.dispatcher import Dispatcher
from conductor.orchestration.registry import WorkerRegistry
from conductor.settings import app_settings
from conductor.utils.logging import get_logger


class Orchestrator:
    """
    Drives decomposition, matching, delegation and aggregation for one
    request at a time.

    The registry's discovered workers live as long as the orchestrator and
    are refreshed only by ``initialize``.
    """

    def __init__(
        self,
        registry: WorkerRegistry,
        dispatcher: Dispatcher,
        decomposer: TaskDecomposer | None = None,
        logger=None,
    ):
        self.registry = registry
        self.dispatcher = dispatcher
        self.decomposer = decomposer or TaskDecomposer()
        self.logger = logger or get_logger("conductor.orchestration.orchestrator")

    @classmethod
    def from_settings(cls, client: WorkerClient | None = None, logger=None) -> Orchestrator:
        """Build an orchestrator wired with ``app_settings`` timeouts."""
        client = client or WorkerClient(
            timeout=app_settings.delegation.timeout, logger=logger
        )
        return cls(
            registry=WorkerRegistry(
                client,
                discovery_timeout=app_settings.discovery.timeout,
                logger=logger,
            ),
            dispatcher=Dispatcher(
                client, timeout=app_settings.delegation.timeout, logger=logger
            ),
            logger=logger,
        )

    @staticmethod
    def descriptor(endpoint: str = "http://localhost:3000") -> WorkerDescriptor:
        """Descriptor the orchestrator advertises for itself."""
        return WorkerDescriptor(
            name="SupervisorAgent",
            description="Coordinates and delegates tasks to specialized agents",
            capabilities=["task_delegation", "response_aggregation", "agent_discovery"],
            supported_task_types=["coordinate", "delegate", "aggregate"],
            endpoint=endpoint,
        )

    async def initialize(self, addresses: list[str] | None = None) -> list[WorkerDescriptor]:
        """Discover workers at *addresses*, defaulting to the configured list."""
        addresses = addresses if addresses is not None else app_settings.discovery.addresses
        self.logger.info(f"Discovering agents at {addresses}")
        return await self.registry.discover(addresses)

    def match_workers(self, subtask: Subtask) -> list[WorkerDescriptor]:
        """Union of the workers matched by each of the subtask's tags."""
        matched: dict[str, WorkerDescriptor] = {}
        for task_type in subtask.task_types:
            for worker in self.registry.match(task_type):
                matched.setdefault(worker.name, worker)
        return list(matched.values())

    async def process(self, user_input: str) -> OrchestrationResult:
        """
        Run the whole pipeline for one request.

        Partial failures (unmatched subtasks, failed delegations) are reported
        inside the result; a completed pipeline is always ``success=True``.

        Raises:
            RegistryNotReadyError: If discovery has never run
        """
        if not self.registry.discovered:
            raise RegistryNotReadyError()

        self.logger.info(f"Processing request: {user_input}")

        subtasks = self.decomposer.decompose(user_input)
        self.logger.info(
            f"Parsed {len(subtasks)} task(s): {[s.original_text for s in subtasks]}"
        )

        if not subtasks:
            return OrchestrationResult(
                success=False,
                user_input=user_input,
                message=NO_VALID_TASKS,
                summary=NO_VALID_TASKS,
            )

        task_results: list[TaskResult] = []
        for subtask in subtasks:
            task_results.append(await self._process_subtask(subtask))

        result = self.merge(user_input, task_results)
        result.task_summary = self.decomposer.summarize(subtasks)

        self.logger.info(f"Overall response: {result.summary}")
        return result

    async def _process_subtask(self, subtask: Subtask) -> TaskResult:
        self.logger.debug(f"Processing task: {subtask.original_text}")

        workers = self.match_workers(subtask)
        if not workers:
            self.logger.warning(
                f"{NO_SUITABLE_AGENTS}: {subtask.original_text} {list(subtask.task_types)}"
            )
            return self.dispatcher.aggregate(subtask, [], [])

        self.logger.debug(
            f"Routing '{subtask.original_text}' to {[w.name for w in workers]}"
        )
        outcomes = await self.dispatcher.delegate(
            workers, subtask.original_text, list(subtask.task_types)
        )
        return self.dispatcher.aggregate(subtask, workers, outcomes)

    @staticmethod
    def merge(user_input: str, task_results: list[TaskResult]) -> OrchestrationResult:
        """Flatten per-task results into one cross-task result."""
        results: list[ResultEntry] = []
        errors: list[ErrorEntry] = []
        agents_used: dict[str, None] = {}

        for task_result in task_results:
            task = task_result.subtask.original_text

            if not task_result.success:
                errors.append(ErrorEntry(task=task, error=task_result.summary_text))
                continue

            for name in task_result.agents_used:
                agents_used.setdefault(name, None)

            for outcome in task_result.outcomes:
                if outcome.success:
                    results.append(
                        ResultEntry(task=task, agent=outcome.worker_name, result=outcome.payload)
                    )
                else:
                    errors.append(
                        ErrorEntry(
                            task=task,
                            agent=outcome.worker_name,
                            error=outcome.error_message or "Unknown error",
                        )
                    )

        successful = sum(1 for t in task_results if t.success)
        failed = len(task_results) - successful

        return OrchestrationResult(
            success=True,
            user_input=user_input,
            total_tasks=len(task_results),
            successful_tasks=successful,
            failed_tasks=failed,
            agents_used=list(agents_used),
            task_results=task_results,
            results=results,
            errors=errors,
            summary=(
                f"Processed {len(task_results)} task(s): "
                f"{successful} successful, {failed} failed"
            ),
        )
