"""Worker discovery and task-type matching."""

from __future__ import annotations

import threading
from datetime import datetime, timezone

import anyio

from conductor.common.errors import WorkerUnreachableError
from conductor.common.models import CRM_RESEARCH, WEB_RESEARCH
from conductor.common.protocol import WorkerDescriptor
from conductor.orchestration.client import WorkerClient
from conductor.utils.logging import get_logger

# task type -> substring expected in a matching worker's name
NAME_HINTS: dict[str, str] = {
    WEB_RESEARCH: "web",
    CRM_RESEARCH: "crm",
}


class WorkerRegistry:
    """
    Discovers workers from their ``/agent-card`` and answers which known
    workers can handle a task type.

    The name-keyed map is written only by ``discover``; ``match``, ``all``
    and ``get`` read a snapshot of it.
    """

    def __init__(
        self,
        client: WorkerClient,
        discovery_timeout: float = 10.0,
        logger=None,
    ):
        self.client = client
        self.discovery_timeout = discovery_timeout
        self.logger = logger or get_logger("conductor.orchestration.registry")
        self._workers: dict[str, WorkerDescriptor] = {}
        self._lock = threading.Lock()
        self._discovered = False

    @property
    def discovered(self) -> bool:
        """True once ``discover`` has completed at least once."""
        return self._discovered

    def __len__(self) -> int:
        with self._lock:
            return len(self._workers)

    async def discover(self, addresses: list[str]) -> list[WorkerDescriptor]:
        """
        Fetch the descriptor of every address concurrently.

        Unreachable or malformed workers are logged and skipped; nothing is
        retried.

        Args:
            addresses: Worker base URLs

        Returns:
            Descriptors obtained in this call, in address order
        """
        found: list[WorkerDescriptor | None] = [None] * len(addresses)

        async def _fetch(index: int, address: str) -> None:
            try:
                with anyio.fail_after(self.discovery_timeout):
                    descriptor = await self.client.fetch_descriptor(address)
            except TimeoutError:
                self.logger.warning(
                    f"Failed to discover agent at {address}: "
                    f"timed out after {self.discovery_timeout}s"
                )
                return
            except WorkerUnreachableError as e:
                self.logger.warning(f"Failed to discover agent at {address}: {e.reason}")
                return

            found[index] = descriptor.model_copy(
                update={"discovered_at": datetime.now(timezone.utc)}
            )

        async with anyio.create_task_group() as tg:
            for index, address in enumerate(addresses):
                tg.start_soon(_fetch, index, address)

        descriptors = [d for d in found if d is not None]

        with self._lock:
            for descriptor in descriptors:
                self._workers[descriptor.name] = descriptor
            self._discovered = True

        self.logger.info(
            f"Discovered {len(descriptors)} agent(s): {[d.name for d in descriptors]}"
        )
        return descriptors

    def match(self, task_type: str) -> list[WorkerDescriptor]:
        """
        Workers able to handle *task_type*.

        Known task types match on a name hint or an advertised supported
        type. Unknown task types are broadcast to every known worker.
        """
        workers = self.all()

        hint = NAME_HINTS.get(task_type)
        if hint is None:
            return workers

        return [w for w in workers if hint in w.name.lower() or w.supports(task_type)]

    def all(self) -> list[WorkerDescriptor]:
        with self._lock:
            return list(self._workers.values())

    def get(self, name: str) -> WorkerDescriptor | None:
        with self._lock:
            return self._workers.get(name)
