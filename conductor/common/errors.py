"""Exception taxonomy for Conductor.

Delegation-level errors (unreachable worker, unsupported task type, worker
error envelope) are raised by the transport and the dispatcher internally and
converted into ``DelegationOutcome`` values before they leave the
orchestrator. Only ``RegistryNotReadyError`` escapes ``Orchestrator.process``.
"""

from __future__ import annotations


class ConductorError(Exception):
    """Base class for every Conductor error."""


class WorkerUnreachableError(ConductorError):
    """A discovery or delegation call failed at the transport layer.

    Attributes:
        address: Address or endpoint that could not be reached.
        reason: Underlying transport error message.
    """

    def __init__(self, address: str, reason: str) -> None:
        self.address = address
        self.reason = reason
        super().__init__(f"Failed to reach agent at {address}: {reason}")


class TaskTypeUnsupportedError(ConductorError):
    """A matched worker does not advertise any of the requested task types."""

    def __init__(self, worker_name: str, task_types: list[str]) -> None:
        self.worker_name = worker_name
        self.task_types = list(task_types)
        super().__init__(
            f"Agent {worker_name} does not support task type: {', '.join(task_types)}"
        )


class WorkerTaskError(ConductorError):
    """A worker answered a task call with an error envelope."""

    def __init__(self, worker_name: str, error: str) -> None:
        self.worker_name = worker_name
        self.error = error
        super().__init__(f"Agent {worker_name} failed to process the task: {error}")


class RegistryNotReadyError(ConductorError):
    """The orchestrator was asked to process a request before discovery ran."""

    def __init__(self) -> None:
        super().__init__(
            "Worker registry has not run discovery; call initialize() first"
        )


class ToolNotFoundError(ConductorError):
    """A worker was asked for a tool or resource it never registered."""

    def __init__(self, kind: str, name: str) -> None:
        self.kind = kind
        self.name = name
        super().__init__(f"{kind.capitalize()} {name} not found")


class ToolExecutionError(ConductorError):
    """A registered tool or resource handler raised."""

    def __init__(self, kind: str, name: str, reason: str) -> None:
        self.kind = kind
        self.name = name
        self.reason = reason
        verb = "execution" if kind == "tool" else "access"
        super().__init__(f"{kind.capitalize()} {name} {verb} failed: {reason}")
