"""Conductor - decompose a request and delegate its subtasks to worker agents."""

from conductor.orchestration import (
    Dispatcher,
    Orchestrator,
    TaskDecomposer,
    WorkerClient,
    WorkerRegistry,
)

__version__ = "0.1.0"

__all__ = [
    "Orchestrator",
    "TaskDecomposer",
    "WorkerRegistry",
    "WorkerClient",
    "Dispatcher",
    "__version__",
]
