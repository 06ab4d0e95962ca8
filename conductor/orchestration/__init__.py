"""Core modules for request orchestration."""

from .client import WorkerClient
from .decomposer import TaskDecomposer
from .dispatcher import Dispatcher
from .orchestrator import Orchestrator
from .registry import WorkerRegistry

__all__ = [
    "TaskDecomposer",
    "WorkerRegistry",
    "WorkerClient",
    "Dispatcher",
    "Orchestrator",
]
