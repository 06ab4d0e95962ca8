"""Pipeline data model: subtasks, delegation outcomes and aggregated results."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from conductor.common.protocol import WorkerDescriptor

GENERAL_TASK_TYPE = "general"
WEB_RESEARCH = "web_research"
CRM_RESEARCH = "crm_research"

NO_SUITABLE_AGENTS = "No suitable agents found for this task"
NO_VALID_TASKS = "No valid tasks found in the input"


class Priority(str, Enum):
    """Subtask urgency. Reported, never used for routing."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class Subtask:
    """One independently routable unit of work."""

    original_text: str
    task_types: tuple[str, ...] = (GENERAL_TASK_TYPE,)
    priority: Priority = Priority.MEDIUM

    def __post_init__(self) -> None:
        if not self.task_types:
            object.__setattr__(self, "task_types", (GENERAL_TASK_TYPE,))


@dataclass(frozen=True)
class TaskSummary:
    """Counts of subtasks per task type and per priority."""

    total_tasks: int
    task_types: dict[str, int]
    priorities: dict[str, int]


@dataclass(frozen=True)
class DelegationOutcome:
    """Result of one (subtask, worker) call.

    ``payload`` is set iff ``success``; ``error_message`` iff not.
    """

    worker_name: str
    success: bool
    payload: Any = None
    error_message: str | None = None

    @classmethod
    def ok(cls, worker_name: str, payload: Any) -> DelegationOutcome:
        return cls(worker_name=worker_name, success=True, payload=payload)

    @classmethod
    def failed(cls, worker_name: str, error_message: str) -> DelegationOutcome:
        return cls(worker_name=worker_name, success=False, error_message=error_message)


@dataclass
class TaskResult:
    """Per-subtask aggregate.

    ``success`` is false only when no worker matched the subtask; delegation
    failures stay inside ``outcomes``.
    """

    subtask: Subtask
    success: bool
    matched_workers: list[WorkerDescriptor] = field(default_factory=list)
    outcomes: list[DelegationOutcome] = field(default_factory=list)
    summary_text: str = ""

    @property
    def successful_outcomes(self) -> list[DelegationOutcome]:
        return [o for o in self.outcomes if o.success]

    @property
    def failed_outcomes(self) -> list[DelegationOutcome]:
        return [o for o in self.outcomes if not o.success]

    @property
    def agents_used(self) -> list[str]:
        return [w.name for w in self.matched_workers]


@dataclass(frozen=True)
class ResultEntry:
    task: str
    agent: str
    result: Any


@dataclass(frozen=True)
class ErrorEntry:
    task: str
    error: str
    agent: str | None = None


@dataclass
class OrchestrationResult:
    """Cross-task aggregate for one user request."""

    success: bool
    user_input: str
    message: str | None = None
    total_tasks: int = 0
    successful_tasks: int = 0
    failed_tasks: int = 0
    task_summary: TaskSummary | None = None
    agents_used: list[str] = field(default_factory=list)
    task_results: list[TaskResult] = field(default_factory=list)
    results: list[ResultEntry] = field(default_factory=list)
    errors: list[ErrorEntry] = field(default_factory=list)
    summary: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict view suitable for ``json.dumps``."""
        data = asdict(self)
        for task, source in zip(data["task_results"], self.task_results):
            task["subtask"]["priority"] = source.subtask.priority.value
            task["subtask"]["task_types"] = list(source.subtask.task_types)
            task["matched_workers"] = [w.to_wire() for w in source.matched_workers]
        return data
