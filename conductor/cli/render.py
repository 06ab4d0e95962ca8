"""Plain-text rendering of orchestration results for the terminal."""

from __future__ import annotations

import json
from typing import Any

from conductor.common.models import OrchestrationResult


def payload_summary(payload: Any) -> str:
    if isinstance(payload, dict) and payload.get("summary"):
        return str(payload["summary"])
    return "Processed"


def render_result(result: OrchestrationResult) -> str:
    """Full report printed by ``conductor query``."""
    lines = [
        "=== QUERY RESULT ===",
        f"Input: {result.user_input}",
        f"Success: {result.success}",
    ]

    if not result.success:
        lines.append(f"Error: {result.message}")
        return "\n".join(lines)

    agents = ", ".join(result.agents_used) or "None"

    if result.total_tasks > 1:
        lines.append("")
        lines.append(f"Multiple Tasks Detected: {result.total_tasks}")
        lines.append("Task Summary:")
        if result.task_summary:
            for task_type, count in result.task_summary.task_types.items():
                lines.append(f"  - {task_type}: {count} task(s)")
        lines.append(f"Agents Used: {agents}")

        lines += ["", "=== OVERALL RESPONSE ===", result.summary]

        lines += ["", "=== TASK RESULTS ==="]
        for index, task in enumerate(result.task_results, start=1):
            lines.append("")
            lines.append(f"{index}. {task.subtask.original_text}")
            lines.append(f"   Type: {', '.join(task.subtask.task_types)}")
            lines.append(f"   Priority: {task.subtask.priority.value}")
            lines.append(f"   Status: {'SUCCESS' if task.success else 'FAILED'}")
            if task.success:
                for outcome in task.successful_outcomes:
                    lines.append(f"   {outcome.worker_name}: {payload_summary(outcome.payload)}")
            else:
                lines.append(f"   Error: {task.summary_text}")

        if result.errors:
            lines += ["", "=== ERRORS ==="]
            for error in result.errors:
                lines.append(f"- Task: {error.task}")
                lines.append(f"  Agent: {error.agent or 'N/A'}")
                lines.append(f"  Error: {error.error}")

        return "\n".join(lines)

    task_types = ", ".join(result.task_results[0].subtask.task_types)
    lines.append(f"Task Type: {task_types}")
    lines.append(f"Agents Used: {agents}")
    lines += ["", "=== RESPONSE ===", result.summary]

    if result.results:
        lines += ["", "=== DETAILED RESULTS ==="]
        for index, entry in enumerate(result.results, start=1):
            lines.append("")
            lines.append(f"{index}. {entry.agent}:")
            lines.append(f"   {json.dumps(entry.result, indent=2, default=str)}")

    if result.errors:
        lines += ["", "=== ERRORS ==="]
        for error in result.errors:
            lines.append(f"- {error.agent or 'Unknown'}: {error.error}")

    return "\n".join(lines)


def render_brief(result: OrchestrationResult) -> str:
    """Compact report printed after each interactive query."""
    status = "SUCCESS" if result.success else "FAILED"
    lines = [f"[{status}] {result.summary or result.message}"]

    if result.success and result.total_tasks > 1:
        lines.append(f"  Completed {result.total_tasks} tasks")
        for index, task in enumerate(result.task_results, start=1):
            state = "SUCCESS" if task.success else "FAILED"
            lines.append(f"  {index}. {task.subtask.original_text} - {state}")
    elif result.success:
        for entry in result.results:
            lines.append(f"  {entry.agent}: {payload_summary(entry.result)}")
        for error in result.errors:
            lines.append(f"  {error.agent or 'N/A'}: {error.error}")

    return "\n".join(lines)
