"""End-to-end tests of the orchestration pipeline against in-process workers."""

import pytest

from conductor.common.errors import RegistryNotReadyError
from conductor.common.models import (
    NO_SUITABLE_AGENTS,
    NO_VALID_TASKS,
    DelegationOutcome,
    Subtask,
    TaskResult,
)
from conductor.orchestration import Dispatcher, Orchestrator, WorkerRegistry
from conductor.workers import CRMResearchAgent


def build_orchestrator(client) -> Orchestrator:
    return Orchestrator(
        registry=WorkerRegistry(client, discovery_timeout=5.0),
        dispatcher=Dispatcher(client, timeout=5.0),
    )


ADDRESSES = ["http://localhost:3001", "http://localhost:3002"]


class TestProcess:
    @pytest.mark.asyncio
    async def test_web_and_crm_request_routed_to_both_workers(self, make_client, demo_apps):
        orchestrator = build_orchestrator(make_client(demo_apps))
        await orchestrator.initialize(ADDRESSES)

        result = await orchestrator.process(
            "search for javascript tutorials and pull customer contact for jane smith"
        )

        assert result.success is True
        assert result.total_tasks == 2
        assert result.successful_tasks == 2
        assert result.failed_tasks == 0
        assert result.errors == []
        assert result.agents_used == ["WebResearchAgent", "CRMResearchAgent"]
        assert result.summary == "Processed 2 task(s): 2 successful, 0 failed"

        web, crm = result.results
        assert (web.task, web.agent) == ("search for javascript tutorials.", "WebResearchAgent")
        assert web.result["summary"] == (
            'Found 2 search results for "search for javascript tutorials."'
        )
        assert (crm.task, crm.agent) == (
            "pull customer contact for jane smith.",
            "CRMResearchAgent",
        )
        assert [c["name"] for c in crm.result["data"]["customers"]] == ["Jane Smith"]

        assert result.task_summary.total_tasks == 2
        assert result.task_summary.task_types == {"web_research": 1, "crm_research": 1}

    @pytest.mark.asyncio
    async def test_blank_input_reports_no_valid_tasks(self, make_client, demo_apps):
        orchestrator = build_orchestrator(make_client(demo_apps))
        await orchestrator.initialize(ADDRESSES)

        result = await orchestrator.process("   ")

        assert result.success is False
        assert result.message == NO_VALID_TASKS
        assert result.total_tasks == 0
        assert result.results == []

    @pytest.mark.asyncio
    async def test_unmatched_subtask_is_a_failed_task(self, make_client):
        """Test a web subtask with only the CRM worker discovered."""
        apps = {"localhost:3002": CRMResearchAgent(port=3002).app}
        orchestrator = build_orchestrator(make_client(apps))
        await orchestrator.initialize(["http://localhost:3002"])

        result = await orchestrator.process("search the web for news")

        assert result.success is True
        assert result.total_tasks == 1
        assert result.failed_tasks == 1
        assert result.successful_tasks == 0
        assert result.results == []
        assert result.agents_used == []
        assert [e.error for e in result.errors] == [NO_SUITABLE_AGENTS]
        assert result.errors[0].agent is None

    @pytest.mark.asyncio
    async def test_general_subtask_broadcast_to_every_worker(self, make_client, demo_apps):
        orchestrator = build_orchestrator(make_client(demo_apps))
        await orchestrator.initialize(ADDRESSES)

        result = await orchestrator.process("write a poem")

        task = result.task_results[0]
        assert task.agents_used == ["WebResearchAgent", "CRMResearchAgent"]
        assert all(not o.success for o in task.outcomes)
        assert all("does not support task type: general" in e.error for e in result.errors)
        assert task.summary_text == "All agents failed to process the request"
        assert result.successful_tasks == 1

    @pytest.mark.asyncio
    async def test_worker_gone_after_discovery_is_reported(self, make_client, demo_apps):
        orchestrator = build_orchestrator(make_client(demo_apps))
        await orchestrator.initialize(ADDRESSES)
        orchestrator.dispatcher.client = make_client(
            {"localhost:3002": demo_apps["localhost:3002"]}
        )

        result = await orchestrator.process(
            "search for javascript tutorials and pull customer contact for jane smith"
        )

        assert result.total_tasks == 2
        assert [r.agent for r in result.results] == ["CRMResearchAgent"]
        assert len(result.errors) == 1
        assert result.errors[0].agent == "WebResearchAgent"
        assert "agent may not be running" in result.errors[0].error

    @pytest.mark.asyncio
    async def test_process_before_initialize_raises(self, make_client, demo_apps):
        orchestrator = build_orchestrator(make_client(demo_apps))

        with pytest.raises(RegistryNotReadyError):
            await orchestrator.process("search for news")

    @pytest.mark.asyncio
    async def test_unreachable_addresses_leave_empty_registry(self, make_client):
        orchestrator = build_orchestrator(make_client({}))

        assert await orchestrator.initialize(ADDRESSES) == []

        result = await orchestrator.process("search for news")
        assert result.failed_tasks == 1

    @pytest.mark.asyncio
    async def test_result_serializes_to_plain_dict(self, make_client, demo_apps):
        orchestrator = build_orchestrator(make_client(demo_apps))
        await orchestrator.initialize(ADDRESSES)

        data = (await orchestrator.process("search for news asap")).to_dict()

        subtask = data["task_results"][0]["subtask"]
        assert subtask["priority"] == "high"
        assert subtask["task_types"] == ["web_research"]
        assert data["task_results"][0]["matched_workers"][0]["supportedTaskTypes"]


class TestMatchWorkers:
    @pytest.mark.asyncio
    async def test_union_of_tags_without_duplicates(self, make_client, demo_apps):
        orchestrator = build_orchestrator(make_client(demo_apps))
        await orchestrator.initialize(ADDRESSES)

        subtask = Subtask("search the web for our customer.", ("web_research", "crm_research"))

        assert [w.name for w in orchestrator.match_workers(subtask)] == [
            "WebResearchAgent",
            "CRMResearchAgent",
        ]


class TestMerge:
    def test_counts_and_flattening(self, web_descriptor):
        done = TaskResult(
            subtask=Subtask("find news."),
            success=True,
            matched_workers=[web_descriptor],
            outcomes=[DelegationOutcome.ok("WebResearchAgent", {"summary": "ok"})],
        )
        unmatched = TaskResult(
            subtask=Subtask("write a poem."), success=False, summary_text=NO_SUITABLE_AGENTS
        )

        result = Orchestrator.merge("find news and write a poem", [done, unmatched])

        assert result.success is True
        assert (result.total_tasks, result.successful_tasks, result.failed_tasks) == (2, 1, 1)
        assert result.total_tasks == result.successful_tasks + result.failed_tasks
        assert [r.task for r in result.results] == ["find news."]
        assert [e.task for e in result.errors] == ["write a poem."]
        assert result.agents_used == ["WebResearchAgent"]
        assert result.summary == "Processed 2 task(s): 1 successful, 1 failed"


def test_supervisor_descriptor():
    descriptor = Orchestrator.descriptor()

    assert descriptor.name == "SupervisorAgent"
    assert descriptor.supports("delegate")
