"""Tests for the bundled worker services and their tool registries."""

import pytest
from starlette.testclient import TestClient

from conductor.common.errors import ToolExecutionError, ToolNotFoundError
from conductor.workers import CRMResearchAgent, ToolRegistry, WebResearchAgent
from conductor.workers.crm_research import MOCK_CUSTOMERS, customer_matches


@pytest.fixture
def web_client():
    return TestClient(WebResearchAgent(port=3001).app)


@pytest.fixture
def crm_client():
    return TestClient(CRMResearchAgent(port=3002).app)


class TestWorkerEndpoints:
    def test_agent_card_uses_camel_case_keys(self, web_client):
        response = web_client.get("/agent-card")

        assert response.status_code == 200
        card = response.json()
        assert card["name"] == "WebResearchAgent"
        assert card["endpoint"] == "http://localhost:3001"
        assert card["supportedTaskTypes"] == ["web_research", "search_query", "url_fetch"]
        assert card["protocolVersion"] == "1.0.0"
        assert "supported_task_types" not in card

    def test_health(self, crm_client):
        assert crm_client.get("/health").json() == {
            "status": "ok",
            "agent": "CRMResearchAgent",
        }

    def test_capabilities_lists_tools_and_resources(self, crm_client):
        capabilities = crm_client.get("/capabilities").json()

        assert [t["name"] for t in capabilities["tools"]] == [
            "customer_lookup",
            "get_customer_interactions",
            "crm_analytics",
        ]
        assert [r["name"] for r in capabilities["resources"]] == ["customer_database"]
        assert capabilities["tools"][0]["type"] == "function"

    def test_web_search_task(self, web_client):
        response = web_client.post(
            "/process",
            json={"message": "javascript tutorials", "taskType": ["web_research"]},
        )

        assert response.status_code == 200
        envelope = response.json()
        assert envelope["success"] is True
        assert envelope["agent"] == "WebResearchAgent"
        assert envelope["taskType"] == ["web_research"]
        assert envelope["result"]["type"] == "web_search"
        assert envelope["result"]["summary"] == (
            'Found 2 search results for "javascript tutorials"'
        )

    def test_url_fetch_task_accepts_single_task_type(self, web_client):
        response = web_client.post(
            "/process", json={"message": "https://example.com", "taskType": "url_fetch"}
        )

        result = response.json()["result"]
        assert result["type"] == "url_fetch"
        assert result["data"]["metadata"]["status"] == 200

    def test_customer_search_finds_jane_smith(self, crm_client):
        response = crm_client.post(
            "/process", json={"message": "jane smith", "taskType": ["customer_search"]}
        )

        result = response.json()["result"]
        assert result["summary"] == 'Found 1 customers matching "jane smith"'
        assert result["data"]["customers"][0]["email"] == "jane.smith@business.com"

    def test_contact_lookup_includes_interactions(self, crm_client):
        response = crm_client.post(
            "/process", json={"message": "Jane Smith", "taskType": ["contact_lookup"]}
        )

        result = response.json()["result"]
        assert result["customer"]["id"] == "002"
        assert [i["subject"] for i in result["interactions"]] == ["Demo request"]

    def test_contact_lookup_without_match(self, crm_client):
        response = crm_client.post(
            "/process", json={"message": "nobody", "taskType": ["contact_lookup"]}
        )

        assert response.json()["result"]["summary"] == 'No contact found for "nobody"'

    def test_unsupported_type_falls_back_to_general(self, crm_client):
        response = crm_client.post(
            "/process", json={"message": "hello", "taskType": ["general"]}
        )

        result = response.json()["result"]
        assert result["type"] == "general"
        assert result["analytics"]["total_customers"] == 3

    def test_missing_message_is_rejected(self, web_client):
        response = web_client.post("/process", json={"taskType": ["web_research"]})

        assert response.status_code == 400
        envelope = response.json()
        assert envelope["success"] is False
        assert envelope["error"].startswith("Invalid task request")

    def test_non_json_body_is_rejected(self, web_client):
        response = web_client.post("/process", content=b"not json")

        assert response.status_code == 400

    def test_processing_failure_returns_error_envelope(self):
        worker = WebResearchAgent()

        async def broken(params):
            raise RuntimeError("search backend down")

        worker.tools.register_tool("web_search", broken)
        response = TestClient(worker.app).post(
            "/process", json={"message": "news", "taskType": ["web_research"]}
        )

        assert response.status_code == 500
        envelope = response.json()
        assert envelope["success"] is False
        assert envelope["error"] == "Tool web_search execution failed: search backend down"


class TestToolRegistry:
    @pytest.mark.asyncio
    async def test_invoke_registered_tool(self):
        tools = ToolRegistry()

        async def echo(params):
            return params["value"]

        tools.register_tool("echo", echo)

        assert await tools.invoke_tool("echo", {"value": 7}) == 7

    @pytest.mark.asyncio
    async def test_unknown_tool_raises(self):
        with pytest.raises(ToolNotFoundError, match="Tool missing not found"):
            await ToolRegistry().invoke_tool("missing")

    @pytest.mark.asyncio
    async def test_unknown_resource_raises(self):
        with pytest.raises(ToolNotFoundError, match="Resource missing not found"):
            await ToolRegistry().access_resource("missing")

    @pytest.mark.asyncio
    async def test_failing_resource_raises_access_error(self):
        tools = ToolRegistry()

        async def broken(params):
            raise KeyError("limit")

        tools.register_resource("db", broken)

        with pytest.raises(ToolExecutionError, match="Resource db access failed"):
            await tools.access_resource("db")

    @pytest.mark.asyncio
    async def test_customer_database_pages(self):
        worker = CRMResearchAgent()

        page = await worker.tools.access_resource("customer_database", {"limit": 2, "offset": 1})

        assert [c["id"] for c in page["customers"]] == ["002", "003"]
        assert page["total"] == 3


@pytest.mark.parametrize(
    "query, expected",
    [
        ("jane", ["002"]),
        ("pull customer contact for jane smith", ["002"]),
        ("startup.io", ["003"]),
        ("corp", ["001"]),
        ("zzz", []),
    ],
)
def test_customer_matches(query, expected):
    assert [c["id"] for c in MOCK_CUSTOMERS if customer_matches(c, query)] == expected
