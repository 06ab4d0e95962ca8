"""Mock CRM research worker backed by an in-memory customer table."""

from __future__ import annotations

import time
from typing import Any

from conductor.common.protocol import WorkerDescriptor
from conductor.workers.base import WorkerService

MOCK_CUSTOMERS: list[dict[str, str]] = [
    {
        "id": "001",
        "name": "John Doe",
        "email": "john.doe@example.com",
        "company": "Tech Corp",
        "status": "active",
        "last_contact": "2024-01-15",
    },
    {
        "id": "002",
        "name": "Jane Smith",
        "email": "jane.smith@business.com",
        "company": "Business Solutions",
        "status": "prospective",
        "last_contact": "2024-01-10",
    },
    {
        "id": "003",
        "name": "Bob Johnson",
        "email": "bob.johnson@startup.io",
        "company": "Startup Inc",
        "status": "inactive",
        "last_contact": "2023-12-20",
    },
]

MOCK_INTERACTIONS: list[dict[str, str]] = [
    {
        "customer_id": "001",
        "type": "email",
        "date": "2024-01-15",
        "subject": "Product inquiry",
        "notes": "Customer interested in premium features",
    },
    {
        "customer_id": "002",
        "type": "call",
        "date": "2024-01-10",
        "subject": "Demo request",
        "notes": "Scheduled product demonstration",
    },
]


def customer_matches(customer: dict[str, str], query: str) -> bool:
    """True if the query contains, or is contained in, a searchable field."""
    query = query.lower()
    for key in ("name", "email", "company"):
        value = customer[key].lower()
        if query in value or value in query:
            return True
    return False


class CRMResearchAgent(WorkerService):
    """Customer lookup and CRM analytics worker."""

    def __init__(self, host: str = "localhost", port: int = 3002, logger=None) -> None:
        self.customers = [dict(c) for c in MOCK_CUSTOMERS]
        self.interactions = [dict(i) for i in MOCK_INTERACTIONS]
        descriptor = WorkerDescriptor(
            name="CRMResearchAgent",
            description="Specialized agent for CRM data analysis and customer research",
            capabilities=["customer_lookup", "contact_analysis", "crm_queries"],
            supported_task_types=["crm_research", "customer_search", "contact_lookup"],
            endpoint=f"http://{host}:{port}",
        )
        super().__init__(descriptor, logger=logger)

    def register_tools(self) -> None:
        self.tools.register_tool(
            "customer_lookup", self._customer_lookup, "Looks up customers in CRM system"
        )
        self.tools.register_tool(
            "get_customer_interactions",
            self._customer_interactions,
            "Retrieves customer interaction history",
        )
        self.tools.register_tool(
            "crm_analytics", self._analytics, "Provides CRM analytics and metrics"
        )
        self.tools.register_resource(
            "customer_database", self._customer_database, "Access to customer database"
        )

    async def process_task(self, message: str, task_types: list[str]) -> dict[str, Any]:
        task_type = self.select_task_type(task_types)

        if task_type in ("crm_research", "customer_search"):
            lookup = await self.tools.invoke_tool("customer_lookup", {"query": message})
            return {
                "type": "customer_search",
                "query": message,
                "summary": f'Found {len(lookup["customers"])} customers matching "{message}"',
                "data": lookup,
            }

        if task_type == "contact_lookup":
            lookup = await self.tools.invoke_tool("customer_lookup", {"query": message})
            if not lookup["customers"]:
                return {
                    "type": "contact_lookup",
                    "query": message,
                    "summary": f'No contact found for "{message}"',
                    "data": {"customer": None, "interactions": []},
                }

            customer = lookup["customers"][0]
            history = await self.tools.invoke_tool(
                "get_customer_interactions", {"customer_id": customer["id"]}
            )
            return {
                "type": "contact_lookup",
                "customer": customer,
                "interactions": history["interactions"],
                "summary": (
                    f"Found contact details and {history['total_interactions']} "
                    f"interactions for {customer['name']}"
                ),
                "data": {"customer": customer, "interactions": history},
            }

        analytics = await self.tools.invoke_tool("crm_analytics", {})
        return {
            "type": "general",
            "message": f"{self.name} processed: {message}",
            "summary": "Processed general CRM research request",
            "analytics": analytics,
        }

    async def _customer_lookup(self, params: dict[str, Any]) -> dict[str, Any]:
        query = params["query"]
        matches = [c for c in self.customers if customer_matches(c, query)]
        return {
            "query": query,
            "customers": matches,
            "total_found": len(matches),
            "search_time": int(time.time() * 1000),
        }

    async def _customer_interactions(self, params: dict[str, Any]) -> dict[str, Any]:
        customer_id = params["customer_id"]
        interactions = [i for i in self.interactions if i["customer_id"] == customer_id]
        return {
            "customer_id": customer_id,
            "interactions": interactions,
            "total_interactions": len(interactions),
            "retrieval_time": int(time.time() * 1000),
        }

    async def _analytics(self, params: dict[str, Any]) -> dict[str, Any]:
        statuses = [c["status"] for c in self.customers]
        analytics = {
            "total_customers": len(self.customers),
            "active_customers": statuses.count("active"),
            "prospective_customers": statuses.count("prospective"),
            "inactive_customers": statuses.count("inactive"),
            "total_interactions": len(self.interactions),
            "last_updated": int(time.time() * 1000),
        }
        metric = params.get("metric")
        return {metric: analytics.get(metric)} if metric else analytics

    async def _customer_database(self, params: dict[str, Any]) -> dict[str, Any]:
        limit = params.get("limit", 10)
        offset = params.get("offset", 0)
        return {
            "customers": self.customers[offset : offset + limit],
            "total": len(self.customers),
            "offset": offset,
            "limit": limit,
        }
