"""Shared fixtures: worker descriptors and an in-process HTTP transport."""

from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest

from conductor.common.protocol import WorkerDescriptor
from conductor.orchestration.client import WorkerClient
from conductor.workers import CRMResearchAgent, WebResearchAgent


@pytest.fixture
def web_descriptor() -> WorkerDescriptor:
    return WorkerDescriptor(
        name="WebResearchAgent",
        description="web",
        capabilities=["web_search"],
        supported_task_types=["web_research"],
        endpoint="http://localhost:3001",
    )


@pytest.fixture
def crm_descriptor() -> WorkerDescriptor:
    return WorkerDescriptor(
        name="CRMResearchAgent",
        description="crm",
        capabilities=["customer_lookup"],
        supported_task_types=["crm_research"],
        endpoint="http://localhost:3002",
    )


def routed_transport(apps: dict[str, Any]) -> httpx.MockTransport:
    """Route each request to the ASGI app registered for its ``host:port``.

    Requests for an unknown address fail with ``httpx.ConnectError`` as if
    nothing were listening there.
    """
    transports = {addr: httpx.ASGITransport(app=app) for addr, app in apps.items()}

    async def handler(request: httpx.Request) -> httpx.Response:
        transport = transports.get(f"{request.url.host}:{request.url.port}")
        if transport is None:
            raise httpx.ConnectError("Connection refused", request=request)
        return await transport.handle_async_request(request)

    return httpx.MockTransport(handler)


@pytest.fixture
def make_client() -> Callable[[dict[str, Any]], WorkerClient]:
    """Factory for a ``WorkerClient`` wired to in-process ASGI apps."""

    def _make(apps: dict[str, Any]) -> WorkerClient:
        return WorkerClient(client=httpx.AsyncClient(transport=routed_transport(apps)))

    return _make


@pytest.fixture
def demo_apps() -> dict[str, Any]:
    """The two bundled workers keyed by the address they advertise."""
    return {
        "localhost:3001": WebResearchAgent(port=3001).app,
        "localhost:3002": CRMResearchAgent(port=3002).app,
    }
