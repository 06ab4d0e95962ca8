"""Demonstration workers served over HTTP."""

from conductor.settings import app_settings

from .base import WorkerService
from .crm_research import CRMResearchAgent
from .tools import Tool, ToolRegistry
from .web_research import WebResearchAgent


def default_workers() -> list[WorkerService]:
    """The bundled workers bound to the configured host and ports."""
    host = app_settings.worker.host
    return [
        WebResearchAgent(host=host, port=app_settings.worker.web_port),
        CRMResearchAgent(host=host, port=app_settings.worker.crm_port),
    ]


__all__ = [
    "WorkerService",
    "WebResearchAgent",
    "CRMResearchAgent",
    "Tool",
    "ToolRegistry",
    "default_workers",
]
