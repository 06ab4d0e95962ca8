"""Name-keyed registry of tools and resources exposed by a worker."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from conductor.common.errors import ToolExecutionError, ToolNotFoundError

Handler = Callable[[dict[str, Any]], Awaitable[Any]]

TOOL = "tool"
RESOURCE = "resource"


@dataclass(frozen=True)
class Tool:
    """A named async handler invoked with a parameter dict."""

    name: str
    handler: Handler
    description: str = ""
    kind: str = TOOL

    def schema(self) -> dict[str, str]:
        return {
            "type": "function" if self.kind == TOOL else RESOURCE,
            "name": self.name,
            "description": self.description,
        }

    async def invoke(self, params: dict[str, Any] | None = None) -> Any:
        try:
            return await self.handler(params or {})
        except Exception as e:
            raise ToolExecutionError(self.kind, self.name, str(e)) from e


class ToolRegistry:
    """Tools and resources keyed by exact name; registration order is irrelevant."""

    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}
        self._resources: dict[str, Tool] = {}

    def register_tool(self, name: str, handler: Handler, description: str = "") -> None:
        self._tools[name] = Tool(name, handler, description, TOOL)

    def register_resource(
        self, name: str, handler: Handler, description: str = ""
    ) -> None:
        self._resources[name] = Tool(name, handler, description, RESOURCE)

    async def invoke_tool(self, name: str, params: dict[str, Any] | None = None) -> Any:
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(TOOL, name)
        return await tool.invoke(params)

    async def access_resource(
        self, name: str, params: dict[str, Any] | None = None
    ) -> Any:
        resource = self._resources.get(name)
        if resource is None:
            raise ToolNotFoundError(RESOURCE, name)
        return await resource.invoke(params)

    def capabilities(self) -> dict[str, list[dict[str, str]]]:
        """Schemas of every registered tool and resource."""
        return {
            "tools": [t.schema() for t in self._tools.values()],
            "resources": [r.schema() for r in self._resources.values()],
        }
