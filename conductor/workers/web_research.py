"""Mock web research worker.

Returns canned search and fetch results; no real network access.
"""

from __future__ import annotations

import time
from typing import Any
from urllib.parse import quote

from conductor.common.protocol import WorkerDescriptor
from conductor.workers.base import WorkerService


class WebResearchAgent(WorkerService):
    """Web search and URL fetching worker."""

    def __init__(self, host: str = "localhost", port: int = 3001, logger=None) -> None:
        descriptor = WorkerDescriptor(
            name="WebResearchAgent",
            description="Specialized agent for web-based research and information gathering",
            capabilities=["web_search", "url_analysis", "content_extraction"],
            supported_task_types=["web_research", "search_query", "url_fetch"],
            endpoint=f"http://{host}:{port}",
        )
        super().__init__(descriptor, logger=logger)

    def register_tools(self) -> None:
        self.tools.register_tool("web_search", self._web_search, "Performs web search queries")
        self.tools.register_tool("url_fetch", self._url_fetch, "Fetches content from URLs")
        self.tools.register_resource(
            "search_history", self._search_history, "Access to search history"
        )

    async def process_task(self, message: str, task_types: list[str]) -> dict[str, Any]:
        task_type = self.select_task_type(task_types)

        if task_type in ("web_research", "search_query"):
            search = await self.tools.invoke_tool(
                "web_search", {"query": message, "max_results": 3}
            )
            return {
                "type": "web_search",
                "query": message,
                "summary": f'Found {len(search["results"])} search results for "{message}"',
                "data": search,
            }

        if task_type == "url_fetch":
            page = await self.tools.invoke_tool("url_fetch", {"url": message})
            return {
                "type": "url_fetch",
                "url": message,
                "summary": f"Successfully fetched content from {message}",
                "data": page,
            }

        return {
            "type": "general",
            "message": f"{self.name} processed: {message}",
            "summary": "Processed general web research request",
        }

    async def _web_search(self, params: dict[str, Any]) -> dict[str, Any]:
        query = params["query"]
        max_results = params.get("max_results", 5)
        self.logger.debug(f"Searching for: {query} (max results: {max_results})")

        results = [
            {
                "title": f"Mock result 1 for: {query}",
                "url": f"https://example.com/result1?q={quote(query)}",
                "snippet": (
                    f'This is a mock search result for the query "{query}". '
                    "In a real implementation, this would connect to a search API."
                ),
            },
            {
                "title": f"Mock result 2 for: {query}",
                "url": f"https://example.com/result2?q={quote(query)}",
                "snippet": f'Another mock search result providing information about "{query}".',
            },
        ][:max_results]

        return {
            "query": query,
            "results": results,
            "total_results": len(results),
            "search_time": int(time.time() * 1000),
        }

    async def _url_fetch(self, params: dict[str, Any]) -> dict[str, Any]:
        url = params["url"]
        return {
            "url": url,
            "content": (
                f"Mock content from {url}. In a real implementation, "
                "this would fetch and parse the actual webpage content."
            ),
            "title": f"Mock Title - {url}",
            "metadata": {
                "fetch_time": int(time.time() * 1000),
                "content_type": "text/html",
                "status": 200,
            },
        }

    async def _search_history(self, params: dict[str, Any]) -> dict[str, Any]:
        now = int(time.time() * 1000)
        return {
            "queries": [
                {"query": "sample query", "timestamp": now - 10000},
                {"query": "another query", "timestamp": now - 5000},
            ]
        }
