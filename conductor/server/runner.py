"""Serve worker applications with uvicorn.

Each worker listens on its own port; all servers share one event loop and
shut down together on Ctrl+C.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import urlsplit

import anyio
import uvicorn

from conductor.utils.logging import get_logger
from conductor.workers.base import WorkerService

logger = get_logger("conductor.server.runner")


def build_server(app: Any, host: str, port: int, log_level: str = "warning") -> uvicorn.Server:
    """Create a uvicorn server for *app* without starting it."""
    config = uvicorn.Config(app, host=host, port=port, log_level=log_level.lower())
    return uvicorn.Server(config)


def server_for_worker(worker: WorkerService, log_level: str = "warning") -> uvicorn.Server:
    """Bind a worker's app to the host and port of its advertised endpoint."""
    endpoint = urlsplit(worker.descriptor.endpoint)
    return build_server(
        worker.app,
        host=endpoint.hostname or "localhost",
        port=endpoint.port or 80,
        log_level=log_level,
    )


async def serve_all(servers: list[uvicorn.Server]) -> None:
    async with anyio.create_task_group() as tg:
        for server in servers:
            tg.start_soon(server.serve)


def run_workers(workers: list[WorkerService], log_level: str = "warning") -> None:
    """Serve every worker until interrupted.

    Args:
        workers: Worker services to expose
        log_level: uvicorn access/error log level
    """
    servers = [server_for_worker(w, log_level) for w in workers]

    for worker in workers:
        logger.info(f"{worker.name} running on {worker.descriptor.endpoint}")
    logger.info("Press Ctrl+C to stop the agents")

    try:
        anyio.run(serve_all, servers)
    except KeyboardInterrupt:
        logger.info("🛑 Agents interrupted, shutting down...")
    finally:
        logger.info("✅ Agents stopped cleanly")
