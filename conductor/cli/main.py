"""Conductor command-line interface.

Usage:
    conductor start-agents
    conductor query "search for javascript tutorials" [--verbose] [--json]
    conductor interactive
"""

from __future__ import annotations

import argparse
import json
import sys

import anyio
from anyio import to_thread

from conductor.cli.render import render_brief, render_result
from conductor.common.errors import ConductorError
from conductor.common.models import OrchestrationResult
from conductor.orchestration import Orchestrator, WorkerClient
from conductor.server.runner import run_workers
from conductor.settings import app_settings
from conductor.utils.logging import configure_logging, get_logger
from conductor.workers import default_workers

logger = get_logger("conductor.cli")

INTERACTIVE_HELP = """Commands:
  help - Show this help message
  exit - Exit interactive mode
  Any other input will be processed as a query
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="conductor",
        description="Split a request into subtasks and delegate them to worker agents",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Run with verbose logging"
    )
    parser.add_argument(
        "--agents",
        nargs="+",
        metavar="URL",
        help="Worker addresses to discover (defaults to CONDUCTOR_DISCOVERY_ADDRESSES)",
    )

    # Also accepted after the subcommand; SUPPRESS keeps a top-level -v intact.
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Run with verbose logging",
    )

    commands = parser.add_subparsers(dest="command")
    commands.add_parser(
        "start-agents", parents=[common], help="Start all agents in the system"
    )

    query = commands.add_parser(
        "query", parents=[common], help="Send a query to the multi-agent system"
    )
    query.add_argument("message", help="The message to process")
    query.add_argument("--json", action="store_true", help="Print the raw result as JSON")

    commands.add_parser("interactive", parents=[common], help="Start interactive mode")
    return parser


def print_usage() -> None:
    print("Multi-Agent System CLI")
    print("Usage: conductor <command>")
    print("")
    print("Commands:")
    print("  start-agents     Start all agents")
    print("  query <message>  Send a query")
    print("  interactive      Start interactive mode")
    print("")
    print("Example:")
    print("  conductor start-agents")
    print('  conductor query "search for javascript tutorials"')
    print("  conductor interactive")


def _warn_if_empty(discovered: list) -> None:
    if not discovered:
        print("⚠️  No agents discovered.")
        print("   Make sure agents are running with: conductor start-agents\n")


async def run_query(message: str, addresses: list[str] | None) -> OrchestrationResult:
    """Discover workers, process one message and return the result."""
    async with WorkerClient(timeout=app_settings.delegation.timeout) as client:
        orchestrator = Orchestrator.from_settings(client)
        _warn_if_empty(await orchestrator.initialize(addresses))
        return await orchestrator.process(message)


async def run_interactive(addresses: list[str] | None) -> None:
    print("Starting interactive mode...")
    print('Type "exit" to quit, "help" for commands\n')

    async with WorkerClient(timeout=app_settings.delegation.timeout) as client:
        orchestrator = Orchestrator.from_settings(client)
        discovered = await orchestrator.initialize(addresses)
        _warn_if_empty(discovered)
        if discovered:
            print("Supervisor initialized successfully\n")

        while True:
            try:
                line = await to_thread.run_sync(input, "> ")
            except EOFError:
                break

            text = line.strip()
            if text == "exit":
                print("Goodbye!")
                return
            if text == "help":
                print(INTERACTIVE_HELP)
                continue
            if not text:
                continue

            try:
                result = await orchestrator.process(text)
            except ConductorError as e:
                print(f"Error: {e}\n")
                continue
            print(f"\n{render_brief(result)}\n")

    print("\nExiting interactive mode...")


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging("DEBUG" if args.verbose else app_settings.logging.level)

    if args.command is None:
        print_usage()
        return 0

    if args.command == "start-agents":
        print("Starting multi-agent system...")
        run_workers(default_workers())
        return 0

    if args.command == "query":
        if args.verbose:
            print(f'Processing query: "{args.message}"')
        try:
            result = anyio.run(run_query, args.message, args.agents)
        except Exception as e:
            logger.exception("Query failed")
            print(f"Failed to process query: {e}")
            return 1

        if args.json:
            print(json.dumps(result.to_dict(), indent=2, default=str))
        else:
            print(f"\n{render_result(result)}")
        return 0 if result.success else 1

    if args.command == "interactive":
        try:
            anyio.run(run_interactive, args.agents)
        except KeyboardInterrupt:
            print("\nExiting interactive mode...")
        return 0

    parser.error(f"Unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
