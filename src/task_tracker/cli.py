"""
Command line entry point.

    task-tracker serve            run the gateway with uvicorn
    task-tracker list             print the task list
    task-tracker add TITLE        add a task
    task-tracker toggle ID        flip a task's completed flag
    task-tracker remove ID        delete a task

Client commands talk to GATEWAY_URL (or --url).
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from .client import TaskGatewayClient, TaskTracker, render
from .logging_setup import setup_logging
from .settings import get_settings

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="task-tracker", description="Single-user task list.")
    parser.add_argument("--url", default=None, help="Gateway base URL (default: GATEWAY_URL)")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP gateway")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.add_argument("--reload", action="store_true")

    sub.add_parser("list", help="List tasks, newest first")

    add = sub.add_parser("add", help="Add a task")
    add.add_argument("title", nargs="+")

    toggle = sub.add_parser("toggle", help="Mark a task completed or pending")
    toggle.add_argument("task_id")

    remove = sub.add_parser("remove", help="Delete a task")
    remove.add_argument("task_id")
    return parser


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    settings = get_settings()
    host = args.host or settings.host
    port = args.port or settings.port
    logger.info("Starting gateway at http://%s:%s (store: %s)", host, port, settings.store_backend)
    uvicorn.run(
        "task_tracker.main:app",
        host=host,
        port=port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )
    return 0


def run_client_command(args: argparse.Namespace, gateway: TaskGatewayClient) -> int:
    """Execute one client subcommand against `gateway`, print the list, return an exit code."""
    tracker = TaskTracker(gateway)
    result = tracker.load()
    if result.ok and args.command == "add":
        result = tracker.add(" ".join(args.title))
    elif result.ok and args.command == "toggle":
        result = tracker.toggle(args.task_id)
    elif result.ok and args.command == "remove":
        result = tracker.remove(args.task_id)

    print(render(tracker.state))
    if not result.ok:
        print(f"error: {result.error}", file=sys.stderr)
        return 1
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level)

    if args.command == "serve":
        return _serve(args)

    with TaskGatewayClient(args.url or settings.gateway_url, timeout=settings.http_timeout_seconds) as gateway:
        return run_client_command(args, gateway)


if __name__ == "__main__":
    sys.exit(main())
