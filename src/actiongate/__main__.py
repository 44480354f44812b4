"""CLI entrypoint and orchestration for actiongate."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import signal
import sys

from aiohttp import web

from actiongate.config import ConfigError, load_config
from actiongate.server import create_app

logger = logging.getLogger("actiongate")

KNOWN_COMMANDS = {"serve", "actions"}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments with subcommand routing.

    Subcommands:
        serve     Start the API server (default if no subcommand given)
        actions   List configured actions and whether they are public

    If the first positional arg is not a known subcommand, 'serve' is
    prepended automatically.
    """
    raw = list(argv) if argv is not None else sys.argv[1:]

    first_positional = next((a for a in raw if not a.startswith("-")), None)
    if first_positional not in KNOWN_COMMANDS:
        raw = ["serve", *raw]

    parser = argparse.ArgumentParser(description="actiongate: HTTP API front controller")
    subparsers = parser.add_subparsers(dest="command")

    serve_parser = subparsers.add_parser("serve", help="Start the API server")
    serve_parser.add_argument("--config", default="config.yaml", help="Config file path")
    serve_parser.add_argument("--host", default=None, help="Override server.host")
    serve_parser.add_argument("--port", type=int, default=None, help="Override server.port")

    actions_parser = subparsers.add_parser("actions", help="List configured actions")
    actions_parser.add_argument("--config", default="config.yaml", help="Config file path")

    return parser.parse_args(raw)


async def run(args: argparse.Namespace) -> None:
    """Main async entrypoint -- serve until SIGINT/SIGTERM."""
    config = load_config(args.config)
    host = args.host or config.server.host
    port = args.port or config.server.port

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, stop_event.set)

    app = create_app(config)
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()
    logger.info("actiongate ready on http://%s:%d", host, port)

    await stop_event.wait()

    logger.info("Shutting down...")
    await runner.cleanup()
    logger.info("actiongate stopped")


def list_actions(args: argparse.Namespace) -> int:
    """Print every registered action, marking public ones."""
    from actiongate.actions.registry import build_action_registry

    config = load_config(args.config)
    registry = build_action_registry(config)
    public = set(config.public_actions)
    for name in registry.names():
        print(f"{name}\t{'public' if name in public else 'partner'}")
    return 0


def main(argv: list[str] | None = None) -> None:
    """Synchronous entrypoint for the CLI."""
    log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    args = parse_args(argv)

    try:
        if args.command == "serve":
            asyncio.run(run(args))
        elif args.command == "actions":
            sys.exit(list_actions(args))
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
