"""
openaci server (openaci)

Entry point that serves an application's intent router over HTTP.

Usage:
    openaci myapp:router              # Serve `router` from module myapp
    openaci myapp:create_router       # Factory returning a router
    openaci myapp:router --debug      # Debug logging

The command:
1. Loads configuration
2. Initializes logging
3. Imports the application's router
4. Serves it with uvicorn until interrupted
"""

from __future__ import annotations

import argparse
import importlib
import os
import sys
from typing import NoReturn

from openaci import __version__
from openaci.config import get_config
from openaci.http import HttpIntentRouter, create_app
from openaci.intent.router import IntentRouter
from openaci.utils.logging import get_logger, setup_logging

logger = get_logger("openaci.main")


class AppLoadError(Exception):
    """The application reference could not be resolved to a router."""


def load_router(reference: str) -> IntentRouter:
    """
    Resolve a `module:attribute` reference to an intent router.

    The attribute may be a router instance or a zero-argument callable
    returning one.
    """
    module_name, _, attribute = reference.partition(":")
    if not module_name or not attribute:
        raise AppLoadError(f"Expected 'module:attribute', got {reference!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise AppLoadError(f"Cannot import module {module_name!r}: {e}") from e

    target = getattr(module, attribute, None)
    if target is None:
        raise AppLoadError(f"Module {module_name!r} has no attribute {attribute!r}")

    if not isinstance(target, IntentRouter) and callable(target):
        target = target()

    if not isinstance(target, IntentRouter):
        raise AppLoadError(f"{reference!r} is not an IntentRouter")

    return target


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="openaci",
        description="Serve an intent router over HTTP",
    )
    parser.add_argument(
        "app",
        help="Router to serve, as module:attribute",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--host",
        default=None,
        help="Bind address (default from config)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Bind port (default from PORT or config)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--console",
        action="store_true",
        help="Use pretty console logging instead of JSON",
    )

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point for the openaci command."""
    args = parse_args(argv)

    config = get_config()

    # Override config from command line
    if args.debug:
        config.log.level = "DEBUG"
    if args.console:
        config.log.format = "console"

    setup_logging(
        level=config.log.level,
        format=config.log.format,
        log_file=config.log.file,
    )

    host = args.host or config.server.host
    port = args.port or int(os.environ.get("PORT", config.server.port))

    # Make modules in the working directory importable, as uvicorn does
    if os.getcwd() not in sys.path:
        sys.path.insert(0, os.getcwd())

    try:
        router = load_router(args.app)
    except AppLoadError as e:
        logger.error("app_load_failed", app=args.app, error=str(e))
        sys.exit(1)

    if isinstance(router, HttpIntentRouter):
        router.listen(port=port, host=host)
    else:
        import uvicorn

        logger.info("server_starting", host=host, port=port, intents=sorted(router.intents))
        uvicorn.run(create_app(router), host=host, port=port, log_config=None)

    sys.exit(0)


if __name__ == "__main__":
    main()
