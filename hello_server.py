"""Hello World MCP Server — Main Entry Point

- Logging to stderr (stdout carries the protocol)
- Static capability registry assembled from the built-in modules
- SIGINT/SIGTERM close the transport and exit 0
- Startup failures are logged and exit 1
"""

from __future__ import annotations
import argparse
import asyncio
import locale
import logging
import os
import signal
import sys

# Ensure the server's own directory is on sys.path when launched by path from an MCP host
_SERVER_DIR = os.path.dirname(os.path.abspath(__file__))
if _SERVER_DIR not in sys.path:
    sys.path.insert(0, _SERVER_DIR)

from core.dispatcher import CoreDispatcher
from core.mcp_server import HelloMCPServer
from core.registry import CapabilityRegistry
from modules.calculator import CalculatorModule
from modules.greeting_prompt import GreetingPromptModule
from modules.hello import HelloModule
from modules.server_info import ServerInfoModule

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
DEFAULT_SERVER_NAME = "hello-world-mcp"
DEFAULT_SERVER_VERSION = "1.0.0"


def configure_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Set up logging to stderr (stdout is reserved for MCP JSON-RPC)."""
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
        except OSError as e:
            print(f"WARNING: --log-file {log_file!r} open failed: {e}, ignoring",
                  file=sys.stderr)

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=handlers,
        force=True,
    )


def apply_host_locale(logger: logging.Logger) -> None:
    """Adopt the host's LC_TIME so current_time renders in the local format."""
    try:
        locale.setlocale(locale.LC_TIME, "")
    except locale.Error as e:
        logger.warning("Host locale unavailable, using C locale for times: %s", e)


def builtin_modules() -> list:
    # Declaration order here is listing order
    return [
        HelloModule(),
        CalculatorModule(),
        ServerInfoModule(),
        GreetingPromptModule(),
    ]


def build_registry(modules=None) -> CapabilityRegistry:
    return CapabilityRegistry().load(modules if modules is not None else builtin_modules())


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Hello World MCP Server (stdio)")
    parser.add_argument(
        "--log-level", type=str.upper,
        default=os.environ.get("HELLO_MCP_LOG_LEVEL", "INFO").upper(),
        choices=LOG_LEVELS,
        help="Logging level (default: $HELLO_MCP_LOG_LEVEL or INFO)",
    )
    parser.add_argument("--log-file", type=str, default=None, help="Log file path (in addition to stderr)")
    parser.add_argument(
        "--server-name", type=str, default=DEFAULT_SERVER_NAME,
        help=f"Name reported in serverInfo (default: {DEFAULT_SERVER_NAME})",
    )
    parser.add_argument(
        "--server-version", type=str, default=DEFAULT_SERVER_VERSION,
        help=f"Version reported in serverInfo (default: {DEFAULT_SERVER_VERSION})",
    )
    return parser.parse_args(argv)


def install_signal_handlers(server: HelloMCPServer, logger: logging.Logger) -> None:
    loop = asyncio.get_running_loop()

    def shutdown(sig: signal.Signals) -> None:
        logger.info("Shutting down (signal=%s)...", sig.name)
        server.request_shutdown()

    for sig in (signal.SIGINT, getattr(signal, "SIGTERM", None)):
        if sig is None:
            continue
        try:
            loop.add_signal_handler(sig, shutdown, sig)
        except NotImplementedError:
            # Windows: no loop signal handlers, hop onto the loop from the C handler
            signal.signal(sig, lambda s, f: loop.call_soon_threadsafe(shutdown, signal.Signals(s)))


def main(argv=None) -> None:
    args = parse_args(argv)

    configure_logging(args.log_level, args.log_file)
    logger = logging.getLogger("hello.server")
    apply_host_locale(logger)

    try:
        registry = build_registry()
        dispatcher = CoreDispatcher(registry)
        server = HelloMCPServer(
            dispatcher,
            server_name=args.server_name,
            server_version=args.server_version,
        )

        async def _async_main():
            install_signal_handlers(server, logger)
            logger.info("%s started: %s", args.server_name, registry.summary())
            print("Hello World MCP server running on stdio", file=sys.stderr)
            await server.run_stdio()

        asyncio.run(_async_main())

    except Exception as e:
        logger.critical("Server startup failed: %s", e, exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
