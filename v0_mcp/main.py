"""
Process entry point for the v0-mcp server.

Wires signals, crash handlers and exit codes around V0McpServer:
exit 0 after a signal or peer disconnect, exit 1 on startup failure,
failed shutdown, or any uncaught error.
"""

import asyncio
import os
import signal
import sys
import traceback
from typing import Any

from loguru import logger
from pydantic import ValidationError

from v0_mcp.config import get_settings
from v0_mcp.mcp.server import V0McpServer
from v0_mcp.utils.logging import configure_logging

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def install_signal_handlers(
    loop: asyncio.AbstractEventLoop, stop: asyncio.Event
) -> list[signal.Signals]:
    """
    Route SIGINT/SIGTERM to the stop event.

    Returns the signals registered on the loop so they can be removed.
    """
    registered = []
    for sig in SHUTDOWN_SIGNALS:
        try:
            loop.add_signal_handler(sig, stop.set)
            registered.append(sig)
        except NotImplementedError:
            # Windows event loops have no add_signal_handler
            signal.signal(sig, lambda signum, frame: loop.call_soon_threadsafe(stop.set))
    return registered


def remove_signal_handlers(
    loop: asyncio.AbstractEventLoop, registered: list[signal.Signals]
) -> None:
    for sig in registered:
        loop.remove_signal_handler(sig)


def report_uncaught(exc_type: type[BaseException], exc: BaseException, tb: Any) -> None:
    """sys.excepthook replacement: print and exit 1 without shutdown."""
    print("❌ Uncaught exception:", file=sys.stderr)
    traceback.print_exception(exc_type, exc, tb, file=sys.stderr)
    sys.stderr.flush()
    os._exit(1)


def handle_loop_exception(loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
    """
    Loop exception handler: unhandled task errors are fatal.

    Contexts without an exception are left to the default handler.
    """
    exc = context.get("exception")
    if exc is None:
        loop.default_exception_handler(context)
        return

    print(f"❌ Unhandled task error: {context.get('message', '')}", file=sys.stderr)
    traceback.print_exception(type(exc), exc, exc.__traceback__, file=sys.stderr)
    sys.stderr.flush()
    os._exit(1)


async def run_server(server: V0McpServer, stop: asyncio.Event | None = None) -> int:
    """
    Start the server, serve until a shutdown signal or disconnect, then shut down.

    Signal handlers are installed before start() so a signal arriving while
    the server starts still takes the graceful path.

    Returns:
        Process exit code
    """
    stop = stop or asyncio.Event()
    loop = asyncio.get_running_loop()
    registered = install_signal_handlers(loop, stop)

    try:
        try:
            await server.start()
        except Exception as exc:
            print(f"❌ Failed to start v0-mcp server: {exc}", file=sys.stderr)
            return 1

        # Phase 1: wait for a shutdown request or the session to end
        if not stop.is_set():
            stopping = asyncio.create_task(stop.wait())
            closed = asyncio.create_task(server.wait_closed())
            try:
                await asyncio.wait({stopping, closed}, return_when=asyncio.FIRST_COMPLETED)
            finally:
                stopping.cancel()
                closed.cancel()
    finally:
        remove_signal_handlers(loop, registered)

    # Phase 2: drain the session and close the transport
    try:
        await server.shutdown()
    except Exception as exc:
        print(f"❌ Error during shutdown: {exc}", file=sys.stderr)
        return 1

    return 0


def exit_process(exit_code: int) -> None:
    """
    Flush output and exit immediately.

    An abandoned stdio reader thread would otherwise keep asyncio.run()
    waiting on its executor at interpreter shutdown.
    """
    sys.stderr.flush()
    sys.stdout.flush()
    os._exit(exit_code)


async def _main() -> int:
    try:
        settings = get_settings()
    except ValidationError as exc:
        print(f"❌ Failed to start v0-mcp server: {exc}", file=sys.stderr)
        return 1

    events = configure_logging(settings.LOG_LEVEL, json_sink=settings.LOG_JSON_FILE)
    asyncio.get_running_loop().set_exception_handler(handle_loop_exception)

    server = V0McpServer(settings, events)
    exit_code = await run_server(server)

    await logger.complete()
    exit_process(exit_code)
    return exit_code


def main() -> None:
    """Console script entry point."""
    sys.excepthook = report_uncaught
    sys.exit(asyncio.run(_main()))


if __name__ == "__main__":
    main()
