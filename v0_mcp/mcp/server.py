"""
MCP Server
Model Context Protocol server exposing the v0 tools
Source: https://github.com/modelcontextprotocol/python-sdk
Verified: 2026-10-18
"""

import asyncio
import contextlib
import sys
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from enum import Enum
from typing import Any, TextIO

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, Tool

from v0_mcp.config import Settings, validate_config
from v0_mcp.mcp.results import ToolFailure, ToolOutcome, ToolSuccess, error_message
from v0_mcp.mcp.tools import ToolRegistry
from v0_mcp.services.v0_client import V0Client
from v0_mcp.utils.logging import EventLogger, get_logger

logger = get_logger(__name__)

# Seconds to wait for the transport to close on shutdown
SHUTDOWN_TIMEOUT = 2.0

TransportFactory = Callable[[], AbstractAsyncContextManager[tuple[Any, Any]]]


class ServerState(str, Enum):
    """Server lifecycle states."""

    CREATED = "created"
    STARTING = "starting"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"
    STOPPED = "stopped"
    FAILED = "failed"


class V0McpServer:
    """
    MCP server for the v0 API.

    The transport and the MCP session run in a single task started by
    start(); shutdown() cancels that task, which closes the transport.
    In-flight tool calls are not awaited, and a transport that does not
    close within shutdown_timeout is abandoned; the process exits anyway.
    """

    def __init__(
        self,
        settings: Settings,
        events: EventLogger,
        registry: ToolRegistry | None = None,
        transport_factory: TransportFactory = stdio_server,
        diagnostics: TextIO | None = None,
        shutdown_timeout: float = SHUTDOWN_TIMEOUT,
    ):
        self.settings = settings
        self.events = events
        self.registry = registry or ToolRegistry(V0Client(settings, events), events)
        self.state = ServerState.CREATED

        self._transport_factory = transport_factory
        self._diagnostics = diagnostics
        self.shutdown_timeout = shutdown_timeout
        self._session_task: asyncio.Task[None] | None = None

        self.server = Server(settings.MCP_SERVER_NAME, version=settings.MCP_SERVER_VERSION)
        self._setup_handlers()

    def _setup_handlers(self) -> None:
        """Register MCP request handlers."""

        @self.server.list_tools()
        async def handle_list_tools() -> list[Tool]:
            return self.list_tools()

        # Arguments are validated by the registry so failures carry its message
        @self.server.call_tool(validate_input=False)
        async def handle_call_tool(name: str, arguments: dict[str, Any]) -> CallToolResult:
            return await self.call_tool(name, arguments)

    def list_tools(self) -> list[Tool]:
        return self.registry.list_tools()

    async def dispatch(self, name: str, arguments: dict[str, Any] | None) -> ToolOutcome:
        """Run a tool call, containing every failure in a ToolFailure."""
        try:
            content = await self.registry.call_tool(name, arguments)
        except Exception as exc:
            return ToolFailure(error_message(exc))
        return ToolSuccess(content)

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> CallToolResult:
        outcome = await self.dispatch(name, arguments)
        return outcome.to_result(name)

    async def start(self) -> None:
        """
        Validate configuration, open the transport and start the session.

        Raises:
            ConfigurationError: required settings are missing; the transport
                is never opened

        Evidence: stdio transport for local MCP servers
        Source: https://modelcontextprotocol.io/docs/concepts/transports
        Verified: 2026-10-18
        """
        self.state = ServerState.STARTING

        try:
            validate_config(self.settings)

            self.events.server_event(
                "server_starting",
                serverName=self.settings.MCP_SERVER_NAME,
                version=self.settings.MCP_SERVER_VERSION,
                baseUrl=self.settings.V0_BASE_URL,
                defaultModel=self.settings.V0_DEFAULT_MODEL,
            )

            await self._connect()

            tool_count = len(self.list_tools())
            self.events.server_event("server_started", availableTools=tool_count)
            self._print_banner(tool_count)
        except Exception as exc:
            self.state = ServerState.FAILED
            self.events.server_event("server_start_failed", error=str(exc))
            if self._session_task is not None:
                self._session_task.cancel()
            raise

        self.state = ServerState.RUNNING

    async def _connect(self) -> None:
        connected: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._session_task = asyncio.create_task(self._run_session(connected))

        await asyncio.wait({connected, self._session_task}, return_when=asyncio.FIRST_COMPLETED)

        if connected.cancelled():
            # The transport failed to open; surface its error
            task, self._session_task = self._session_task, None
            task.result()
            raise RuntimeError("Transport closed before the session started")

    async def _run_session(self, connected: "asyncio.Future[None]") -> None:
        try:
            async with self._transport_factory() as (read_stream, write_stream):
                connected.set_result(None)
                await self.server.run(
                    read_stream,
                    write_stream,
                    self.server.create_initialization_options(),
                )
        finally:
            if not connected.done():
                connected.cancel()

    async def wait_closed(self) -> None:
        """Return once the session ends, e.g. when the peer closes stdin."""
        if self._session_task is not None:
            await asyncio.wait({self._session_task})

    async def shutdown(self) -> None:
        """Close the transport and stop the session."""
        self.state = ServerState.SHUTTING_DOWN
        self.events.server_event("server_shutting_down")
        print("🛑 Shutting down v0-mcp server...", file=self._diagnostics or sys.stderr)

        try:
            await self._close_session()
        except Exception as exc:
            self.state = ServerState.FAILED
            self.events.server_event("server_shutdown_error", error=str(exc))
            raise

        self.state = ServerState.STOPPED
        self.events.server_event("server_shutdown_complete")

    async def _close_session(self) -> None:
        task, self._session_task = self._session_task, None
        if task is None:
            return

        if not task.done():
            task.cancel()

        # The stdio reader blocks in a worker thread until the peer sends a
        # line or closes stdin, so cancellation is only awaited for a bounded time
        await asyncio.wait({task}, timeout=self.shutdown_timeout)
        if not task.done():
            logger.warning(
                f"Transport did not close within {self.shutdown_timeout}s; abandoning session"
            )
            return

        with contextlib.suppress(asyncio.CancelledError):
            task.result()

    def _print_banner(self, tool_count: int) -> None:
        out = self._diagnostics or sys.stderr
        print("✅ v0-mcp server started successfully", file=out)
        print(
            f"📡 Server: {self.settings.MCP_SERVER_NAME} v{self.settings.MCP_SERVER_VERSION}",
            file=out,
        )
        print(f"🎨 Available tools: {tool_count}", file=out)
        print(f"🔗 Base URL: {self.settings.V0_BASE_URL}", file=out)
        print(f"🤖 Default model: {self.settings.V0_DEFAULT_MODEL}", file=out)
