"""Tool registry for MCP server."""

from __future__ import annotations

import time
from types import ModuleType
from typing import Any, Protocol

import jsonschema
from mcp.types import TextContent, Tool

from v0_mcp.services.v0_client import V0Client
from v0_mcp.utils.errors import ToolValidationError, UnknownToolError
from v0_mcp.utils.logging import EventLogger

from . import chat, generate, setup_check


class ToolProvider(Protocol):
    TOOLS: list[Tool]

    async def call_tool(
        self, client: V0Client, name: str, arguments: dict[str, Any]
    ) -> list[TextContent]:  # pragma: no cover - Protocol definition
        ...


_TOOL_MODULES: list[ModuleType] = [generate, chat, setup_check]


def validate_arguments(tool: Tool, arguments: dict[str, Any]) -> None:
    """Check arguments against the tool's JSON Schema."""
    try:
        jsonschema.validate(arguments, tool.inputSchema)
    except jsonschema.ValidationError as exc:
        path = ".".join(str(part) for part in exc.absolute_path)
        location = f" (at {path})" if path else ""
        raise ToolValidationError(
            f"Invalid arguments for {tool.name}: {exc.message}{location}",
            tool=tool.name,
        ) from exc


class ToolRegistry:
    """
    Fixed catalogue of v0 tools.

    Validates arguments, dispatches to the module that owns the tool name,
    and logs a tool-call event for every invocation.
    """

    def __init__(
        self,
        client: V0Client,
        events: EventLogger,
        modules: list[Any] | None = None,
    ):
        self.client = client
        self.events = events
        self._entries: dict[str, tuple[Tool, ToolProvider]] = {}

        for module in modules if modules is not None else _TOOL_MODULES:
            for tool in module.TOOLS:
                self._entries[tool.name] = (tool, module)

    def list_tools(self) -> list[Tool]:
        """Tool descriptors in registration order."""
        return [tool for tool, _ in self._entries.values()]

    async def call_tool(
        self, name: str, arguments: dict[str, Any] | None
    ) -> list[TextContent]:
        """
        Validate and execute a tool.

        Raises:
            UnknownToolError: name is not in the catalogue
            ToolValidationError: arguments do not match the input schema
            V0ApiError: the v0 API failed the request
        """
        started = time.perf_counter()

        try:
            entry = self._entries.get(name)
            if entry is None:
                raise UnknownToolError(name)

            tool, module = entry
            arguments = dict(arguments or {})
            validate_arguments(tool, arguments)

            content = await module.call_tool(self.client, name, arguments)
        except Exception as exc:
            self.events.tool_call(name, False, _elapsed_ms(started))
            self.events.error(exc, f"tool:{name}")
            raise

        self.events.tool_call(name, True, _elapsed_ms(started))
        return content


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


__all__ = ["ToolRegistry", "validate_arguments"]
