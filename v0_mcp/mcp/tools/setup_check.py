"""
Setup Check MCP Tool
Reports configuration and verifies the v0 API key works
"""

from typing import Any

from mcp.types import TextContent, Tool

from v0_mcp.services.v0_client import V0Client
from v0_mcp.utils.errors import UnknownToolError

SETUP_CHECK_TOOL = Tool(
    name="setup_check",
    description=(
        "Check that the v0 API is configured and reachable. Reports the base URL "
        "and default model, then runs a minimal test request."
    ),
    inputSchema={
        "type": "object",
        "properties": {},
    },
)


TOOLS = [SETUP_CHECK_TOOL]


async def call_tool(
    client: V0Client, name: str, arguments: dict[str, Any]
) -> list[TextContent]:
    """
    Run the setup check.

    API failures propagate so the caller receives the upstream message
    as an error result.
    """
    if name != SETUP_CHECK_TOOL.name:
        raise UnknownToolError(name)

    settings = client.settings
    result = await client.check_connection()

    lines = [
        "v0 API setup check passed",
        f"Base URL: {settings.V0_BASE_URL}",
        f"Default model: {settings.V0_DEFAULT_MODEL}",
        f"Responding model: {result.model}",
    ]
    if result.prompt_tokens is not None or result.completion_tokens is not None:
        total = (result.prompt_tokens or 0) + (result.completion_tokens or 0)
        lines.append(f"Test request tokens: {total}")

    return [TextContent(type="text", text="\n".join(lines))]
