"""
UI Generation MCP Tools
Generate UI code from a text description or from a design image
Source: https://modelcontextprotocol.io/docs/concepts/tools
"""

from typing import Any

from mcp.types import TextContent, Tool

from v0_mcp.services.v0_client import V0Client
from v0_mcp.utils.errors import UnknownToolError
from v0_mcp.utils.logging import get_logger

logger = get_logger(__name__)

MODEL_PROPERTY = {
    "type": "string",
    "description": "v0 model to use (defaults to the server's configured model)",
}


GENERATE_UI_TOOL = Tool(
    name="generate_ui",
    description=(
        "Generate UI code (React/Next.js with Tailwind CSS) from a natural-language "
        "description using the v0 API."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "prompt": {
                "type": "string",
                "minLength": 1,
                "description": "Description of the UI component or page to generate",
            },
            "model": MODEL_PROPERTY,
            "stream": {
                "type": "boolean",
                "description": "Stream the generation and return the joined result",
                "default": False,
            },
            "system": {
                "type": "string",
                "description": "Additional instructions such as framework or styling constraints",
            },
        },
        "required": ["prompt"],
    },
)


GENERATE_FROM_IMAGE_TOOL = Tool(
    name="generate_from_image",
    description=(
        "Generate UI code that recreates a screenshot or design mockup. "
        "The image must be reachable by URL (https or data URI)."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "image_url": {
                "type": "string",
                "minLength": 1,
                "description": "URL of the screenshot or mockup",
            },
            "prompt": {
                "type": "string",
                "description": "Optional guidance on how to interpret the image",
            },
            "model": MODEL_PROPERTY,
        },
        "required": ["image_url"],
    },
)


TOOLS = [GENERATE_UI_TOOL, GENERATE_FROM_IMAGE_TOOL]


async def call_tool(
    client: V0Client, name: str, arguments: dict[str, Any]
) -> list[TextContent]:
    """
    Execute a generation tool.

    Args:
        client: v0 API client
        name: Tool name
        arguments: Arguments already validated against the tool schema

    Returns:
        The generated code as a single TextContent, unmodified
    """
    if name == GENERATE_UI_TOOL.name:
        logger.debug(f"Generating UI for prompt of {len(arguments['prompt'])} chars")
        result = await client.generate_ui(
            prompt=arguments["prompt"],
            model=arguments.get("model"),
            system=arguments.get("system"),
            stream=arguments.get("stream", False),
        )
        return [TextContent(type="text", text=result.content)]

    if name == GENERATE_FROM_IMAGE_TOOL.name:
        result = await client.generate_from_image(
            image_url=arguments["image_url"],
            prompt=arguments.get("prompt"),
            model=arguments.get("model"),
        )
        return [TextContent(type="text", text=result.content)]

    raise UnknownToolError(name)
