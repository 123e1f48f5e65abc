"""
Chat Completion MCP Tool
Multi-turn conversation with v0 for iterating on generated UI
"""

from typing import Any

from mcp.types import TextContent, Tool

from v0_mcp.services.v0_client import V0Client
from v0_mcp.utils.errors import UnknownToolError

CHAT_COMPLETE_TOOL = Tool(
    name="chat_complete",
    description=(
        "Continue a conversation with v0 to refine or extend generated UI. "
        "Pass the full message history, oldest first."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "messages": {
                "type": "array",
                "minItems": 1,
                "items": {
                    "type": "object",
                    "properties": {
                        "role": {
                            "type": "string",
                            "enum": ["system", "user", "assistant"],
                        },
                        "content": {"type": "string"},
                    },
                    "required": ["role", "content"],
                },
                "description": "Conversation history",
            },
            "model": {
                "type": "string",
                "description": "v0 model to use (defaults to the server's configured model)",
            },
            "stream": {
                "type": "boolean",
                "description": "Stream the reply and return the joined result",
                "default": False,
            },
        },
        "required": ["messages"],
    },
)


TOOLS = [CHAT_COMPLETE_TOOL]


async def call_tool(
    client: V0Client, name: str, arguments: dict[str, Any]
) -> list[TextContent]:
    """Execute the chat tool and return the assistant reply."""
    if name != CHAT_COMPLETE_TOOL.name:
        raise UnknownToolError(name)

    messages = [
        {"role": message["role"], "content": message["content"]}
        for message in arguments["messages"]
    ]
    result = await client.chat_complete(
        messages=messages,
        model=arguments.get("model"),
        stream=arguments.get("stream", False),
    )
    return [TextContent(type="text", text=result.content)]
