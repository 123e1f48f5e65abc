"""
Tool call outcomes.

Every call ends in exactly one outcome, which is converted to the MCP
CallToolResult envelope.
"""

from dataclasses import dataclass, field

from mcp.types import CallToolResult, TextContent


@dataclass(frozen=True)
class ToolSuccess:
    """Handler content, passed through unchanged."""

    content: list[TextContent] = field(default_factory=list)

    def to_result(self, name: str) -> CallToolResult:
        return CallToolResult(content=list(self.content), isError=False)


@dataclass(frozen=True)
class ToolFailure:
    """Human-readable reason a call failed."""

    message: str

    def to_result(self, name: str) -> CallToolResult:
        return CallToolResult(
            content=[
                TextContent(
                    type="text",
                    text=f'Error executing tool "{name}": {self.message}',
                )
            ],
            isError=True,
        )


ToolOutcome = ToolSuccess | ToolFailure


def error_message(exc: BaseException) -> str:
    """Message text for an exception, falling back to its type name."""
    return str(exc) or type(exc).__name__
