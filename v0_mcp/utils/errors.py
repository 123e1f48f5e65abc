"""
Custom Exceptions
Error taxonomy for configuration, tool dispatch and v0 API failures
"""

from typing import Optional


class V0McpError(Exception):
    """Base exception for all v0-mcp errors."""


class ConfigurationError(V0McpError):
    """Raised when a required setting is missing or invalid."""

    def __init__(self, message: str, missing: Optional[list[str]] = None):
        super().__init__(message)
        self.missing = missing or []


class ToolError(V0McpError):
    """Base exception for tool dispatch failures."""

    def __init__(self, message: str, tool: Optional[str] = None):
        super().__init__(message)
        self.tool = tool


class UnknownToolError(ToolError):
    """Raised when the requested tool is not in the catalogue."""

    def __init__(self, tool: str):
        super().__init__(f"Unknown tool: {tool}", tool=tool)


class ToolValidationError(ToolError):
    """Raised when tool arguments do not match the input schema."""

    pass


class V0ApiError(V0McpError):
    """
    Raised when the v0 API rejects or fails a request.

    The message is the upstream client's text, unchanged.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.original_error = original_error


class V0AuthenticationError(V0ApiError):
    """Raised when the API key is rejected."""

    pass


class V0RateLimitError(V0ApiError):
    """Raised when the v0 rate limit is exceeded."""

    pass


class V0TimeoutError(V0ApiError):
    """Raised when a v0 request times out."""

    pass


class V0ConnectionError(V0ApiError):
    """Raised when the v0 API cannot be reached."""

    pass


class V0ResponseError(V0ApiError):
    """Raised when the v0 API returns a malformed response."""

    pass
