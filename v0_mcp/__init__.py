"""
v0-mcp
MCP server exposing Vercel v0 UI generation as tools for AI coding agents
"""

__version__ = "0.1.0"
