"""
Configuration Module.
"""

from v0_mcp.config.settings import Settings, get_settings, validate_config

__all__ = [
    "Settings",
    "get_settings",
    "validate_config",
]
