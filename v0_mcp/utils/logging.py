"""
Logging Configuration
Structured logging with loguru: a JSON sink plus a colorized console sink
Source: https://github.com/Delgan/loguru
Verified: 2026-10-18
"""

import json
import sys
import traceback
from typing import Any

from loguru import logger

SERVICE_NAME = "v0-mcp"

# Accepted LOG_LEVEL spellings mapped onto loguru level names
_LEVELS = {
    "error": "ERROR",
    "warn": "WARNING",
    "warning": "WARNING",
    "info": "INFO",
    "debug": "DEBUG",
}

# Extra keys that are not metadata
_RESERVED_EXTRA = {"service", "name"}


def _safe_str(value: Any) -> str:
    try:
        return str(value)
    except Exception:
        return f"<unprintable {type(value).__name__}>"


def _dumps(payload: dict[str, Any]) -> str:
    """Encode metadata as JSON, degrading to string values when it cannot be."""
    try:
        return json.dumps(payload, default=_safe_str)
    except (TypeError, ValueError):
        return json.dumps({str(k): _safe_str(v) for k, v in payload.items()})


def _metadata(record: dict[str, Any]) -> dict[str, Any]:
    return {
        key: value
        for key, value in record["extra"].items()
        if not key.startswith("_") and key not in _RESERVED_EXTRA
    }


def _exception_text(record: dict[str, Any]) -> str | None:
    exception = record["exception"]
    if exception is None or exception.type is None:
        return None
    return "".join(
        traceback.format_exception(exception.type, exception.value, exception.traceback)
    ).rstrip()


def _json_format(record: dict[str, Any]) -> str:
    """Render one record as a single JSON line."""
    meta = _metadata(record)
    stack = meta.pop("stack", None) or _exception_text(record)

    payload: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name.upper(),
        "message": record["message"],
        "service": record["extra"].get("service", SERVICE_NAME),
        **meta,
    }
    if stack:
        payload["stack"] = stack

    record["extra"]["_json"] = _dumps(payload)
    return "{extra[_json]}\n"


def _console_format(record: dict[str, Any]) -> str:
    """Render one record as a human-readable line, metadata appended as JSON."""
    meta = _metadata(record)
    stack = meta.pop("stack", None) or _exception_text(record)

    record["extra"]["_meta"] = f" {_dumps(meta)}" if meta else ""
    record["extra"]["_stack"] = f"\n{stack}" if stack else ""
    return (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> "
        "[<level>{level}</level>]: <level>{message}</level>"
        "{extra[_meta]}{extra[_stack]}\n"
    )


def resolve_level(level: str) -> str:
    """Map a configured level name onto a loguru level name."""
    return _LEVELS.get(level.strip().lower(), level.strip().upper())


class EventLogger:
    """
    Semantic event helpers over a bound loguru logger.

    Built once at startup by configure_logging() and passed to the
    components that emit events.
    """

    def __init__(self, service: str = SERVICE_NAME):
        self._logger = logger.bind(service=service)

    def api_call(
        self,
        method: str,
        model: str,
        prompt_tokens: int | None = None,
        completion_tokens: int | None = None,
        duration_ms: float | None = None,
    ) -> None:
        self._logger.bind(
            method=method,
            model=model,
            tokens={
                "prompt": prompt_tokens,
                "completion": completion_tokens,
                "total": (prompt_tokens or 0) + (completion_tokens or 0),
            },
            duration=duration_ms,
        ).info("API call completed")

    def error(self, error: BaseException | Any, context: str, **extra: Any) -> None:
        if isinstance(error, BaseException):
            message = _safe_str(error)
            stack = "".join(
                traceback.format_exception(type(error), error, error.__traceback__)
            ).rstrip()
        else:
            message = _safe_str(error)
            stack = None

        # Fixed fields win over caller-supplied extras
        fields = {**extra, "context": context, "error": message, "stack": stack}
        self._logger.bind(**fields).error("Error occurred")

    def tool_call(
        self,
        tool: str,
        success: bool,
        duration_ms: float | None = None,
        **extra: Any,
    ) -> None:
        fields = {**extra, "tool": tool, "success": success, "duration": duration_ms}
        self._logger.bind(**fields).info("Tool call completed")

    def server_event(self, event: str, **details: Any) -> None:
        self._logger.bind(event=event, **details).info("Server event")


def configure_logging(
    level: str = "info",
    json_sink: Any = None,
    console_sink: Any = None,
) -> EventLogger:
    """
    Configure application logging.

    Args:
        level: Log level (error, warn, info, debug)
        json_sink: Destination for JSON records (default: stderr)
        console_sink: Destination for human-readable records (default: stderr)

    Returns:
        EventLogger bound to the service name

    stdout carries the MCP protocol, so neither sink may default to it.

    Evidence: stdio servers must not write anything but MCP messages to stdout
    Source: https://modelcontextprotocol.io/docs/concepts/transports
    Verified: 2026-10-18
    """
    # Remove default logger
    logger.remove()

    loguru_level = resolve_level(level)

    logger.add(
        json_sink if json_sink is not None else sys.stderr,
        format=_json_format,
        level=loguru_level,
        colorize=False,
        catch=True,
    )
    logger.add(
        console_sink if console_sink is not None else sys.stderr,
        format=_console_format,
        level=loguru_level,
        catch=True,
    )

    return EventLogger()


def get_logger(name: str = __name__):  # type: ignore[no-untyped-def]
    """
    Get a logger instance.

    Example:
        >>> from v0_mcp.utils.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("Client initialized")
    """
    return logger.bind(name=name, service=SERVICE_NAME)
