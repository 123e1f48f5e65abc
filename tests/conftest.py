"""
Pytest Configuration and Fixtures.
Shared test fixtures for all test modules.
"""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from loguru import logger

from v0_mcp.config import Settings
from v0_mcp.services.v0_client import GenerationResult
from v0_mcp.utils.logging import configure_logging


def make_settings(**overrides) -> Settings:
    """Settings isolated from the real environment and any .env file."""
    values = {
        "V0_API_KEY": "test-key",
        "V0_BASE_URL": "https://api.v0.test/v1",
        "V0_DEFAULT_MODEL": "v0-1.5-md",
        "MCP_SERVER_NAME": "v0-mcp-test",
        "MCP_SERVER_VERSION": "9.9.9",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def settings_factory():
    return make_settings


@pytest.fixture
def log_capture():
    """Route both log sinks into lists; records are parsed from the JSON sink."""
    json_lines: list[str] = []
    console_lines: list[str] = []
    events = configure_logging(
        "debug",
        json_sink=json_lines.append,
        console_sink=console_lines.append,
    )

    capture = SimpleNamespace(
        events=events,
        json_lines=json_lines,
        console_lines=console_lines,
        records=lambda: [json.loads(line) for line in json_lines],
        server_events=lambda: [
            record["event"]
            for record in (json.loads(line) for line in json_lines)
            if record.get("message") == "Server event"
        ],
    )
    yield capture

    logger.remove()


@pytest.fixture
def events(log_capture):
    return log_capture.events


@pytest.fixture
def fake_v0_client(settings):
    """Stand-in for V0Client with canned generation results."""
    return SimpleNamespace(
        settings=settings,
        generate_ui=AsyncMock(
            return_value=GenerationResult(content="<form>...</form>", model="v0-default")
        ),
        generate_from_image=AsyncMock(
            return_value=GenerationResult(content="<Hero />", model="v0-1.5-md")
        ),
        chat_complete=AsyncMock(
            return_value=GenerationResult(content="Updated component", model="v0-1.5-md")
        ),
        check_connection=AsyncMock(
            return_value=GenerationResult(
                content="ready",
                model="v0-1.5-md",
                prompt_tokens=7,
                completion_tokens=1,
            )
        ),
    )


# Configure pytest markers
def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
