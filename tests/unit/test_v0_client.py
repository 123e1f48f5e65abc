"""
Unit tests for the v0 API client.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import httpx
import openai
import pytest

from v0_mcp.services.v0_client import (
    DEFAULT_IMAGE_PROMPT,
    GenerationResult,
    V0Client,
    translate_error,
)
from v0_mcp.utils.errors import (
    V0ApiError,
    V0AuthenticationError,
    V0ConnectionError,
    V0RateLimitError,
    V0ResponseError,
    V0TimeoutError,
)

REQUEST = httpx.Request("POST", "https://api.v0.test/v1/chat/completions")


def _completion(content: str, model: str = "v0-1.5-md", usage=(10, 20)):
    return SimpleNamespace(
        model=model,
        choices=[
            SimpleNamespace(
                message=SimpleNamespace(content=content),
                finish_reason="stop",
            )
        ],
        usage=SimpleNamespace(prompt_tokens=usage[0], completion_tokens=usage[1])
        if usage
        else None,
    )


def _openai_stub(create: AsyncMock):
    return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))


def _status_error(cls, status: int, message: str):
    response = httpx.Response(status, request=REQUEST)
    return cls(message, response=response, body=None)


@pytest.fixture
def create():
    return AsyncMock(return_value=_completion("<form>...</form>"))


@pytest.fixture
def client(settings, events, create):
    return V0Client(settings, events, client=_openai_stub(create))


@pytest.mark.unit
class TestGenerateUI:
    """Tests for text-to-UI generation."""

    @pytest.mark.asyncio
    async def test_returns_content_unmodified(self, client, create):
        result = await client.generate_ui("a login form")

        assert result == GenerationResult(
            content="<form>...</form>",
            model="v0-1.5-md",
            prompt_tokens=10,
            completion_tokens=20,
            finish_reason="stop",
        )
        create.assert_awaited_once_with(
            model="v0-1.5-md",
            messages=[{"role": "user", "content": "a login form"}],
        )

    @pytest.mark.asyncio
    async def test_explicit_model_and_system(self, client, create):
        await client.generate_ui("a pricing table", model="v0-1.5-lg", system="Use shadcn/ui")

        kwargs = create.await_args.kwargs
        assert kwargs["model"] == "v0-1.5-lg"
        assert kwargs["messages"] == [
            {"role": "system", "content": "Use shadcn/ui"},
            {"role": "user", "content": "a pricing table"},
        ]

    @pytest.mark.asyncio
    async def test_logs_api_call(self, client, log_capture):
        await client.generate_ui("a login form")

        records = [r for r in log_capture.records() if r["message"] == "API call completed"]
        assert len(records) == 1
        assert records[0]["method"] == "generate_ui"
        assert records[0]["tokens"]["total"] == 30
        assert records[0]["duration"] >= 0

    @pytest.mark.asyncio
    async def test_missing_content_becomes_empty_string(self, settings, events):
        create = AsyncMock(return_value=_completion(None, usage=None))
        client = V0Client(settings, events, client=_openai_stub(create))

        result = await client.generate_ui("anything")

        assert result.content == ""
        assert result.prompt_tokens is None

    @pytest.mark.asyncio
    async def test_response_without_choices(self, settings, events):
        create = AsyncMock(return_value=SimpleNamespace(model="v0-1.5-md", choices=[], usage=None))
        client = V0Client(settings, events, client=_openai_stub(create))

        with pytest.raises(V0ResponseError):
            await client.generate_ui("anything")

    @pytest.mark.asyncio
    async def test_streaming_joins_chunks(self, settings, events):
        async def chunks():
            for text, finish in (("<div>", None), ("hi", None), ("</div>", "stop")):
                yield SimpleNamespace(
                    usage=None,
                    choices=[
                        SimpleNamespace(delta=SimpleNamespace(content=text), finish_reason=finish)
                    ],
                )
            yield SimpleNamespace(
                usage=SimpleNamespace(prompt_tokens=5, completion_tokens=3), choices=[]
            )

        create = AsyncMock(return_value=chunks())
        client = V0Client(settings, events, client=_openai_stub(create))

        result = await client.generate_ui("a div", stream=True)

        assert result.content == "<div>hi</div>"
        assert result.finish_reason == "stop"
        assert result.completion_tokens == 3
        assert create.await_args.kwargs["stream"] is True


@pytest.mark.unit
class TestOtherOperations:
    """Tests for image, chat and setup-check requests."""

    @pytest.mark.asyncio
    async def test_generate_from_image_sends_image_part(self, client, create):
        await client.generate_from_image("https://example.com/mock.png")

        (message,) = create.await_args.kwargs["messages"]
        assert message["role"] == "user"
        assert message["content"] == [
            {"type": "text", "text": DEFAULT_IMAGE_PROMPT},
            {"type": "image_url", "image_url": {"url": "https://example.com/mock.png"}},
        ]

    @pytest.mark.asyncio
    async def test_chat_complete_forwards_history(self, client, create):
        history = [
            {"role": "user", "content": "a navbar"},
            {"role": "assistant", "content": "<nav />"},
            {"role": "user", "content": "make it sticky"},
        ]

        await client.chat_complete(history, model="v0-1.0-md")

        assert create.await_args.kwargs["messages"] == history
        assert create.await_args.kwargs["model"] == "v0-1.0-md"

    @pytest.mark.asyncio
    async def test_check_connection_limits_tokens(self, client, create):
        await client.check_connection()

        assert create.await_args.kwargs["max_tokens"] == 16


@pytest.mark.unit
class TestErrorTranslation:
    """Tests for mapping openai errors onto v0 errors."""

    @pytest.mark.parametrize(
        "error, expected_cls",
        [
            (_status_error(openai.AuthenticationError, 401, "Invalid API key"), V0AuthenticationError),
            (_status_error(openai.PermissionDeniedError, 403, "Forbidden"), V0AuthenticationError),
            (_status_error(openai.RateLimitError, 429, "Rate limit exceeded"), V0RateLimitError),
            (_status_error(openai.InternalServerError, 500, "Upstream exploded"), V0ApiError),
            (openai.APITimeoutError(request=REQUEST), V0TimeoutError),
            (openai.APIConnectionError(request=REQUEST), V0ConnectionError),
        ],
    )
    def test_translate_error(self, error, expected_cls):
        translated = translate_error(error)

        assert type(translated) is expected_cls
        assert str(translated) == str(error)
        assert translated.original_error is error

    def test_status_code_preserved(self):
        translated = translate_error(_status_error(openai.RateLimitError, 429, "slow down"))
        assert translated.status_code == 429

    @pytest.mark.asyncio
    async def test_client_raises_translated_error(self, settings, events):
        create = AsyncMock(side_effect=_status_error(openai.AuthenticationError, 401, "Invalid API key"))
        client = V0Client(settings, events, client=_openai_stub(create))

        with pytest.raises(V0AuthenticationError, match="Invalid API key"):
            await client.generate_ui("a login form")


@pytest.mark.unit
def test_underlying_client_created_lazily(settings, events):
    client = V0Client(settings, events)

    assert client._client is None
    assert str(client.client.base_url).rstrip("/") == settings.V0_BASE_URL
