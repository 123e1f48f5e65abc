"""
v0 API Client
Async client for the OpenAI-compatible Vercel v0 Model API
Source: https://v0.dev/docs/v0-model-api
Verified: 2026-10-18
"""

import time
from dataclasses import dataclass
from typing import Any

import openai
from openai import AsyncOpenAI

from v0_mcp.config import Settings
from v0_mcp.utils.errors import (
    V0ApiError,
    V0AuthenticationError,
    V0ConnectionError,
    V0RateLimitError,
    V0ResponseError,
    V0TimeoutError,
)
from v0_mcp.utils.logging import EventLogger, get_logger

logger = get_logger(__name__)

DEFAULT_IMAGE_PROMPT = "Generate a React component that recreates this UI design."
SETUP_CHECK_PROMPT = "Reply with the single word: ready"


@dataclass
class GenerationResult:
    """Text generated by v0 plus the usage reported for the request."""

    content: str
    model: str
    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    finish_reason: str | None = None


def translate_error(exc: openai.APIError) -> V0ApiError:
    """Map an openai SDK error onto the v0 error taxonomy, keeping its message."""
    status_code = getattr(exc, "status_code", None)

    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        error_cls: type[V0ApiError] = V0AuthenticationError
    elif isinstance(exc, openai.RateLimitError):
        error_cls = V0RateLimitError
    # APITimeoutError subclasses APIConnectionError
    elif isinstance(exc, openai.APITimeoutError):
        error_cls = V0TimeoutError
    elif isinstance(exc, openai.APIConnectionError):
        error_cls = V0ConnectionError
    else:
        error_cls = V0ApiError

    return error_cls(str(exc), status_code=status_code, original_error=exc)


class V0Client:
    """
    v0 Model API client.

    The v0 API speaks the OpenAI chat completions protocol, so requests go
    through AsyncOpenAI pointed at V0_BASE_URL. The underlying client is
    created on first use so a missing key surfaces through config validation
    rather than at construction.
    """

    def __init__(
        self,
        settings: Settings,
        events: EventLogger,
        client: AsyncOpenAI | None = None,
    ):
        self.settings = settings
        self.events = events
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.settings.V0_API_KEY,
                base_url=self.settings.V0_BASE_URL,
                timeout=self.settings.V0_TIMEOUT,
            )
            logger.info(
                f"v0 client initialized: {self.settings.V0_BASE_URL} "
                f"({self.settings.V0_DEFAULT_MODEL})"
            )
        return self._client

    async def generate_ui(
        self,
        prompt: str,
        model: str | None = None,
        system: str | None = None,
        stream: bool = False,
    ) -> GenerationResult:
        """
        Generate UI code from a natural-language description.

        Args:
            prompt: Description of the UI to build
            model: v0 model (default: from settings)
            system: Optional extra instructions
            stream: Stream the completion and join the chunks

        Returns:
            GenerationResult with the generated code as content

        Evidence: the v0 Model API accepts OpenAI chat completion requests
        Source: https://v0.dev/docs/v0-model-api
        Verified: 2026-10-18
        """
        messages: list[dict[str, Any]] = []

        if system:
            messages.append({"role": "system", "content": system})

        messages.append({"role": "user", "content": prompt})

        return await self._complete("generate_ui", messages, model, stream=stream)

    async def generate_from_image(
        self,
        image_url: str,
        prompt: str | None = None,
        model: str | None = None,
    ) -> GenerationResult:
        """
        Generate UI code from a screenshot or design mockup.

        The image is sent as an image_url content part next to the prompt.
        """
        messages: list[dict[str, Any]] = [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": prompt or DEFAULT_IMAGE_PROMPT},
                    {"type": "image_url", "image_url": {"url": image_url}},
                ],
            }
        ]

        return await self._complete("generate_from_image", messages, model)

    async def chat_complete(
        self,
        messages: list[dict[str, Any]],
        model: str | None = None,
        stream: bool = False,
    ) -> GenerationResult:
        """Multi-turn completion for iterating on generated UI."""
        return await self._complete("chat_complete", list(messages), model, stream=stream)

    async def check_connection(self, model: str | None = None) -> GenerationResult:
        """Run a minimal completion to verify the key and connectivity."""
        messages = [{"role": "user", "content": SETUP_CHECK_PROMPT}]
        return await self._complete("setup_check", messages, model, max_tokens=16)

    async def _complete(
        self,
        method: str,
        messages: list[dict[str, Any]],
        model: str | None,
        stream: bool = False,
        **params: Any,
    ) -> GenerationResult:
        model = model or self.settings.V0_DEFAULT_MODEL
        started = time.perf_counter()

        try:
            if stream:
                result = await self._stream(model, messages, **params)
            else:
                response = await self.client.chat.completions.create(
                    model=model,
                    messages=messages,
                    **params,
                )
                result = self._parse_response(model, response)
        except openai.APIError as exc:
            raise translate_error(exc) from exc

        duration_ms = (time.perf_counter() - started) * 1000
        self.events.api_call(
            method,
            result.model,
            result.prompt_tokens,
            result.completion_tokens,
            duration_ms,
        )

        return result

    async def _stream(
        self, model: str, messages: list[dict[str, Any]], **params: Any
    ) -> GenerationResult:
        stream = await self.client.chat.completions.create(
            model=model,
            messages=messages,
            stream=True,
            **params,
        )

        chunks: list[str] = []
        finish_reason = None
        usage = None

        async for chunk in stream:
            if getattr(chunk, "usage", None):
                usage = chunk.usage
            if not chunk.choices:
                continue
            choice = chunk.choices[0]
            if choice.delta.content:
                chunks.append(choice.delta.content)
            if choice.finish_reason:
                finish_reason = choice.finish_reason

        return GenerationResult(
            content="".join(chunks),
            model=model,
            prompt_tokens=usage.prompt_tokens if usage else None,
            completion_tokens=usage.completion_tokens if usage else None,
            finish_reason=finish_reason,
        )

    @staticmethod
    def _parse_response(model: str, response: Any) -> GenerationResult:
        if not getattr(response, "choices", None):
            raise V0ResponseError("v0 API returned a response without choices")

        choice = response.choices[0]
        usage = getattr(response, "usage", None)

        return GenerationResult(
            content=choice.message.content or "",
            model=getattr(response, "model", None) or model,
            prompt_tokens=usage.prompt_tokens if usage else None,
            completion_tokens=usage.completion_tokens if usage else None,
            finish_reason=choice.finish_reason,
        )
