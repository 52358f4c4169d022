"""Anthropic (Claude) provider adapter."""

from __future__ import annotations

import contextlib
import logging
import time
from typing import TYPE_CHECKING, Any

import anthropic

from calcchat.core.errors import (
    MalformedResponseError,
    ModelNotFoundError,
    ProviderAuthError,
    ProviderError,
    ProviderOverloadedError,
    ProviderRateLimitError,
    ProviderTimeoutError,
)
from calcchat.providers.base import (
    ModelResponse,
    Segment,
    TextSegment,
    TokenUsage,
    ToolUseSegment,
)

if TYPE_CHECKING:
    from calcchat.providers.base import PromptMessage
    from calcchat.tools.translate import ModelToolSchema

logger = logging.getLogger(__name__)

PROVIDER_ID = "anthropic"


def _map_error(e: anthropic.APIError) -> Exception:
    """Map Anthropic SDK errors to the calcchat error hierarchy."""
    if isinstance(e, anthropic.AuthenticationError):
        return ProviderAuthError(PROVIDER_ID, str(e))
    if isinstance(e, anthropic.RateLimitError):
        retry_after = None
        if hasattr(e, "response") and e.response is not None:
            raw = e.response.headers.get("retry-after")
            if raw is not None:
                with contextlib.suppress(ValueError):
                    retry_after = float(raw)
        return ProviderRateLimitError(PROVIDER_ID, retry_after=retry_after)
    if isinstance(e, anthropic.APITimeoutError):
        return ProviderTimeoutError(PROVIDER_ID, str(e))
    if isinstance(e, anthropic.APIConnectionError):
        return ProviderError(PROVIDER_ID, f"Connection failed: {e}")
    if isinstance(e, anthropic.InternalServerError):
        return ProviderOverloadedError(PROVIDER_ID, str(e))
    if isinstance(e, anthropic.NotFoundError):
        return ModelNotFoundError(PROVIDER_ID, str(e))
    # Fallback for unknown API errors
    return ProviderOverloadedError(PROVIDER_ID, str(e))


def _build_messages(messages: list[PromptMessage]) -> list[dict[str, str]]:
    return [{"role": m.role, "content": m.content} for m in messages]


def _parse_segments(response: Any) -> list[Segment]:
    """Convert response content blocks to ordered segments."""
    content = getattr(response, "content", None)
    if not isinstance(content, list):
        msg = "Response has no content list"
        raise MalformedResponseError(PROVIDER_ID, msg)

    segments: list[Segment] = []
    for block in content:
        block_type = getattr(block, "type", None)
        if block_type == "text":
            segments.append(TextSegment(text=block.text))
        elif block_type == "tool_use":
            if not isinstance(block.input, dict):
                msg = f"Tool use block {block.id} has non-object input"
                raise MalformedResponseError(PROVIDER_ID, msg)
            segments.append(
                ToolUseSegment(id=block.id, name=block.name, input=dict(block.input))
            )
        else:
            logger.debug("Skipping %s content block", block_type)
    return segments


class AnthropicProvider:
    """Provider adapter for Anthropic's Claude models."""

    def __init__(
        self,
        api_key: str | None = None,
        *,
        base_url: str | None = None,
        client: anthropic.AsyncAnthropic | None = None,
    ) -> None:
        self._client = client or anthropic.AsyncAnthropic(
            api_key=api_key, base_url=base_url
        )

    @property
    def provider_id(self) -> str:
        return PROVIDER_ID

    async def send(
        self,
        messages: list[PromptMessage],
        model_id: str,
        *,
        max_tokens: int = 1024,
        tools: list[ModelToolSchema] | None = None,
        tool_choice: str = "auto",
    ) -> ModelResponse:
        kwargs: dict[str, Any] = {
            "model": model_id,
            "max_tokens": max_tokens,
            "messages": _build_messages(messages),
        }
        if tools:
            kwargs["tools"] = tools
            kwargs["tool_choice"] = {"type": tool_choice}

        start = time.monotonic()
        try:
            response = await self._client.messages.create(**kwargs)
        except anthropic.APIError as e:
            raise _map_error(e) from e

        latency_ms = (time.monotonic() - start) * 1000
        segments = _parse_segments(response)

        try:
            usage = TokenUsage(
                input_tokens=response.usage.input_tokens,
                output_tokens=response.usage.output_tokens,
            )
        except AttributeError as e:
            msg = "Response has no usage block"
            raise MalformedResponseError(PROVIDER_ID, msg) from e

        logger.info(
            "Model %s answered with %d segment(s) in %.0fms",
            model_id,
            len(segments),
            latency_ms,
        )
        return ModelResponse(
            segments=segments,
            model_id=model_id,
            usage=usage,
            finish_reason=getattr(response, "stop_reason", None) or "end_turn",
            latency_ms=latency_ms,
        )
