"""Provider adapter interface and data classes.

All provider adapters implement the ``ModelProvider`` protocol.
Data classes are immutable where possible (frozen dataclasses with slots).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from calcchat.tools.translate import ModelToolSchema


@dataclass(frozen=True, slots=True)
class PromptMessage:
    """A single message in the conversation."""

    role: str  # "user", "assistant"
    content: str


@dataclass(frozen=True, slots=True)
class TokenUsage:
    """Token counts from a single model call."""

    input_tokens: int
    output_tokens: int


@dataclass(frozen=True, slots=True)
class TextSegment:
    """Plain text emitted by the model."""

    text: str


@dataclass(frozen=True, slots=True)
class ToolUseSegment:
    """A tool call emitted by the model."""

    id: str
    name: str
    input: dict[str, Any] = field(default_factory=dict)


Segment = TextSegment | ToolUseSegment


@dataclass(slots=True)
class ModelResponse:
    """Complete response from a model call.

    ``segments`` keeps text and tool calls in the order the model
    produced them.
    """

    segments: list[Segment]
    model_id: str
    usage: TokenUsage
    finish_reason: str  # "end_turn", "max_tokens", "tool_use"
    latency_ms: float  # Wall-clock time for the call


@runtime_checkable
class ModelProvider(Protocol):
    """Protocol that all provider adapters must satisfy.

    Implementations are stateless: they hold connection config but no
    conversation state. The chat session manages all state.
    """

    @property
    def provider_id(self) -> str:
        """Unique identifier for this provider (e.g. 'anthropic')."""
        ...

    async def send(
        self,
        messages: list[PromptMessage],
        model_id: str,
        *,
        max_tokens: int = 1024,
        tools: list[ModelToolSchema] | None = None,
        tool_choice: str = "auto",
    ) -> ModelResponse:
        """Send a prompt and wait for the complete response.

        Args:
            messages: Conversation so far, oldest first.
            model_id: Model to use.
            max_tokens: Max output tokens.
            tools: Tool schemas the model may call.
            tool_choice: Tool selection mode; ``"auto"`` lets the model
                pick zero or more tools.

        Raises ProviderError on failure.
        """
        ...
