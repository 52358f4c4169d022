"""Model provider adapters."""

from calcchat.providers.base import (
    ModelProvider,
    ModelResponse,
    PromptMessage,
    Segment,
    TextSegment,
    TokenUsage,
    ToolUseSegment,
)

__all__ = [
    "ModelProvider",
    "ModelResponse",
    "PromptMessage",
    "Segment",
    "TextSegment",
    "TokenUsage",
    "ToolUseSegment",
]
