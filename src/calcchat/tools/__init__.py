"""Tool types and the provider schema translator.

Tool definitions come from the calculator server's catalog; the
translator turns them into the shape the model provider expects.
"""

from calcchat.tools.base import NO_RESULT_TEXT, ToolCall, ToolDefinition, ToolResult
from calcchat.tools.translate import ModelToolSchema, to_model_schema, translate_catalog

__all__ = [
    "NO_RESULT_TEXT",
    "ModelToolSchema",
    "ToolCall",
    "ToolDefinition",
    "ToolResult",
    "to_model_schema",
    "translate_catalog",
]
