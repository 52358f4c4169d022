"""Translate tool definitions into the model provider's tool schema."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypedDict

if TYPE_CHECKING:
    from collections.abc import Iterable

    from calcchat.tools.base import ToolDefinition


class ModelToolSchema(TypedDict):
    """Tool entry in a Messages API request."""

    name: str
    description: str
    input_schema: dict[str, Any]


def to_model_schema(definition: ToolDefinition) -> ModelToolSchema:
    """Map one tool definition to the provider format. No validation."""
    return {
        "name": definition.name,
        "description": definition.description,
        "input_schema": definition.input_schema,
    }


def translate_catalog(definitions: Iterable[ToolDefinition]) -> list[ModelToolSchema]:
    return [to_model_schema(d) for d in definitions]
