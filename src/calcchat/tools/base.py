"""Tool data types shared by the client, translator, and chat session.

Defines the tool definitions fetched from the tool server, the tool
calls a model requests, and the results that come back.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

NO_RESULT_TEXT = "No result returned from tool"


@dataclass(frozen=True, slots=True)
class ToolDefinition:
    """Catalog entry advertised by the tool server."""

    name: str
    description: str
    input_schema: dict[str, Any]


@dataclass(frozen=True, slots=True)
class ToolCall:
    """A tool invocation requested by a model."""

    id: str
    name: str
    arguments: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ToolResult:
    """Outcome of invoking a tool.

    ``content`` is the rendered success text, or the error message when
    ``is_error`` is set.  ``error_code`` carries the JSON-RPC code if the
    server reported one.
    """

    content: str
    is_error: bool = False
    error_code: int | None = None
