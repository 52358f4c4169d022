"""Chat session: the agent loop that ties the model to the tool server.

One call to :meth:`ChatSession.send` is one conversation turn:

1. Append the user message to history
2. Fetch the tool catalog and translate it to provider schemas
3. Send history + tools to the model with automatic tool choice
4. Walk the response segments in order
5. Append text verbatim; invoke each tool call and append its result
6. Append the assembled reply to history and return it

A provider failure or a failed catalog fetch aborts the turn and
propagates; history keeps the user message but gains no assistant
message.  A failed tool call is folded into the reply instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from calcchat.core.errors import TransportError
from calcchat.providers.base import PromptMessage, TextSegment
from calcchat.tools.base import ToolCall, ToolResult
from calcchat.tools.translate import translate_catalog

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from calcchat.providers.base import ModelProvider, Segment
    from calcchat.tools.base import ToolDefinition

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-3-5-sonnet-20241022"
RESULT_PREFIX = "\n\nCalculation result: "


class ToolInvoker(Protocol):
    """What the session needs from a tool client."""

    async def list_tools(self) -> list[ToolDefinition]: ...

    async def invoke_tool(
        self, name: str, arguments: Mapping[str, Any]
    ) -> ToolResult: ...


@dataclass(frozen=True, slots=True)
class ToolCallRecord:
    """A tool call made during a turn and what it returned."""

    call: ToolCall
    result: ToolResult = field(repr=False)


class ChatSession:
    """Owns the conversation history for one chat session."""

    def __init__(
        self,
        provider: ModelProvider,
        tools: ToolInvoker,
        *,
        model_id: str = DEFAULT_MODEL,
        max_tokens: int = 1024,
        truncate: Callable[[list[PromptMessage]], list[PromptMessage]] | None = None,
    ) -> None:
        self._provider = provider
        self._tools = tools
        self._model_id = model_id
        self._max_tokens = max_tokens
        self._truncate = truncate
        self._history: list[PromptMessage] = []
        self.last_tool_calls: list[ToolCallRecord] = []

    @property
    def messages(self) -> tuple[PromptMessage, ...]:
        """Read-only view of the conversation history."""
        return tuple(self._history)

    async def send(self, user_message: str) -> str:
        """Run one conversation turn and return the assistant's reply.

        Raises:
            TransportError: The tool catalog could not be fetched.
            ProviderError: The model call failed or returned garbage.
        """
        self._history.append(PromptMessage(role="user", content=user_message))

        definitions = await self._tools.list_tools()
        tools = translate_catalog(definitions)

        outgoing = list(self._history)
        if self._truncate is not None:
            outgoing = self._truncate(outgoing)

        response = await self._provider.send(
            outgoing,
            self._model_id,
            max_tokens=self._max_tokens,
            tools=tools or None,
            tool_choice="auto",
        )
        logger.info(
            "Model %s stopped with %s after %.0fms (%d in / %d out tokens)",
            response.model_id,
            response.finish_reason,
            response.latency_ms,
            response.usage.input_tokens,
            response.usage.output_tokens,
        )

        reply, records = await self._resolve(response.segments)

        self._history.append(PromptMessage(role="assistant", content=reply))
        self.last_tool_calls = records
        return reply

    async def _resolve(
        self, segments: Sequence[Segment]
    ) -> tuple[str, list[ToolCallRecord]]:
        parts: list[str] = []
        records: list[ToolCallRecord] = []
        for segment in segments:
            if isinstance(segment, TextSegment):
                parts.append(segment.text)
                continue

            call = ToolCall(id=segment.id, name=segment.name, arguments=segment.input)
            result = await self._invoke(call)
            records.append(ToolCallRecord(call=call, result=result))
            if result.is_error:
                parts.append(f"\n\nError calling tool {call.name}: {result.content}")
            else:
                parts.append(f"{RESULT_PREFIX}{result.content}")
        return "".join(parts), records

    async def _invoke(self, call: ToolCall) -> ToolResult:
        logger.info(
            "Calling tool: %s (id: %s) with input: %r",
            call.name,
            call.id,
            call.arguments,
        )
        try:
            result = await self._tools.invoke_tool(call.name, call.arguments)
        except TransportError as e:
            logger.error("Error calling tool %s: %s", call.name, e)
            return ToolResult(content=str(e), is_error=True)
        if result.is_error:
            logger.error("Error calling tool %s: %s", call.name, result.content)
        else:
            logger.info("Tool result: %s", result.content)
        return result
