"""MCP client for the calculator tool server.

Launches the server as a subprocess, speaks MCP over its stdin/stdout,
and exposes ``list_tools`` / ``invoke_tool`` to the chat session.
Protocol-level failures reported by the server come back as error
:class:`~calcchat.tools.base.ToolResult` values; a broken channel
raises :class:`~calcchat.core.errors.TransportError`.
"""

from __future__ import annotations

import contextlib
import logging
from contextlib import AsyncExitStack
from typing import TYPE_CHECKING, Any

import anyio
from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client
from mcp.shared.exceptions import McpError
from mcp.types import CONNECTION_CLOSED, TextContent
from pydantic import ValidationError

from calcchat.core.errors import ServerConnectionError, TransportError
from calcchat.tools.base import NO_RESULT_TEXT, ToolDefinition, ToolResult

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from types import TracebackType

    from mcp.types import CallToolResult

logger = logging.getLogger(__name__)

# Raised by the session's memory streams once the subprocess is gone.
_CHANNEL_ERRORS: tuple[type[Exception], ...] = (
    anyio.ClosedResourceError,
    anyio.BrokenResourceError,
    anyio.EndOfStream,
    OSError,
    ValidationError,
)


class ToolClient:
    """Connection to a single calculator tool server.

    Pass ``session`` to wrap an already-initialised
    :class:`mcp.ClientSession` instead of spawning a subprocess.
    """

    def __init__(
        self,
        command: str | None = None,
        args: Sequence[str] = (),
        env: Mapping[str, str] | None = None,
        *,
        session: ClientSession | None = None,
    ) -> None:
        self._params = (
            StdioServerParameters(
                command=command,
                args=list(args),
                env=dict(env) if env is not None else None,
            )
            if command is not None
            else None
        )
        self._session = session
        self._stack: AsyncExitStack | None = None
        self._tools: list[ToolDefinition] | None = None

    @property
    def connected(self) -> bool:
        return self._session is not None

    async def connect(self) -> None:
        """Spawn the server and perform the MCP handshake.

        Raises:
            ServerConnectionError: If the process cannot be started or
                does not complete the handshake.
        """
        if self._session is not None:
            return
        if self._params is None:
            msg = "No tool server command configured"
            raise ServerConnectionError(msg)

        stack = AsyncExitStack()
        try:
            read, write = await stack.enter_async_context(stdio_client(self._params))
            session = await stack.enter_async_context(ClientSession(read, write))
            init = await session.initialize()
        except Exception as e:
            with contextlib.suppress(Exception):
                await stack.aclose()
            msg = f"Could not connect to tool server {self._params.command!r}: {e}"
            raise ServerConnectionError(msg) from e

        self._stack = stack
        self._session = session
        logger.info(
            "Connected to tool server %s %s",
            init.serverInfo.name,
            init.serverInfo.version,
        )

    async def close(self) -> None:
        """Shut the session down and terminate the subprocess."""
        stack, self._stack = self._stack, None
        self._session = None
        self._tools = None
        if stack is not None:
            await stack.aclose()

    async def __aenter__(self) -> ToolClient:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    def _require_session(self) -> ClientSession:
        if self._session is None:
            msg = "Tool client is not connected"
            raise TransportError(msg)
        return self._session

    async def list_tools(self, *, refresh: bool = False) -> list[ToolDefinition]:
        """Return the server's tool catalog.

        Fetched on first call and cached; ``refresh=True`` re-fetches.

        Raises:
            TransportError: If the catalog cannot be fetched.
        """
        if self._tools is not None and not refresh:
            return list(self._tools)

        session = self._require_session()
        try:
            result = await session.list_tools()
        except McpError as e:
            msg = f"Tool catalog fetch failed: {e.error.message}"
            raise TransportError(msg) from e
        except _CHANNEL_ERRORS as e:
            msg = f"Tool server channel failed: {e!r}"
            raise TransportError(msg) from e

        self._tools = [
            ToolDefinition(
                name=tool.name,
                description=tool.description or "",
                input_schema=dict(tool.inputSchema),
            )
            for tool in result.tools
        ]
        logger.info("Retrieved %d tools from tool server", len(self._tools))
        return list(self._tools)

    async def invoke_tool(self, name: str, arguments: Mapping[str, Any]) -> ToolResult:
        """Call a tool on the server.

        Server-reported failures (unknown tool, bad parameters, domain
        errors) are returned as ``ToolResult(is_error=True)``.

        Raises:
            TransportError: If the channel is closed or the response
                cannot be read.
        """
        session = self._require_session()
        logger.info("Calling tool %s with %r", name, dict(arguments))
        try:
            result = await session.call_tool(name, dict(arguments))
        except McpError as e:
            if e.error.code == CONNECTION_CLOSED:
                msg = f"Tool server closed the connection: {e.error.message}"
                raise TransportError(msg) from e
            logger.warning("Tool %s failed: %s", name, e.error.message)
            return ToolResult(
                content=e.error.message,
                is_error=True,
                error_code=e.error.code,
            )
        except _CHANNEL_ERRORS as e:
            msg = f"Tool server channel failed: {e!r}"
            raise TransportError(msg) from e

        return _to_tool_result(name, result)


def _to_tool_result(name: str, result: CallToolResult) -> ToolResult:
    """Keep the first content fragment; an empty list is not an error."""
    if not result.content:
        logger.warning("Tool %s returned no content", name)
        return ToolResult(content=NO_RESULT_TEXT, is_error=bool(result.isError))

    first = result.content[0]
    text = first.text if isinstance(first, TextContent) else first.model_dump_json()
    if result.isError:
        logger.warning("Tool %s reported an error: %s", name, text)
        return ToolResult(content=text, is_error=True)
    return ToolResult(content=text)
