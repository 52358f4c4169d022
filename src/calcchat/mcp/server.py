"""MCP server exposing the calculator operations as tools."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError
from mcp.types import (
    CallToolRequest,
    CallToolResult,
    ErrorData,
    ServerResult,
    TextContent,
    Tool,
)

from calcchat.core.errors import (
    InvalidParamsError,
    OperationError,
    ToolExecutionError,
    ToolNotFoundError,
    ToolProtocolError,
)
from calcchat.engine import OPERATIONS, Operation, OperationEngine

logger = logging.getLogger(__name__)

INSTRUCTIONS = (
    "A calculator that can perform basic mathematical operations including "
    "addition, subtraction, multiplication, division, square, and square root."
)

server = Server("calcchat-calculator", instructions=INSTRUCTIONS)

_engine = OperationEngine()


def _input_schema(op: Operation) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            spec.name: {"type": "number", "description": spec.description}
            for spec in op.operands
        },
        "required": [spec.name for spec in op.operands],
    }


CATALOG: tuple[Tool, ...] = tuple(
    Tool(name=op.tool_name, description=op.description, inputSchema=_input_schema(op))
    for op in Operation
)


def get_tools() -> list[Tool]:
    """Return copies of the catalog so callers cannot mutate it."""
    return [tool.model_copy(deep=True) for tool in CATALOG]


def _decode_arguments(op: Operation, arguments: object) -> tuple[float, ...]:
    """Pull the operation's parameters out of a tool-call argument object."""
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, Mapping):
        msg = f"Arguments for {op.tool_name} must be an object"
        raise InvalidParamsError(msg)

    values: list[float] = []
    for spec in op.operands:
        if spec.name not in arguments:
            msg = f"Missing required parameter '{spec.name}' for {op.tool_name}"
            raise InvalidParamsError(msg)
        value = arguments[spec.name]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            msg = (
                f"Parameter '{spec.name}' for {op.tool_name} must be a number, "
                f"got {type(value).__name__}"
            )
            raise InvalidParamsError(msg)
        values.append(float(value))
    return tuple(values)


def dispatch(name: str, arguments: Mapping[str, Any] | None) -> list[TextContent]:
    """Run the named tool and render its result.

    Raises:
        ToolNotFoundError: *name* is not in the catalog.
        InvalidParamsError: A parameter is missing or not a number.
        ToolExecutionError: The operation failed with a domain error.
    """
    op = OPERATIONS.get(name)
    if op is None:
        logger.warning("Unknown tool requested: %s", name)
        raise ToolNotFoundError(name)

    operands = _decode_arguments(op, arguments)
    try:
        result = _engine.execute(op, *operands)
    except OperationError as e:
        logger.error("Calculator error in %s: %s", op.tool_name, e)
        raise ToolExecutionError(str(e)) from e

    return [TextContent(type="text", text=op.render(operands, result))]


@server.list_tools()  # type: ignore[no-untyped-call, untyped-decorator]
async def list_tools() -> list[Tool]:
    """List available MCP tools."""
    return get_tools()


async def call_tool(
    name: str, arguments: Mapping[str, Any] | None
) -> list[TextContent]:
    """Run a tool, converting protocol errors to JSON-RPC errors."""
    try:
        return dispatch(name, arguments)
    except ToolProtocolError as e:
        raise McpError(ErrorData(code=e.code, message=e.message)) from e


async def _handle_call_tool(req: CallToolRequest) -> ServerResult:
    content = await call_tool(req.params.name, req.params.arguments)
    return ServerResult(CallToolResult(content=content, isError=False))


# Registered directly so McpError reaches the client as a JSON-RPC error.
server.request_handlers[CallToolRequest] = _handle_call_tool


async def run_server() -> None:
    """Serve the calculator on stdio until the host process ends it."""
    logger.info("Starting calculator MCP server")
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )
