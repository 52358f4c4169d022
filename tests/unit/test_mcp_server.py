"""Tests for the calculator MCP server."""

from __future__ import annotations

import asyncio
import math

import pytest
from mcp.shared.exceptions import McpError
from mcp.types import (
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    CallToolRequest,
    CallToolRequestParams,
)

from calcchat.core.errors import (
    InvalidParamsError,
    ToolExecutionError,
    ToolNotFoundError,
)
from calcchat.mcp.server import (
    CATALOG,
    _handle_call_tool,
    call_tool,
    dispatch,
    get_tools,
    list_tools,
    server,
)

# ── Tool schemas ─────────────────────────────────────────────────


class TestToolSchemas:
    """Verify that the catalog is correct."""

    def test_six_tools(self) -> None:
        assert len(get_tools()) == 6

    def test_tool_names(self) -> None:
        names = {t.name for t in get_tools()}
        assert names == {"add", "subtract", "multiply", "divide", "square", "sqrt"}

    def test_names_unique(self) -> None:
        names = [t.name for t in CATALOG]
        assert len(names) == len(set(names))

    def test_binary_schema(self) -> None:
        divide = next(t for t in get_tools() if t.name == "divide")
        assert divide.description == "Divide first number by second number"
        schema = divide.inputSchema
        assert schema["type"] == "object"
        assert schema["required"] == ["a", "b"]
        assert schema["properties"]["a"]["type"] == "number"
        assert schema["properties"]["b"]["description"] == "Divisor"

    def test_unary_schema(self) -> None:
        sqrt = next(t for t in get_tools() if t.name == "sqrt")
        assert sqrt.inputSchema["required"] == ["value"]
        assert list(sqrt.inputSchema["properties"]) == ["value"]

    def test_catalog_is_not_mutated_through_copies(self) -> None:
        tools = get_tools()
        tools[0].inputSchema["required"].append("c")
        assert "c" not in CATALOG[0].inputSchema["required"]

    async def test_list_tools_idempotent(self) -> None:
        first = await list_tools()
        second = await list_tools()
        assert [t.model_dump() for t in first] == [t.model_dump() for t in second]


# ── dispatch ─────────────────────────────────────────────────────


class TestDispatch:
    def test_add_round_trip(self) -> None:
        result = dispatch("add", {"a": 5, "b": 3})
        assert len(result) == 1
        assert result[0].type == "text"
        assert result[0].text == "5 + 3 = 8"

    def test_fractional_result(self) -> None:
        assert dispatch("divide", {"a": 7, "b": 2})[0].text == "7 ÷ 2 = 3.5"

    def test_square(self) -> None:
        assert dispatch("square", {"value": 4})[0].text == "4² = 16"

    def test_extra_arguments_ignored(self) -> None:
        assert dispatch("sqrt", {"value": 9, "extra": "x"})[0].text == "√9 = 3"

    def test_unknown_tool(self) -> None:
        with pytest.raises(ToolNotFoundError) as exc_info:
            dispatch("modulo", {"a": 1, "b": 2})
        assert exc_info.value.code == METHOD_NOT_FOUND
        assert str(exc_info.value) == "Tool not found: modulo"

    def test_missing_parameter(self) -> None:
        with pytest.raises(InvalidParamsError, match="Missing required parameter 'b'"):
            dispatch("add", {"a": 1})

    @pytest.mark.parametrize("bad", ["5", None, True, {"x": 1}])
    def test_wrong_type(self, bad: object) -> None:
        with pytest.raises(InvalidParamsError, match="must be a number") as exc_info:
            dispatch("multiply", {"a": bad, "b": 2})
        assert exc_info.value.code == INVALID_PARAMS

    def test_none_arguments_means_missing(self) -> None:
        with pytest.raises(InvalidParamsError):
            dispatch("square", None)

    def test_non_object_arguments(self) -> None:
        with pytest.raises(InvalidParamsError, match="must be an object"):
            dispatch("square", [4])  # type: ignore[arg-type]

    def test_division_by_zero_becomes_protocol_error(self) -> None:
        with pytest.raises(ToolExecutionError) as exc_info:
            dispatch("divide", {"a": 10, "b": 0})
        assert exc_info.value.message == "Division by zero is not allowed"
        assert exc_info.value.code == INVALID_PARAMS

    def test_negative_sqrt(self) -> None:
        with pytest.raises(ToolExecutionError, match="negative number: -4.0"):
            dispatch("sqrt", {"value": -4})

    def test_nan_is_domain_error_not_param_error(self) -> None:
        with pytest.raises(ToolExecutionError, match="NaN values are not allowed"):
            dispatch("add", {"a": math.nan, "b": 1})

    def test_concurrent_dispatch(self) -> None:
        async def _run() -> list[str]:
            results = await asyncio.gather(
                *(asyncio.to_thread(dispatch, "add", {"a": i, "b": i}) for i in range(20))
            )
            return [r[0].text for r in results]

        texts = asyncio.run(_run())
        assert texts == [f"{i} + {i} = {2 * i}" for i in range(20)]


# ── call_tool handler ────────────────────────────────────────────


class TestCallToolHandler:
    async def test_success(self) -> None:
        result = await call_tool("subtract", {"a": 5, "b": 3})
        assert result[0].text == "5 - 3 = 2"

    async def test_unknown_tool_raises_mcp_error(self) -> None:
        with pytest.raises(McpError) as exc_info:
            await call_tool("nope", {})
        assert exc_info.value.error.code == METHOD_NOT_FOUND
        assert exc_info.value.error.message == "Tool not found: nope"

    async def test_domain_error_raises_mcp_error(self) -> None:
        with pytest.raises(McpError) as exc_info:
            await call_tool("divide", {"a": 1, "b": 0})
        assert exc_info.value.error.code == INVALID_PARAMS
        assert "Division by zero" in exc_info.value.error.message
        assert "DivisionByZeroError" not in exc_info.value.error.message


# ── tools/call request handler ───────────────────────────────────


def _call_request(name: str, arguments: dict[str, object]) -> CallToolRequest:
    return CallToolRequest(
        method="tools/call",
        params=CallToolRequestParams(name=name, arguments=arguments),
    )


class TestCallToolRequestHandler:
    def test_registered_on_server(self) -> None:
        assert server.request_handlers[CallToolRequest] is _handle_call_tool

    async def test_success_result(self) -> None:
        result = await _handle_call_tool(_call_request("add", {"a": 5, "b": 3}))
        assert result.root.isError is False
        assert result.root.content[0].text == "5 + 3 = 8"

    async def test_unknown_tool_keeps_code(self) -> None:
        with pytest.raises(McpError) as exc_info:
            await _handle_call_tool(_call_request("modulo", {"a": 1, "b": 2}))
        assert exc_info.value.error.code == METHOD_NOT_FOUND

    async def test_domain_error_keeps_code(self) -> None:
        with pytest.raises(McpError) as exc_info:
            await _handle_call_tool(_call_request("divide", {"a": 1, "b": 0}))
        assert exc_info.value.error.code == INVALID_PARAMS
        assert exc_info.value.error.message == "Division by zero is not allowed"
