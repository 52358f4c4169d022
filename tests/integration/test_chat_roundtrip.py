"""Integration test: a chat turn through the real calculator server.

The model is scripted; everything between it and the arithmetic
(catalog fetch, translation, tool calls, reply assembly) is real.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from mcp.shared.memory import create_connected_server_and_client_session

from calcchat.chat.session import ChatSession
from calcchat.mcp.client import ToolClient
from calcchat.mcp.server import server
from tests.fixtures.providers import ScriptedProvider, text, tool_use

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


@asynccontextmanager
async def _connected() -> AsyncIterator[ToolClient]:
    async with create_connected_server_and_client_session(server) as session:
        yield ToolClient(session=session)


class TestChatRoundTrip:
    async def test_square_with_preamble(self) -> None:
        provider = ScriptedProvider(
            [[text("The answer is:"), tool_use("square", value=4)]]
        )
        async with _connected() as tools:
            reply = await ChatSession(provider, tools).send("What is 4 squared?")
        assert reply == "The answer is:\n\nCalculation result: 4² = 16"

    async def test_division_by_zero_folded_into_reply(self) -> None:
        provider = ScriptedProvider([[tool_use("divide", a=10, b=0)]])
        async with _connected() as tools:
            session = ChatSession(provider, tools)
            reply = await session.send("What is 10 divided by 0?")
        assert reply.startswith("\n\nError calling tool divide: ")
        assert "Division by zero is not allowed" in reply
        assert [m.role for m in session.messages] == ["user", "assistant"]

    async def test_model_sees_translated_catalog(self) -> None:
        provider = ScriptedProvider()
        async with _connected() as tools:
            await ChatSession(provider, tools).send("hi")
        sent = provider.call_log[0]["tools"]
        assert {t["name"] for t in sent} == {
            "add",
            "subtract",
            "multiply",
            "divide",
            "square",
            "sqrt",
        }
        assert all("input_schema" in t for t in sent)

    async def test_multiple_calls_in_one_turn(self) -> None:
        provider = ScriptedProvider(
            [
                [
                    tool_use("add", "t1", a=5, b=3),
                    text(" and "),
                    tool_use("sqrt", "t2", value=16),
                ]
            ]
        )
        async with _connected() as tools:
            session = ChatSession(provider, tools)
            reply = await session.send("5 + 3 and sqrt 16")
        assert reply == (
            "\n\nCalculation result: 5 + 3 = 8 and \n\nCalculation result: √16 = 4"
        )
        assert [r.call.id for r in session.last_tool_calls] == ["t1", "t2"]
