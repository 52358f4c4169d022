"""Main CLI application.

Click commands for calcchat: chat, ask, tools, serve.
"""

from __future__ import annotations

import asyncio
import sys
from typing import TYPE_CHECKING, Any

import click

from calcchat import __version__
from calcchat.config.loader import load_config, require_api_key
from calcchat.core.errors import CalcChatError, ConfigError
from calcchat.logging_setup import configure_logging

if TYPE_CHECKING:
    from collections.abc import Callable

    from calcchat.chat.session import ChatSession
    from calcchat.cli.display import ChatDisplay
    from calcchat.config.schema import CalcChatConfig
    from calcchat.mcp.client import ToolClient
    from calcchat.providers.anthropic import AnthropicProvider
    from calcchat.tools.base import ToolDefinition

EXIT_WORDS = frozenset({"quit", "exit"})


# ── Helpers ──────────────────────────────────────────────────────


def _error(msg: str) -> None:
    """Print an error message to stderr and exit."""
    click.echo(f"Error: {msg}", err=True)
    sys.exit(1)


def _load_config(
    config_path: str | None, flags: dict[str, dict[str, Any]] | None = None
) -> CalcChatConfig:
    """Load config with user-friendly error handling."""
    try:
        config = load_config(path=config_path, flags=flags)
    except ConfigError as e:
        _error(str(e))
        raise  # unreachable, keeps mypy happy
    configure_logging(config.logging)
    return config


def _flag_settings(
    *,
    api_key: str | None = None,
    model: str | None = None,
    server_command: str | None = None,
    server_args: tuple[str, ...] = (),
) -> dict[str, dict[str, Any]]:
    """Config sections for the flags that were given."""
    flags: dict[str, dict[str, Any]] = {}
    if api_key:
        flags["provider"] = {"api_key": api_key}
    if model:
        flags["general"] = {"model": model}
    if server_command:
        flags["tool_server"] = {"command": server_command, "args": list(server_args)}
    return flags


def _make_provider(config: CalcChatConfig) -> AnthropicProvider:
    from calcchat.providers.anthropic import AnthropicProvider

    return AnthropicProvider(
        api_key=require_api_key(config),
        base_url=config.provider.base_url,
    )


def _make_tool_client(config: CalcChatConfig) -> ToolClient:
    from calcchat.mcp.client import ToolClient

    server = config.tool_server
    return ToolClient(server.command, server.args, server.env)


def _make_session(
    config: CalcChatConfig,
    provider: AnthropicProvider,
    tools: ToolClient,
) -> ChatSession:
    from calcchat.chat.session import ChatSession

    return ChatSession(
        provider,
        tools,
        model_id=config.general.model,
        max_tokens=config.general.max_tokens,
    )


def _server_options(func: Callable[..., object]) -> Callable[..., object]:
    func = click.option(
        "--server-arg",
        "server_args",
        multiple=True,
        help="Argument for --server-command (repeatable).",
    )(func)
    return click.option(
        "--server-command",
        default=None,
        help="Tool server executable (overrides config).",
    )(func)


# ── CLI group ────────────────────────────────────────────────────


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="calcchat")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True),
    default=None,
    help="Path to config file.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str | None) -> None:
    """calcchat - Chat with a model that calculates through a tool server."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ── chat ─────────────────────────────────────────────────────────


@cli.command()
@click.option("--api-key", default=None, help="Anthropic API key (overrides env).")
@click.option("--model", default=None, help="Model to use (overrides config).")
@_server_options
@click.pass_context
def chat(
    ctx: click.Context,
    api_key: str | None,
    model: str | None,
    server_command: str | None,
    server_args: tuple[str, ...],
) -> None:
    """Start an interactive chat session."""
    config = _load_config(
        ctx.obj["config_path"],
        _flag_settings(
            api_key=api_key,
            model=model,
            server_command=server_command,
            server_args=server_args,
        ),
    )
    try:
        require_api_key(config)
        asyncio.run(_chat_async(config))
    except CalcChatError as e:
        _error(str(e))


async def _chat_async(config: CalcChatConfig) -> None:
    """Connect to the tool server and run the read-line loop."""
    from calcchat.cli.display import ChatDisplay

    provider = _make_provider(config)
    async with _make_tool_client(config) as tools:
        session = _make_session(config, provider, tools)
        await run_chat_loop(session, ChatDisplay())


async def run_chat_loop(session: ChatSession, display: ChatDisplay) -> None:
    """Read lines until quit/exit or end of input, one turn per line.

    A failed turn is reported and the loop continues; the session keeps
    the user's message so the next turn has full context.
    """
    display.show_banner()
    while True:
        try:
            line = await asyncio.to_thread(display.prompt)
        except EOFError:
            break

        text = line.strip()
        if not text:
            continue
        if text in EXIT_WORDS:
            display.goodbye()
            break

        try:
            reply = await session.send(text)
        except CalcChatError as e:
            display.show_error(str(e))
            continue

        display.show_tool_calls(session.last_tool_calls)
        display.show_reply(reply)


# ── ask ──────────────────────────────────────────────────────────


@cli.command()
@click.argument("question")
@click.option("--api-key", default=None, help="Anthropic API key (overrides env).")
@click.option("--model", default=None, help="Model to use (overrides config).")
@_server_options
@click.pass_context
def ask(
    ctx: click.Context,
    question: str,
    api_key: str | None,
    model: str | None,
    server_command: str | None,
    server_args: tuple[str, ...],
) -> None:
    """Ask a single QUESTION and print the reply."""
    config = _load_config(
        ctx.obj["config_path"],
        _flag_settings(
            api_key=api_key,
            model=model,
            server_command=server_command,
            server_args=server_args,
        ),
    )
    try:
        require_api_key(config)
        reply = asyncio.run(_ask_async(question, config))
    except CalcChatError as e:
        _error(str(e))
        return  # unreachable

    click.echo(reply)


async def _ask_async(question: str, config: CalcChatConfig) -> str:
    provider = _make_provider(config)
    async with _make_tool_client(config) as tools:
        session = _make_session(config, provider, tools)
        return await session.send(question)


# ── tools ────────────────────────────────────────────────────────


@cli.command()
@_server_options
@click.pass_context
def tools(
    ctx: click.Context,
    server_command: str | None,
    server_args: tuple[str, ...],
) -> None:
    """List the tools the calculator server advertises."""
    from calcchat.cli.display import ChatDisplay

    config = _load_config(
        ctx.obj["config_path"],
        _flag_settings(server_command=server_command, server_args=server_args),
    )
    try:
        definitions = asyncio.run(_tools_async(config))
    except CalcChatError as e:
        _error(str(e))
        return  # unreachable

    ChatDisplay().show_tools(definitions)


async def _tools_async(config: CalcChatConfig) -> list[ToolDefinition]:
    async with _make_tool_client(config) as client:
        return await client.list_tools()


# ── serve ────────────────────────────────────────────────────────


@cli.command()
@click.pass_context
def serve(ctx: click.Context) -> None:
    """Run the calculator tool server on stdio."""
    from calcchat.mcp.server import run_server

    _load_config(ctx.obj["config_path"])
    asyncio.run(run_server())
