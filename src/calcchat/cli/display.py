"""Rich display for the chat CLI.

Renders the banner, the assistant's replies, the tool calls made during
a turn, and the tool catalog.  Accepts an optional
:class:`~rich.console.Console` for dependency injection in tests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table
from rich.text import Text

if TYPE_CHECKING:
    from collections.abc import Sequence

    from calcchat.chat.session import ToolCallRecord
    from calcchat.tools.base import ToolDefinition


def _format_arguments(arguments: dict[str, object]) -> str:
    return ", ".join(f"{k}={v}" for k, v in arguments.items())


class ChatDisplay:
    """Terminal rendering for an interactive chat."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    def show_banner(self) -> None:
        self._console.print("[bold]🧮 Calculator Chat Client[/bold]")
        self._console.print(
            "Ask me to perform calculations and I'll use the calculator tool server!"
        )
        self._console.print("Type 'quit' or 'exit' to stop.\n", style="dim")

    def prompt(self) -> str:
        """Read one line from the user. Raises EOFError at end of input."""
        return self._console.input("[bold cyan]You:[/bold cyan] ")

    def show_reply(self, reply: str) -> None:
        line = Text("🤖 Assistant: ", style="bold green")
        line.append(reply)
        self._console.print(line)
        self._console.print()

    def show_tool_calls(self, records: Sequence[ToolCallRecord]) -> None:
        """List each tool call of the turn with its outcome, dimmed."""
        for record in records:
            call = record.call
            line = Text(f"  → {call.name}({_format_arguments(call.arguments)}) ")
            if record.result.is_error:
                line.append(f"failed: {record.result.content}", style="red")
            else:
                line.append(record.result.content)
            line.stylize("dim")
            self._console.print(line)

    def show_error(self, message: str) -> None:
        line = Text("Error: ", style="bold red")
        line.append(message)
        self._console.print(line)
        self._console.print()

    def show_tools(self, definitions: Sequence[ToolDefinition]) -> None:
        """Render the tool catalog as a table."""
        table = Table(title="Calculator tools")
        table.add_column("Tool", style="bold")
        table.add_column("Description")
        table.add_column("Parameters", style="cyan")
        for d in definitions:
            params = d.input_schema.get("properties", {})
            table.add_row(d.name, d.description, ", ".join(params))
        self._console.print(table)

    def goodbye(self) -> None:
        self._console.print("Goodbye!")
