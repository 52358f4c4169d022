"""calcchat - chat agent that delegates arithmetic to an MCP tool server."""

__version__ = "0.1.0"
