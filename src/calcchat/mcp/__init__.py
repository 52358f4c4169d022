"""MCP tool server and client for the calculator."""
