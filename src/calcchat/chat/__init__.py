"""Conversation loop between the user, the model, and the tool server."""

from calcchat.chat.session import ChatSession, ToolCallRecord

__all__ = ["ChatSession", "ToolCallRecord"]
