"""Pydantic models for calcchat configuration."""

from __future__ import annotations

import sys

from pydantic import BaseModel, Field


class ProviderConfig(BaseModel):
    """Configuration for the model provider."""

    api_key: str | None = None
    api_key_env: str | None = "ANTHROPIC_API_KEY"
    base_url: str | None = None


class ToolServerConfig(BaseModel):
    """How to launch the calculator tool server."""

    command: str = Field(default_factory=lambda: sys.executable)
    args: list[str] = Field(default_factory=lambda: ["-m", "calcchat.mcp"])
    env: dict[str, str] | None = None


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    file: str = ""


class GeneralConfig(BaseModel):
    """General chat settings."""

    model: str = "claude-3-5-sonnet-20241022"
    max_tokens: int = Field(default=1024, gt=0)


class CalcChatConfig(BaseModel):
    """Top-level configuration for calcchat."""

    general: GeneralConfig = Field(default_factory=GeneralConfig)
    provider: ProviderConfig = Field(default_factory=ProviderConfig)
    tool_server: ToolServerConfig = Field(default_factory=ToolServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
