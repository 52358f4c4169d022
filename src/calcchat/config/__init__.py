"""Configuration loading and validation."""

from calcchat.config.loader import load_config, require_api_key
from calcchat.config.schema import (
    CalcChatConfig,
    GeneralConfig,
    LoggingConfig,
    ProviderConfig,
    ToolServerConfig,
)

__all__ = [
    "CalcChatConfig",
    "GeneralConfig",
    "LoggingConfig",
    "ProviderConfig",
    "ToolServerConfig",
    "load_config",
    "require_api_key",
]
