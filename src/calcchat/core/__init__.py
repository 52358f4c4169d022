"""Core errors shared by every layer."""

from calcchat.core.errors import (
    CalcChatError,
    ConfigError,
    DivisionByZeroError,
    InvalidInputError,
    InvalidParamsError,
    MalformedResponseError,
    ModelNotFoundError,
    NegativeSquareRootError,
    OperationError,
    ProviderAuthError,
    ProviderError,
    ProviderOverloadedError,
    ProviderRateLimitError,
    ProviderTimeoutError,
    ServerConnectionError,
    ToolExecutionError,
    ToolNotFoundError,
    ToolProtocolError,
    TransportError,
)

__all__ = [
    "CalcChatError",
    "ConfigError",
    "DivisionByZeroError",
    "InvalidInputError",
    "InvalidParamsError",
    "MalformedResponseError",
    "ModelNotFoundError",
    "NegativeSquareRootError",
    "OperationError",
    "ProviderAuthError",
    "ProviderError",
    "ProviderOverloadedError",
    "ProviderRateLimitError",
    "ProviderTimeoutError",
    "ServerConnectionError",
    "ToolExecutionError",
    "ToolNotFoundError",
    "ToolProtocolError",
    "TransportError",
]
