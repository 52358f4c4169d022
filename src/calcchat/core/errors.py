"""Exception hierarchy for calcchat.

Every module imports from here. The hierarchy is:

    CalcChatError
    ├── OperationError
    │   ├── DivisionByZeroError
    │   ├── NegativeSquareRootError(value)
    │   └── InvalidInputError(message)
    ├── ToolProtocolError(code)
    │   ├── ToolNotFoundError(name)
    │   ├── InvalidParamsError
    │   └── ToolExecutionError
    ├── TransportError
    │   └── ServerConnectionError
    ├── ProviderError(provider_id)
    │   ├── ProviderAuthError
    │   ├── ProviderRateLimitError(retry_after)
    │   ├── ProviderTimeoutError
    │   ├── ProviderOverloadedError
    │   ├── ModelNotFoundError
    │   └── MalformedResponseError
    └── ConfigError
"""

from __future__ import annotations

from mcp.types import INVALID_PARAMS, METHOD_NOT_FOUND


class CalcChatError(Exception):
    """Base exception for all calcchat errors."""


# ─── Operation Errors ─────────────────────────────────────────


class OperationError(CalcChatError):
    """Domain error raised by an arithmetic operation."""


class DivisionByZeroError(OperationError):
    """Divisor was exactly zero."""

    def __init__(self) -> None:
        super().__init__("Division by zero is not allowed")


class NegativeSquareRootError(OperationError):
    """Square root requested for a negative number."""

    def __init__(self, value: float) -> None:
        self.value = value
        super().__init__(f"Cannot calculate square root of negative number: {value}")


class InvalidInputError(OperationError):
    """Operand is NaN, infinite, or not a number at all."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Invalid input: {message}")


# ─── Tool Protocol Errors ─────────────────────────────────────


class ToolProtocolError(CalcChatError):
    """Error reported by the tool server as a JSON-RPC error object."""

    code: int = INVALID_PARAMS

    def __init__(self, message: str, *, code: int | None = None) -> None:
        if code is not None:
            self.code = code
        self.message = message
        super().__init__(message)


class ToolNotFoundError(ToolProtocolError):
    """Requested tool name is not in the catalog."""

    code = METHOD_NOT_FOUND

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool not found: {name}")


class InvalidParamsError(ToolProtocolError):
    """Arguments are missing or have the wrong type."""


class ToolExecutionError(ToolProtocolError):
    """The operation ran and failed with a domain error."""


# ─── Transport Errors ─────────────────────────────────────────


class TransportError(CalcChatError):
    """Channel to the tool server closed, broke, or produced garbage."""


class ServerConnectionError(TransportError):
    """Could not launch or handshake with the tool server."""


# ─── Provider Errors ──────────────────────────────────────────


class ProviderError(CalcChatError):
    """Base for provider-related errors."""

    def __init__(self, provider_id: str, message: str) -> None:
        self.provider_id = provider_id
        super().__init__(f"[{provider_id}] {message}")


class ProviderAuthError(ProviderError):
    """Invalid or missing API key."""


class ProviderRateLimitError(ProviderError):
    """Rate limit exceeded. Includes retry_after if available."""

    def __init__(self, provider_id: str, retry_after: float | None = None) -> None:
        self.retry_after = retry_after
        msg = "Rate limited"
        if retry_after is not None:
            msg += f" (retry after {retry_after}s)"
        super().__init__(provider_id, msg)


class ProviderTimeoutError(ProviderError):
    """Model call timed out."""


class ProviderOverloadedError(ProviderError):
    """Provider is overloaded (529, 503) or returned an unexpected status."""


class ModelNotFoundError(ProviderError):
    """Requested model not available from this provider."""


class MalformedResponseError(ProviderError):
    """Provider answered with a body we cannot interpret."""


# ─── Configuration Errors ─────────────────────────────────────


class ConfigError(CalcChatError):
    """Invalid or incomplete configuration."""
