"""Export the client exception hierarchy used across transport, backend and cycle paths."""

from .exceptions import (
    MCPClientError,
    ConfigurationError,
    TransportError,
    UnsupportedScriptKind,
    TransportConnectionError,
    ChannelError,
    ProtocolError,
    ToolExecutionError,
    BackendError,
    ToolNotFoundError,
    ConversationError,
)

__all__ = [
    "MCPClientError",
    "ConfigurationError",
    "TransportError",
    "UnsupportedScriptKind",
    "TransportConnectionError",
    "ChannelError",
    "ProtocolError",
    "ToolExecutionError",
    "BackendError",
    "ToolNotFoundError",
    "ConversationError",
]
