"""
Custom exception classes for the MCP OpenAI client.

This module defines the error taxonomy used across configuration loading,
the stdio transport to the tool server, the model backend and the
orchestration cycle. Only configuration and startup transport errors are
meant to end the process; the rest are recovered at the cycle or gateway
boundary.
"""


class MCPClientError(Exception):
    """Base exception for all client errors."""

    pass


class ConfigurationError(MCPClientError):
    """Raised when required configuration is missing or invalid."""

    pass


class TransportError(MCPClientError):
    """Base exception for failures talking to the tool server."""

    pass


class UnsupportedScriptKind(TransportError):
    """Raised when the server script has an extension no interpreter is known for."""

    def __init__(self, script_path: str):
        self.script_path = script_path
        super().__init__(f"Server script must be a .js or .py file, got: {script_path}")


class TransportConnectionError(TransportError):
    """Raised when the server subprocess cannot be started or the handshake fails."""

    pass


class ChannelError(TransportError):
    """Raised when the server subprocess has exited or its pipes are broken."""

    pass


class ProtocolError(TransportError):
    """Raised when the server answers with a malformed response."""

    pass


class ToolExecutionError(TransportError):
    """Raised when the server reports that a tool call failed.

    Attributes:
        tool_name: Name of the tool that failed.
        payload: Error payload reported by the server.
    """

    def __init__(self, tool_name: str, payload: str):
        self.tool_name = tool_name
        self.payload = payload
        super().__init__(f"Tool '{tool_name}' failed: {payload}")


class BackendError(MCPClientError):
    """Raised when the model backend request fails or returns an unusable response."""

    pass


class ToolNotFoundError(MCPClientError):
    """Raised when a requested tool is not found in the registry."""

    pass


class ConversationError(MCPClientError):
    """Raised when a message sequence breaks the tool call linkage."""

    pass
