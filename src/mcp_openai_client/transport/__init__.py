"""Stdio transport to the MCP tool server."""

from .stdio import StdioTransport, resolve_server_command

__all__ = ["StdioTransport", "resolve_server_command"]
