"""Own the MCP server subprocess and exchange tool requests with it over stdio."""

import sys
from contextlib import AsyncExitStack
from pathlib import Path
from types import TracebackType
from typing import Any, Dict, List, Optional, Type, cast

import anyio
from mcp import ClientSession
from mcp.client.stdio import stdio_client, StdioServerParameters
from mcp.shared.exceptions import McpError
from mcp.types import CONNECTION_CLOSED, CallToolResult, EmbeddedResource, ImageContent, TextContent
from pydantic import ValidationError

from mcp_openai_client.core import (
    ChannelError,
    ProtocolError,
    ToolDescriptor,
    ToolExecutionError,
    ToolInvocationResult,
    TransportConnectionError,
    UnsupportedScriptKind,
    get_logger,
)

logger = get_logger(__name__)

__all__ = ["StdioTransport", "resolve_server_command"]

# Raised by the anyio memory streams once the subprocess or its pipes are gone.
_CHANNEL_ERRORS = (
    anyio.ClosedResourceError,
    anyio.BrokenResourceError,
    anyio.EndOfStream,
    BrokenPipeError,
    ConnectionResetError,
)


def _is_connection_closed(error: McpError) -> bool:
    # Pending requests are failed with this code when the subprocess exits.
    return error.error is not None and error.error.code == CONNECTION_CLOSED


def resolve_server_command(script_path: str, platform: str = sys.platform) -> StdioServerParameters:
    """Pick the interpreter for a server script from its file extension.

    Args:
        script_path: Path to the server entry script.
        platform: Platform name used to choose the Python binary.

    Returns:
        The launch parameters for the stdio client.

    Raises:
        UnsupportedScriptKind: If the script is neither ``.py`` nor ``.js``.
    """
    suffix = Path(script_path).suffix.lower()
    if suffix == ".py":
        command = "python" if platform == "win32" else "python3"
    elif suffix == ".js":
        command = "node"
    else:
        raise UnsupportedScriptKind(script_path)
    return StdioServerParameters(command=command, args=[script_path])


class StdioTransport:
    """Client side of one MCP server subprocess.

    ``close`` must run on every exit path; using the transport as an async
    context manager guarantees that.
    """

    def __init__(self, env: Optional[Dict[str, str]] = None) -> None:
        """Initializes the transport without starting anything.

        Args:
            env: Optional environment for the server subprocess.
        """
        self._env = env
        self._session: Optional[ClientSession] = None
        self._exit_stack: Optional[AsyncExitStack] = None
        self.server_params: Optional[StdioServerParameters] = None

    @property
    def is_connected(self) -> bool:
        return self._session is not None

    async def __aenter__(self) -> "StdioTransport":
        return self

    async def __aexit__(
        self, exc_type: Optional[Type[BaseException]], exc_val: Optional[BaseException], exc_tb: Optional[TracebackType]
    ) -> None:
        await self.close()

    async def connect(self, script_path: str) -> None:
        """Starts the server subprocess and performs the MCP handshake.

        Args:
            script_path: Path to the server entry script.

        Raises:
            UnsupportedScriptKind: If no interpreter is known for the script; nothing is spawned.
            TransportConnectionError: If the subprocess cannot be started or the handshake fails.
        """
        if self._exit_stack is not None:
            raise TransportConnectionError("Transport is already connected.")

        params = resolve_server_command(script_path)
        if self._env is not None:
            params = params.model_copy(update={"env": self._env})
        self.server_params = params

        logger.debug("Starting MCP server: %s %s", params.command, " ".join(params.args))
        self._exit_stack = AsyncExitStack()
        try:
            read, write = await self._exit_stack.enter_async_context(stdio_client(params))
            session = await self._exit_stack.enter_async_context(ClientSession(read, write))
            await session.initialize()
        except Exception as e:
            logger.error("Could not connect to MCP server '%s': %s", script_path, e)
            raise TransportConnectionError(f"Could not connect to MCP server '{script_path}': {e}") from e

        self._session = session
        logger.info("MCP client session initialized successfully.")

    async def list_tools(self) -> List[ToolDescriptor]:
        """Fetches the tools advertised by the server.

        Returns:
            The tool descriptors in server order.

        Raises:
            ProtocolError: If the response is malformed.
            ChannelError: If the server is gone.
        """
        session = self._require_session()
        logger.debug("Fetching tools from MCP server...")
        try:
            result = await session.list_tools()
        except _CHANNEL_ERRORS as e:
            raise ChannelError(f"MCP server channel closed while listing tools: {e}") from e
        except McpError as e:
            if _is_connection_closed(e):
                raise ChannelError(f"MCP server channel closed while listing tools: {e}") from e
            raise ProtocolError(f"Malformed tools/list response: {e}") from e
        except ValidationError as e:
            raise ProtocolError(f"Malformed tools/list response: {e}") from e

        tools = getattr(result, "tools", None)
        if not isinstance(tools, list):
            raise ProtocolError("Malformed tools/list response: missing 'tools' list.")

        descriptors = []
        for tool in tools:
            if not isinstance(tool.inputSchema, dict):
                raise ProtocolError(f"Tool '{tool.name}' has no usable input schema.")
            try:
                descriptors.append(
                    ToolDescriptor(name=tool.name, description=tool.description or "", input_schema=tool.inputSchema)
                )
            except ValidationError as e:
                raise ProtocolError(f"Malformed tool descriptor '{tool.name}': {e}") from e

        logger.info("Found %d tools from MCP server.", len(descriptors))
        return descriptors

    async def call_tool(self, name: str, arguments: Dict[str, Any]) -> ToolInvocationResult:
        """Invokes one tool and waits for its result.

        Args:
            name: Name of the tool to call.
            arguments: Opaque JSON arguments for the tool.

        Returns:
            The text returned by the tool, or an empty result if there was none.

        Raises:
            ToolExecutionError: If the server reports a failure.
            ChannelError: If the server is gone.
        """
        session = self._require_session()
        logger.info("Delegating tool '%s' to MCP Server...", name)
        try:
            mcp_result = await session.call_tool(name, arguments=arguments)
        except _CHANNEL_ERRORS as e:
            raise ChannelError(f"MCP server channel closed while calling '{name}': {e}") from e
        except McpError as e:
            if _is_connection_closed(e):
                raise ChannelError(f"MCP server channel closed while calling '{name}': {e}") from e
            raise ToolExecutionError(name, str(e.error.message if e.error else e)) from e

        if mcp_result.isError:
            payload = self._render_content(mcp_result) or "unknown error"
            raise ToolExecutionError(name, payload)

        text = self._render_content(mcp_result)
        if not text:
            logger.debug("Tool '%s' returned no content.", name)
            return ToolInvocationResult.empty()

        logger.debug("Tool '%s' result: %s", name, text[:200] + "..." if len(text) > 200 else text)
        return ToolInvocationResult(text=text, present=True)

    async def close(self) -> None:
        """Terminates the server subprocess and closes its pipes. Safe to call twice."""
        exit_stack, self._exit_stack = self._exit_stack, None
        self._session = None
        if exit_stack is None:
            return

        logger.debug("Closing MCP client session...")
        try:
            await exit_stack.aclose()
        except Exception as e:
            logger.warning("Error while shutting down MCP server: %s", e)
        logger.info("MCP client session closed.")

    def _require_session(self) -> ClientSession:
        if self._session is None:
            raise ChannelError("MCP client is not connected.")
        return self._session

    @staticmethod
    def _render_content(result: CallToolResult) -> str:
        output = []
        for c in result.content or []:
            if c.type == "text":
                text_content = cast(TextContent, c)
                if text_content.text:
                    output.append(text_content.text)
            elif c.type == "image":
                image_content = cast(ImageContent, c)
                output.append(f"[Image: {image_content.mimeType}]")
            elif c.type == "resource":
                resource_content = cast(EmbeddedResource, c)
                output.append(f"[Resource: {resource_content.resource.uri}]")
            else:
                output.append(f"[Unknown content type: {c.type}]")
        return "\n".join(output)
