from typing import Any, Iterator
from unittest.mock import AsyncMock, MagicMock, patch

import anyio
import pytest
from mcp.shared.exceptions import McpError
from mcp.types import CONNECTION_CLOSED, CallToolResult, ErrorData, ListToolsResult, TextContent, Tool as MCPTool

from mcp_openai_client import StdioTransport
from mcp_openai_client.core import (
    ChannelError,
    ProtocolError,
    ToolExecutionError,
    TransportConnectionError,
    UnsupportedScriptKind,
)
from mcp_openai_client.transport import resolve_server_command


@pytest.fixture
def mock_session() -> Any:
    session = AsyncMock()
    session.initialize = AsyncMock()
    # Ensure context manager returns the session itself
    session.__aenter__.return_value = session
    return session


@pytest.fixture
def mock_stdio(mock_session: Any) -> Iterator[Any]:
    with patch("mcp_openai_client.transport.stdio.stdio_client", new_callable=MagicMock) as mock_stdio:
        mock_stdio.return_value = AsyncMock()
        mock_stdio.return_value.__aenter__.return_value = (AsyncMock(), AsyncMock())

        with patch("mcp_openai_client.transport.stdio.ClientSession", return_value=mock_session):
            yield mock_stdio


class TestResolveServerCommand:
    def test_python_script_uses_python3(self) -> None:
        params = resolve_server_command("server.py", platform="linux")
        assert params.command == "python3"
        assert params.args == ["server.py"]

    def test_python_script_on_windows_uses_python(self) -> None:
        assert resolve_server_command("server.py", platform="win32").command == "python"

    def test_javascript_uses_node(self) -> None:
        params = resolve_server_command("build/index.js")
        assert params.command == "node"
        assert params.args == ["build/index.js"]

    @pytest.mark.parametrize("path", ["server.ts", "server", "server.py.txt", "server.sh"])
    def test_other_extensions_are_rejected(self, path: str) -> None:
        with pytest.raises(UnsupportedScriptKind):
            resolve_server_command(path)


@pytest.mark.asyncio
async def test_unsupported_script_spawns_nothing(mock_stdio: Any) -> None:
    transport = StdioTransport()
    with pytest.raises(UnsupportedScriptKind):
        await transport.connect("server.rb")

    mock_stdio.assert_not_called()
    assert not transport.is_connected
    await transport.close()


@pytest.mark.asyncio
async def test_transport_lifecycle(mock_stdio: Any, mock_session: Any) -> None:
    """Test that the transport initializes the session and closes it exactly once."""
    async with StdioTransport() as transport:
        await transport.connect("server.py")
        assert transport.is_connected
        assert mock_session.initialize.call_count == 1
        params = mock_stdio.call_args.args[0]
        assert params.args == ["server.py"]

    assert not transport.is_connected
    assert mock_stdio.return_value.__aexit__.call_count == 1

    # Closing again is a no-op
    await transport.close()
    assert mock_stdio.return_value.__aexit__.call_count == 1


@pytest.mark.asyncio
async def test_connect_twice_is_rejected(mock_stdio: Any) -> None:
    async with StdioTransport() as transport:
        await transport.connect("server.py")
        with pytest.raises(TransportConnectionError):
            await transport.connect("server.py")


@pytest.mark.asyncio
async def test_server_exiting_during_handshake_fails_connect(mock_stdio: Any, mock_session: Any) -> None:
    mock_session.initialize = AsyncMock(side_effect=anyio.EndOfStream())

    transport = StdioTransport()
    with pytest.raises(TransportConnectionError):
        await transport.connect("server.py")
    assert not transport.is_connected

    await transport.close()
    assert mock_stdio.return_value.__aexit__.call_count == 1


@pytest.mark.asyncio
async def test_list_tools(mock_stdio: Any, mock_session: Any) -> None:
    mock_session.list_tools = AsyncMock(
        return_value=ListToolsResult(
            tools=[
                MCPTool(name="tool1", description="desc1", inputSchema={"type": "object"}),
                MCPTool(name="tool2", inputSchema={"type": "object", "properties": {"x": {"type": "integer"}}}),
            ]
        )
    )

    async with StdioTransport() as transport:
        await transport.connect("server.py")
        tools = await transport.list_tools()

    assert [t.name for t in tools] == ["tool1", "tool2"]
    assert tools[0].description == "desc1"
    assert tools[1].description == ""
    assert tools[1].input_schema == {"type": "object", "properties": {"x": {"type": "integer"}}}


@pytest.mark.asyncio
async def test_list_tools_protocol_error(mock_stdio: Any, mock_session: Any) -> None:
    mock_session.list_tools = AsyncMock(side_effect=McpError(ErrorData(code=-32601, message="Method not found")))

    async with StdioTransport() as transport:
        await transport.connect("server.py")
        with pytest.raises(ProtocolError, match="Method not found"):
            await transport.list_tools()


@pytest.mark.asyncio
async def test_list_tools_malformed_result(mock_stdio: Any, mock_session: Any) -> None:
    mock_session.list_tools = AsyncMock(return_value=MagicMock(tools=None))

    async with StdioTransport() as transport:
        await transport.connect("server.py")
        with pytest.raises(ProtocolError):
            await transport.list_tools()


@pytest.mark.asyncio
async def test_list_tools_after_server_exit(mock_stdio: Any, mock_session: Any) -> None:
    mock_session.list_tools = AsyncMock(side_effect=anyio.ClosedResourceError())

    async with StdioTransport() as transport:
        await transport.connect("server.py")
        with pytest.raises(ChannelError):
            await transport.list_tools()


@pytest.mark.asyncio
async def test_list_tools_connection_closed(mock_stdio: Any, mock_session: Any) -> None:
    """A server that exits before answering tools/list is a channel failure, not a bad response."""
    mock_session.list_tools = AsyncMock(
        side_effect=McpError(ErrorData(code=CONNECTION_CLOSED, message="Connection closed"))
    )

    async with StdioTransport() as transport:
        await transport.connect("server.py")
        with pytest.raises(ChannelError, match="Connection closed"):
            await transport.list_tools()


@pytest.mark.asyncio
async def test_call_tool_returns_text(mock_stdio: Any, mock_session: Any) -> None:
    mock_session.call_tool = AsyncMock(
        return_value=CallToolResult(content=[TextContent(type="text", text="18C, cloudy")])
    )

    async with StdioTransport() as transport:
        await transport.connect("server.py")
        result = await transport.call_tool("get_weather", {"city": "Paris"})

    mock_session.call_tool.assert_called_with("get_weather", arguments={"city": "Paris"})
    assert result.present
    assert result.render() == "18C, cloudy"


@pytest.mark.asyncio
async def test_call_tool_joins_text_items(mock_stdio: Any, mock_session: Any) -> None:
    mock_session.call_tool = AsyncMock(
        return_value=CallToolResult(
            content=[TextContent(type="text", text="line 1"), TextContent(type="text", text="line 2")]
        )
    )

    async with StdioTransport() as transport:
        await transport.connect("server.py")
        result = await transport.call_tool("t", {})

    assert result.text == "line 1\nline 2"


@pytest.mark.asyncio
async def test_call_tool_without_content(mock_stdio: Any, mock_session: Any) -> None:
    mock_session.call_tool = AsyncMock(return_value=CallToolResult(content=[]))

    async with StdioTransport() as transport:
        await transport.connect("server.py")
        result = await transport.call_tool("t", {})

    assert not result.present
    assert result.render() == "[tool returned no result]"


@pytest.mark.asyncio
async def test_call_tool_reported_error(mock_stdio: Any, mock_session: Any) -> None:
    mock_session.call_tool = AsyncMock(
        return_value=CallToolResult(content=[TextContent(type="text", text="city not found")], isError=True)
    )

    async with StdioTransport() as transport:
        await transport.connect("server.py")
        with pytest.raises(ToolExecutionError) as exc_info:
            await transport.call_tool("get_weather", {"city": "Atlantis"})

    assert exc_info.value.tool_name == "get_weather"
    assert exc_info.value.payload == "city not found"


@pytest.mark.asyncio
async def test_call_tool_jsonrpc_error(mock_stdio: Any, mock_session: Any) -> None:
    mock_session.call_tool = AsyncMock(side_effect=McpError(ErrorData(code=-32602, message="Unknown tool: nope")))

    async with StdioTransport() as transport:
        await transport.connect("server.py")
        with pytest.raises(ToolExecutionError, match="Unknown tool: nope"):
            await transport.call_tool("nope", {})


@pytest.mark.asyncio
async def test_call_tool_broken_channel(mock_stdio: Any, mock_session: Any) -> None:
    mock_session.call_tool = AsyncMock(side_effect=anyio.BrokenResourceError())

    async with StdioTransport() as transport:
        await transport.connect("server.py")
        with pytest.raises(ChannelError):
            await transport.call_tool("t", {})


@pytest.mark.asyncio
async def test_call_tool_connection_closed(mock_stdio: Any, mock_session: Any) -> None:
    """A server that dies mid-call fails the pending request; that must not look like a tool failure."""
    mock_session.call_tool = AsyncMock(
        side_effect=McpError(ErrorData(code=CONNECTION_CLOSED, message="Connection closed"))
    )

    async with StdioTransport() as transport:
        await transport.connect("server.py")
        with pytest.raises(ChannelError) as exc_info:
            await transport.call_tool("crash", {})

    assert not isinstance(exc_info.value, ToolExecutionError)


@pytest.mark.asyncio
async def test_call_tool_when_not_connected() -> None:
    with pytest.raises(ChannelError):
        await StdioTransport().call_tool("t", {})
