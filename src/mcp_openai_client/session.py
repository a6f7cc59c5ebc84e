"""Interactive session: connect once, then answer one query at a time."""

import asyncio
import json
from types import TracebackType
from typing import Awaitable, Callable, List, Optional, Type

from .core import (
    ChannelError,
    ClientConfig,
    CycleResult,
    ModelGateway,
    OrchestrationCycle,
    ToolDescriptor,
    ToolInvocationRequest,
    ToolRegistry,
    get_logger,
)
from .impl.openai_api import OpenAIGateway, OpenAIToolRegistry
from .transport import StdioTransport

logger = get_logger(__name__)

QUIT_KEYWORD = "quit"
QUERY_PROMPT = "\nQuery: "

LineReader = Callable[[str], Awaitable[str]]
Writer = Callable[[str], None]


async def read_console_line(prompt: str) -> str:
    """Read one line from stdin without blocking the event loop."""
    return await asyncio.to_thread(input, prompt)


def is_quit_command(line: str) -> bool:
    """True for the quit keyword in any case; surrounding whitespace is ignored."""
    return line.strip().lower() == QUIT_KEYWORD


class ChatSession:
    """Process-wide state for one connected tool server.

    Use as ``async with ChatSession(config) as session`` so the server
    subprocess is terminated on every exit path, including a failed
    ``start``.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: Optional[StdioTransport] = None,
        registry: Optional[ToolRegistry] = None,
        gateway: Optional[ModelGateway] = None,
        write: Writer = print,
    ) -> None:
        """
        Initializes the session. Nothing is started until ``start`` is called.

        Args:
            config: Configuration built once at startup.
            transport: Transport to the tool server. Defaults to a new ``StdioTransport``.
            registry: Registry for discovered tools. Defaults to an ``OpenAIToolRegistry``.
            gateway: Model backend. Defaults to an ``OpenAIGateway`` built from ``config``.
            write: Sink for user-facing output.
        """
        self.config = config
        self.transport = transport or StdioTransport()
        self.registry = registry or OpenAIToolRegistry()
        self.gateway = gateway or OpenAIGateway.from_config(config)
        self._write = write
        self.cycle = OrchestrationCycle(
            gateway=self.gateway,
            registry=self.registry,
            tool_caller=self.transport,
            system_prompt=config.system_prompt,
            on_tool_call=self._announce_tool_call,
        )

    async def __aenter__(self) -> "ChatSession":
        return self

    async def __aexit__(
        self, exc_type: Optional[Type[BaseException]], exc_val: Optional[BaseException], exc_tb: Optional[TracebackType]
    ) -> None:
        await self.close()

    async def start(self, script_path: str) -> List[ToolDescriptor]:
        """Connects to the server script and loads its tools.

        Raises:
            UnsupportedScriptKind: For scripts other than .py/.js.
            TransportConnectionError: If the server cannot be started.
            ProtocolError: If tool discovery returns a malformed response.
            ChannelError: If the server exits during discovery.
        """
        await self.transport.connect(script_path)
        tools = await self.registry.refresh(self.transport)
        self._write(f"Connected to server with tools: {', '.join(t.name for t in tools) or '(none)'}")
        return tools

    async def ask(self, query: str) -> CycleResult:
        """Runs one orchestration cycle for ``query``."""
        return await self.cycle.run(query)

    async def run_loop(self, read_line: Optional[LineReader] = None) -> None:
        """Reads queries until ``quit`` or end of input, answering each in turn.

        A broken channel to the tool server ends the loop after telling the user.

        Args:
            read_line: Coroutine returning one line of input for a prompt. Defaults to stdin.
        """
        read_line = read_line or read_console_line
        self._write("MCP client started.")
        self._write(f"Type your question, or '{QUIT_KEYWORD}' to exit.")

        while True:
            try:
                line = await read_line(QUERY_PROMPT)
            except EOFError:
                logger.debug("End of input reached.")
                break

            if is_quit_command(line):
                break
            if not line.strip():
                continue

            try:
                result = await self.ask(line)
            except ChannelError as e:
                logger.error("Lost connection to MCP server: %s", e)
                self._write(f"\nLost connection to the tool server: {e}")
                break

            self._write(f"\nResponse:\n{result.text}")

    async def close(self) -> None:
        await self.transport.close()

    def _announce_tool_call(self, request: ToolInvocationRequest) -> None:
        self._write(f"\nCalling tool: {request.tool_name}")
        self._write(f"Arguments: {json.dumps(request.arguments, ensure_ascii=False)}")
