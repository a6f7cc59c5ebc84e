from typing import Any, Callable, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from openai import AsyncOpenAI
from openai.types.chat import ChatCompletion, ChatCompletionMessage
from openai.types.chat.chat_completion import Choice

from mcp_openai_client import ClientConfig, ToolDescriptor, ToolInvocationResult


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch: pytest.MonkeyPatch) -> None:
    # A developer's .env must never leak into tests.
    monkeypatch.setattr("mcp_openai_client.core.config.load_dotenv", lambda *a, **k: False)


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(api_key="dummy_key", model="test-model", system_prompt="You are a helper.")


@pytest.fixture
def mock_openai_client() -> Any:
    client = MagicMock(spec=AsyncOpenAI)
    client.chat = MagicMock()
    client.chat.completions = MagicMock()
    client.chat.completions.create = AsyncMock()
    return client


@pytest.fixture
def make_completion() -> Callable[..., Any]:
    """Builds a ChatCompletion mock carrying content and/or function tool calls."""

    def _make(content: Optional[str] = None, tool_calls: Optional[List[tuple]] = None) -> Any:
        calls = []
        for call_id, name, arguments in tool_calls or []:
            tool_call = MagicMock()
            tool_call.id = call_id
            tool_call.type = "function"
            tool_call.function.name = name
            tool_call.function.arguments = arguments
            calls.append(tool_call)

        message = MagicMock(spec=ChatCompletionMessage)
        message.content = content
        message.tool_calls = calls or None

        choice = MagicMock(spec=Choice)
        choice.message = message
        choice.finish_reason = "tool_calls" if calls else "stop"

        response = MagicMock(spec=ChatCompletion)
        response.choices = [choice]
        response.usage = None
        return response

    return _make


@pytest.fixture
def weather_tool() -> ToolDescriptor:
    return ToolDescriptor(
        name="get_weather",
        description="Get the current weather for a city.",
        input_schema={"type": "object", "properties": {"city": {"type": "string"}}, "required": ["city"]},
    )


@pytest.fixture
def fake_transport(weather_tool: ToolDescriptor) -> Any:
    """Transport double that records calls instead of spawning a subprocess."""
    transport = MagicMock()
    transport.connect = AsyncMock()
    transport.list_tools = AsyncMock(return_value=[weather_tool])
    transport.call_tool = AsyncMock(return_value=ToolInvocationResult(text="18C, cloudy", present=True))
    transport.close = AsyncMock()
    return transport
