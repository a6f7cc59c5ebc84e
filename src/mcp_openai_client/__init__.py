"""MCP OpenAI Client - chat with an OpenAI-compatible model that can call MCP server tools."""

from .core import (
    ClientConfig,
    OrchestrationCycle,
    CycleResult,
    DirectAnswer,
    ToolCallRequested,
    ToolDescriptor,
    ToolInvocationRequest,
    ToolInvocationResult,
    UserMessage,
    AssistantMessage,
    SystemMessage,
    ToolMessage,
    ToolRegistry,
)
from .impl.openai_api import OpenAIGateway, OpenAIToolRegistry
from .session import ChatSession
from .transport import StdioTransport

__all__ = [
    "ClientConfig",
    "OrchestrationCycle",
    "CycleResult",
    "DirectAnswer",
    "ToolCallRequested",
    "ToolDescriptor",
    "ToolInvocationRequest",
    "ToolInvocationResult",
    "UserMessage",
    "AssistantMessage",
    "SystemMessage",
    "ToolMessage",
    "ToolRegistry",
    "OpenAIGateway",
    "OpenAIToolRegistry",
    "ChatSession",
    "StdioTransport",
]
