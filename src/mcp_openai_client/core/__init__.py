"""Public exports for the core client abstractions and utilities."""

from .base import ModelGateway, GatewayOutcome, DirectAnswer, ToolCallRequested, MAX_TOOL_CALLS_PER_TURN
from .config import ClientConfig
from .cycle import OrchestrationCycle, CycleResult, CycleState, NO_CONTENT_PLACEHOLDER
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
from .logger import get_logger, setup_logging
from .messages import (
    BaseMessage,
    UserMessage,
    AssistantMessage,
    SystemMessage,
    ToolMessage,
    ToolCallReference,
    validate_tool_links,
)
from .tools import (
    ToolDescriptor,
    ToolInvocationRequest,
    ToolInvocationResult,
    ToolRegistry,
    NO_TOOL_RESULT_PLACEHOLDER,
)

__all__ = [
    "ModelGateway",
    "GatewayOutcome",
    "DirectAnswer",
    "ToolCallRequested",
    "MAX_TOOL_CALLS_PER_TURN",
    "ClientConfig",
    "OrchestrationCycle",
    "CycleResult",
    "CycleState",
    "NO_CONTENT_PLACEHOLDER",
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
    "get_logger",
    "setup_logging",
    "BaseMessage",
    "UserMessage",
    "AssistantMessage",
    "SystemMessage",
    "ToolMessage",
    "ToolCallReference",
    "validate_tool_links",
    "ToolDescriptor",
    "ToolInvocationRequest",
    "ToolInvocationResult",
    "ToolRegistry",
    "NO_TOOL_RESULT_PLACEHOLDER",
]
