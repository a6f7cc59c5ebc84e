"""Expose provider-agnostic message model types shared by the cycle and the gateway."""

from .models import (
    BaseMessage,
    UserMessage,
    AssistantMessage,
    SystemMessage,
    ToolMessage,
    ToolCallReference,
    validate_tool_links,
)

__all__ = [
    "BaseMessage",
    "UserMessage",
    "AssistantMessage",
    "SystemMessage",
    "ToolMessage",
    "ToolCallReference",
    "validate_tool_links",
]
