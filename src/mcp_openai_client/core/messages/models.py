"""Provider-agnostic message models for one query's conversation."""

from abc import ABC
from typing import List, Optional, Sequence

from pydantic import BaseModel, ConfigDict

from ..exceptions import ConversationError


class ToolCallReference(BaseModel):
    """Opaque reference to a tool call requested by the model.

    It is echoed back verbatim in the assistant message that carries the call
    and in the tool message that answers it.

    Attributes:
        call_id: Identifier assigned by the backend.
        name: Name of the requested tool.
        arguments: Raw JSON-encoded argument string as sent by the backend.
    """

    model_config = ConfigDict(frozen=True)

    call_id: str
    name: str
    arguments: str = "{}"


class BaseMessage(ABC, BaseModel):
    """Base model for messages exchanged with the model backend.

    Attributes:
        author: Role associated with the message.
        content: Text payload of the message.
    """

    author: str
    content: Optional[str]


class SystemMessage(BaseMessage):
    """Message authored by the system to steer behavior."""

    author: str = "system"
    content: str


class UserMessage(BaseMessage):
    """Message authored by an end user."""

    author: str = "user"
    content: str


class AssistantMessage(BaseMessage):
    """Message authored by the assistant, optionally carrying a tool call instead of content."""

    author: str = "assistant"
    content: Optional[str] = None
    tool_calls: Optional[List[ToolCallReference]] = None


class ToolMessage(BaseMessage):
    """Result of a tool invocation, linked to the call that produced it."""

    author: str = "tool"
    content: str
    tool_call_id: str
    name: str


def validate_tool_links(messages: Sequence[BaseMessage]) -> None:
    """Check that every tool message answers a call announced earlier in the sequence.

    Args:
        messages: The conversation to check.

    Raises:
        ConversationError: If a tool message references an unknown call id.
    """
    seen: set[str] = set()
    for index, msg in enumerate(messages):
        if isinstance(msg, AssistantMessage) and msg.tool_calls:
            seen.update(ref.call_id for ref in msg.tool_calls)
        elif isinstance(msg, ToolMessage) and msg.tool_call_id not in seen:
            raise ConversationError(
                f"Tool message at position {index} references unknown call id '{msg.tool_call_id}'."
            )
