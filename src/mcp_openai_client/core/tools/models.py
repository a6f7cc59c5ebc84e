"""Data models for tool discovery and invocation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

NO_TOOL_RESULT_PLACEHOLDER = "[tool returned no result]"


class ToolDescriptor(BaseModel):
    """
    Describes a tool exposed by the execution server.

    Attributes:
        name: The unique name of the tool within a session.
        description: A brief description of what the tool does.
        input_schema: JSON schema of the tool's arguments, kept verbatim.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    description: str = ""
    input_schema: Dict[str, Any] = Field(default_factory=dict)


@dataclass(frozen=True)
class ToolInvocationRequest:
    """A tool call decided by the model. Arguments are opaque JSON."""

    tool_name: str
    arguments: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ToolInvocationResult:
    """Outcome of a tool call. ``present`` is False when the server returned no text."""

    text: str = ""
    present: bool = False

    @classmethod
    def empty(cls) -> "ToolInvocationResult":
        return cls(text="", present=False)

    def render(self) -> str:
        """Return the text to splice into the conversation, never an empty string."""
        if not self.present or not self.text:
            return NO_TOOL_RESULT_PLACEHOLDER
        return self.text
