"""Expose the OpenAI-compatible gateway and tool registry implementations."""

from .adapter import OpenAIMessageAdapter
from .core import OpenAIGateway
from .registry import OpenAIToolRegistry

__all__ = ["OpenAIGateway", "OpenAIToolRegistry", "OpenAIMessageAdapter"]
