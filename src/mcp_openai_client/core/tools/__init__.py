from .models import ToolDescriptor, ToolInvocationRequest, ToolInvocationResult, NO_TOOL_RESULT_PLACEHOLDER
from .registry import ToolRegistry, ToolSource

__all__ = [
    "ToolDescriptor",
    "ToolInvocationRequest",
    "ToolInvocationResult",
    "NO_TOOL_RESULT_PLACEHOLDER",
    "ToolRegistry",
    "ToolSource",
]
