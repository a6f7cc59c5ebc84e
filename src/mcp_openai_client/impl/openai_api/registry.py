"""Adapt discovered tool descriptors into OpenAI function-calling schemas."""

from typing import Any, Dict, List

from mcp_openai_client.core import ToolRegistry


class OpenAIToolRegistry(ToolRegistry):
    """
    A specialized ToolRegistry for OpenAI-compatible chat completions.

    Input schemas are passed through verbatim; neither side is validated
    against them. ``strict`` is disabled because some compatible backends
    (Qwen among them) reject or ignore strict mode.
    """

    def as_call_schemas(self) -> List[Dict[str, Any]]:
        """
        Generates the ``tools`` payload for the chat completions API.

        Returns:
            One function tool per registered descriptor, in registration order.
            Empty if no tools are registered.
        """
        return [
            {
                "type": "function",
                "function": {
                    "name": tool.name,
                    "description": tool.description,
                    "parameters": tool.input_schema,
                    "strict": False,
                },
            }
            for tool in self.tools.values()
        ]
