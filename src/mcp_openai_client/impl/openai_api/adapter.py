from typing import Any, Dict, List, Optional, Sequence
import json

from openai.types.chat import ChatCompletion

from mcp_openai_client.core import (
    BaseMessage,
    UserMessage,
    AssistantMessage,
    SystemMessage,
    ToolMessage,
    ToolCallReference,
    ToolInvocationRequest,
    BackendError,
)


class OpenAIMessageAdapter:
    """Translates between the generic conversation and OpenAI chat payloads."""

    @staticmethod
    def convert_history(history: Sequence[BaseMessage]) -> List[Dict[str, Any]]:
        """
        Converts generic BaseMessage history to OpenAI specific dictionary history.

        Args:
            history: List of BaseMessage objects.

        Returns:
            List of OpenAI message dictionaries.
        """
        openai_history: List[Dict[str, Any]] = []
        for msg in history:
            if isinstance(msg, UserMessage):
                openai_history.append({"role": "user", "content": msg.content})
            elif isinstance(msg, AssistantMessage):
                openai_msg: Dict[str, Any] = {"role": "assistant", "content": msg.content}
                if msg.tool_calls:
                    openai_msg["tool_calls"] = [
                        {
                            "id": ref.call_id,
                            "type": "function",
                            "function": {"name": ref.name, "arguments": ref.arguments},
                        }
                        for ref in msg.tool_calls
                    ]
                openai_history.append(openai_msg)
            elif isinstance(msg, SystemMessage):
                openai_history.append({"role": "system", "content": msg.content})
            elif isinstance(msg, ToolMessage):
                openai_history.append(
                    {"role": "tool", "content": msg.content, "tool_call_id": msg.tool_call_id, "name": msg.name}
                )
        return openai_history

    @staticmethod
    def get_tool_calls(response: ChatCompletion) -> List[ToolCallReference]:
        """Extract the function tool calls from a chat completion response.

        Args:
            response: The chat completion response from OpenAI.

        Returns:
            The call references in backend order; empty if there are none.

        Raises:
            BackendError: If the response carries no choices.
        """
        if not response.choices:
            raise BackendError("Model backend returned no choices.")

        tool_calls = response.choices[0].message.tool_calls
        if not tool_calls:
            return []

        refs = []
        for tool_call in tool_calls:
            # Only function tool calls can be routed to the tool server
            if tool_call.type == "function":
                refs.append(
                    ToolCallReference(
                        call_id=tool_call.id,
                        name=tool_call.function.name,
                        arguments=tool_call.function.arguments or "{}",
                    )
                )
        return refs

    @staticmethod
    def get_content(response: ChatCompletion) -> str:
        if not response.choices:
            raise BackendError("Model backend returned no choices.")
        return response.choices[0].message.content or ""

    @staticmethod
    def decode_arguments(ref: ToolCallReference) -> ToolInvocationRequest:
        """Decode the JSON-encoded arguments of a call into a request.

        Args:
            ref: The call reference returned by the backend.

        Returns:
            The request to hand to the transport.

        Raises:
            BackendError: If the arguments are not a JSON object.
        """
        raw: Optional[str] = ref.arguments
        if raw is None or not raw.strip():
            return ToolInvocationRequest(tool_name=ref.name, arguments={})

        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise BackendError(f"Failed to decode arguments for tool '{ref.name}': {exc}") from exc

        if parsed is None:
            parsed = {}
        if not isinstance(parsed, dict):
            raise BackendError(f"Arguments for tool '{ref.name}' must decode to a JSON object.")

        return ToolInvocationRequest(tool_name=ref.name, arguments=parsed)

