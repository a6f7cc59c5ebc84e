from openai import AsyncOpenAI
from openai.types.chat import ChatCompletion
from typing import Any, Dict, Iterable, List, Optional, Sequence, cast
import logging

from mcp_openai_client.core import (
    ModelGateway,
    GatewayOutcome,
    DirectAnswer,
    ToolCallRequested,
    BaseMessage,
    ClientConfig,
    MAX_TOOL_CALLS_PER_TURN,
)
from .adapter import OpenAIMessageAdapter

logger = logging.getLogger(__name__)


class OpenAIGateway(ModelGateway):
    """
    Model gateway for OpenAI-compatible chat completion backends.

    Each call to ``complete`` is a single request; the caller decides whether
    to follow up after a tool call.
    """

    def __init__(
        self,
        client: AsyncOpenAI,
        model_name: str,
        temp: float = 0.7,
        max_tokens: int = 1000,
    ):
        """
        Initializes the OpenAI gateway.

        Args:
            client: The initialized AsyncOpenAI client.
            model_name: The identifier of the model to use.
            temp: The temperature for text generation, controlling randomness.
            max_tokens: The maximum number of tokens to generate in the response.
        """
        self.client: AsyncOpenAI = client
        self.model: str = model_name
        self.temperature = temp
        self.max_tokens = max_tokens
        self._adapter = OpenAIMessageAdapter()

    @classmethod
    def from_config(cls, config: ClientConfig, client: Optional[AsyncOpenAI] = None) -> "OpenAIGateway":
        """Build a gateway from the client configuration."""
        return cls(
            client=client or config.build_client(),
            model_name=config.model,
            temp=config.temperature,
            max_tokens=config.max_tokens,
        )

    async def _complete_impl(
        self, messages: Sequence[BaseMessage], tool_schemas: Optional[List[Any]]
    ) -> GatewayOutcome:
        """
        Sends one chat completion request and interprets the reply.

        Args:
            messages: The conversation so far.
            tool_schemas: Function tools to offer; None or empty for an answer-only request.

        Returns:
            A ``ToolCallRequested`` for the first requested function call, otherwise a ``DirectAnswer``.
        """
        request: Dict[str, Any] = {
            "model": self.model,
            "messages": cast(Iterable[Any], self._adapter.convert_history(messages)),
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }
        if tool_schemas:
            request["tools"] = tool_schemas
            request["tool_choice"] = "auto"

        logger.debug("Sending request to model '%s' with %d message(s).", self.model, len(messages))
        response: ChatCompletion = await self.client.chat.completions.create(**request)

        refs = self._adapter.get_tool_calls(response)
        if not refs:
            return DirectAnswer(text=self._adapter.get_content(response))

        honoured, dropped = refs[:MAX_TOOL_CALLS_PER_TURN], refs[MAX_TOOL_CALLS_PER_TURN:]
        if dropped:
            logger.info(
                "Backend requested %d tool calls; only '%s' is executed, dropping: %s",
                len(refs),
                honoured[0].name,
                ", ".join(ref.name for ref in dropped),
            )

        call_ref = honoured[0]
        tool_request = self._adapter.decode_arguments(call_ref)
        logger.info("Model requested tool '%s' (call id %s).", call_ref.name, call_ref.call_id)
        return ToolCallRequested(request=tool_request, call_ref=call_ref)
