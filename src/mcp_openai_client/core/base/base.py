"""Core abstractions for model gateway implementations."""

from abc import ABC, abstractmethod
from typing import Any, List, Literal, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict

from ..messages import BaseMessage, ToolCallReference
from ..tools.models import ToolInvocationRequest
from ..logger import get_logger

logger = get_logger(__name__)

# Only the first tool call of a response is honoured; the rest are dropped.
MAX_TOOL_CALLS_PER_TURN = 1


class DirectAnswer(BaseModel):
    """The backend answered with plain content.

    Attributes:
        text: The answer text, possibly empty.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["direct_answer"] = "direct_answer"
    text: str = ""


class ToolCallRequested(BaseModel):
    """The backend asked for exactly one tool invocation.

    Attributes:
        request: Decoded tool name and arguments.
        call_ref: Opaque reference to echo back in the follow-up messages.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["tool_call"] = "tool_call"
    request: ToolInvocationRequest
    call_ref: ToolCallReference


GatewayOutcome = Union[DirectAnswer, ToolCallRequested]


def format_backend_error(error: BaseException) -> str:
    """Render a backend failure as the user-visible answer text."""
    return f"Model backend request failed: {error}"


class ModelGateway(ABC):
    """Abstract base class for chat-completion backends.

    ``complete`` never raises: any failure of the provider hook is logged and
    returned as a ``DirectAnswer`` holding a diagnostic text.
    """

    async def complete(
        self, messages: Sequence[BaseMessage], tool_schemas: Optional[List[Any]] = None
    ) -> GatewayOutcome:
        """
        Sends the conversation to the backend.

        Args:
            messages: The conversation so far.
            tool_schemas: Function-call schemas to offer, or None for an answer-only pass.

        Returns:
            Either a direct answer or a single requested tool call.
        """
        try:
            return await self._complete_impl(messages, tool_schemas)
        except Exception as e:
            logger.error("Model backend request failed: %s", e, exc_info=True)
            return DirectAnswer(text=format_backend_error(e))

    @abstractmethod
    async def _complete_impl(
        self, messages: Sequence[BaseMessage], tool_schemas: Optional[List[Any]]
    ) -> GatewayOutcome:
        pass
