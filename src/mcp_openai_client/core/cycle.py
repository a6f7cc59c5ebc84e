"""Per-query orchestration between the model gateway and the tool server."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol

from .base import DirectAnswer, ModelGateway, ToolCallRequested
from .exceptions import ToolExecutionError
from .logger import get_logger
from .messages import (
    AssistantMessage,
    BaseMessage,
    SystemMessage,
    ToolMessage,
    UserMessage,
    validate_tool_links,
)
from .tools import ToolInvocationRequest, ToolInvocationResult, ToolRegistry

logger = get_logger(__name__)

NO_CONTENT_PLACEHOLDER = "[no content returned]"


class ToolCaller(Protocol):
    """The part of the transport the cycle depends on."""

    async def call_tool(self, name: str, arguments: Dict[str, Any]) -> ToolInvocationResult: ...


class CycleState(enum.Enum):
    INIT = "init"
    AWAITING_FIRST_RESPONSE = "awaiting_first_response"
    AWAITING_TOOL_RESULT = "awaiting_tool_result"
    AWAITING_FINAL_RESPONSE = "awaiting_final_response"
    DONE = "done"


@dataclass
class CycleResult:
    """Outcome of one orchestration cycle.

    Attributes:
        text: The answer to show the user.
        state: Terminal state of the cycle, always ``DONE``.
        messages: The conversation as it stood when the cycle ended.
        tool_called: Whether a tool invocation was attempted.
    """

    text: str
    state: CycleState
    messages: List[BaseMessage] = field(default_factory=list)
    tool_called: bool = False


def format_tool_error(error: ToolExecutionError) -> str:
    """Render a failed tool call as the query's answer text."""
    return f"Tool call failed: {error}"


class OrchestrationCycle:
    """Runs one query through at most one model -> tool -> model round trip.

    States: INIT -> AWAITING_FIRST_RESPONSE -> DONE, or
    INIT -> AWAITING_FIRST_RESPONSE -> AWAITING_TOOL_RESULT -> AWAITING_FINAL_RESPONSE -> DONE.

    A tool failure reported by the server ends the cycle with a diagnostic
    text and skips the final pass. A broken channel propagates to the caller.
    """

    def __init__(
        self,
        *,
        gateway: ModelGateway,
        registry: ToolRegistry,
        tool_caller: ToolCaller,
        system_prompt: str,
        on_tool_call: Optional[Callable[[ToolInvocationRequest], None]] = None,
    ) -> None:
        """Initialize the cycle.

        Args:
            gateway: Backend used for both model passes.
            registry: Source of the function-call schemas offered on the first pass.
            tool_caller: Executes the requested tool, usually the stdio transport.
            system_prompt: Preamble that opens every conversation.
            on_tool_call: Optional hook notified before a tool is invoked.
        """
        self._gateway = gateway
        self._registry = registry
        self._tool_caller = tool_caller
        self._system_prompt = system_prompt
        self._on_tool_call = on_tool_call
        self.state = CycleState.INIT

    async def run(self, query: str) -> CycleResult:
        """Run the cycle for a single user query.

        Args:
            query: The user's question.

        Returns:
            The final answer text together with the conversation that produced it.

        Raises:
            ChannelError: If the tool server went away during the tool call.
        """
        self.state = CycleState.INIT
        messages: List[BaseMessage] = [
            SystemMessage(content=self._system_prompt),
            UserMessage(content=query),
        ]

        self.state = CycleState.AWAITING_FIRST_RESPONSE
        schemas = self._registry.as_call_schemas() or None
        outcome = await self._gateway.complete(messages, schemas)

        if isinstance(outcome, DirectAnswer):
            logger.debug("First pass returned a direct answer.")
            return self._finish(outcome.text or NO_CONTENT_PLACEHOLDER, messages)

        return await self._run_tool_call(outcome, messages)

    async def _run_tool_call(self, outcome: ToolCallRequested, messages: List[BaseMessage]) -> CycleResult:
        request = outcome.request
        self.state = CycleState.AWAITING_TOOL_RESULT
        messages.append(AssistantMessage(content=None, tool_calls=[outcome.call_ref]))

        if self._on_tool_call is not None:
            self._on_tool_call(request)

        logger.info("Executing tool '%s'...", request.tool_name)
        logger.debug("Tool arguments: %s", request.arguments)
        try:
            result = await self._tool_caller.call_tool(request.tool_name, request.arguments)
        except ToolExecutionError as e:
            logger.warning("Tool '%s' failed: %s", request.tool_name, e.payload)
            return self._finish(format_tool_error(e), messages, tool_called=True)

        messages.append(
            ToolMessage(
                content=result.render(),
                tool_call_id=outcome.call_ref.call_id,
                name=request.tool_name,
            )
        )
        validate_tool_links(messages)

        self.state = CycleState.AWAITING_FINAL_RESPONSE
        final = await self._gateway.complete(messages, None)
        # The answer-only pass offers no tools, so anything but text is treated as empty.
        text = final.text if isinstance(final, DirectAnswer) else ""
        return self._finish(text or NO_CONTENT_PLACEHOLDER, messages, tool_called=True)

    def _finish(self, text: str, messages: List[BaseMessage], tool_called: bool = False) -> CycleResult:
        self.state = CycleState.DONE
        return CycleResult(text=text, state=self.state, messages=list(messages), tool_called=tool_called)
