"""Tool registry abstraction holding the tools discovered from the execution server."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Protocol

from .models import ToolDescriptor
from ..exceptions import ToolNotFoundError
from ..logger import get_logger

logger = get_logger(__name__)


class ToolSource(Protocol):
    """Anything that can list tools, typically the stdio transport."""

    async def list_tools(self) -> List[ToolDescriptor]: ...


class ToolRegistry(ABC):
    """
    A registry of the tools advertised by the connected execution server.

    The registry owns one snapshot of descriptors per connection. Provider
    subclasses translate that snapshot into the function-calling schema
    their backend expects.
    """

    def __init__(self) -> None:
        """Initialize an empty ToolRegistry."""
        self.tools: Dict[str, ToolDescriptor] = {}

    async def refresh(self, source: ToolSource) -> List[ToolDescriptor]:
        """Replace the cached descriptors with a fresh listing from ``source``.

        Failures from the source propagate unchanged.

        Args:
            source: Where to fetch the tools from.

        Returns:
            The descriptors now held by the registry, in server order.
        """
        descriptors = await source.list_tools()

        tools: Dict[str, ToolDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.name in tools:
                logger.warning("Server advertised tool '%s' more than once; keeping the last one.", descriptor.name)
            tools[descriptor.name] = descriptor

        self.tools = tools
        logger.info("Registry refreshed with %d tool(s): %s", len(tools), ", ".join(tools))
        return list(tools.values())

    def get(self, tool_name: str) -> ToolDescriptor:
        """Look up a descriptor by name.

        Raises:
            ToolNotFoundError: If the tool is not registered.
        """
        if tool_name not in self.tools:
            raise ToolNotFoundError(f"Tool '{tool_name}' not found in the registry.")
        return self.tools[tool_name]

    @property
    def names(self) -> List[str]:
        return list(self.tools)

    def __len__(self) -> int:
        return len(self.tools)

    @abstractmethod
    def as_call_schemas(self) -> List[Any]:
        """Translate the descriptors into provider-specific function-call schemas."""
        pass

    @property
    def tool_object(self) -> List[Any]:
        """Constructs the tool payload specific to the LLM provider.

        Returns:
            The provider-specific tool representation.
        """
        return self.as_call_schemas()
