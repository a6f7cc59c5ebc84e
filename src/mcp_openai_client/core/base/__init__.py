"""Re-export the gateway interface and its outcome models used by all providers."""

from .base import (
    ModelGateway,
    GatewayOutcome,
    DirectAnswer,
    ToolCallRequested,
    MAX_TOOL_CALLS_PER_TURN,
    format_backend_error,
)

__all__ = [
    "ModelGateway",
    "GatewayOutcome",
    "DirectAnswer",
    "ToolCallRequested",
    "MAX_TOOL_CALLS_PER_TURN",
    "format_backend_error",
]
