"""Collect concrete model backend implementations and their provider-specific tool registries."""

from .openai_api import OpenAIGateway, OpenAIToolRegistry

__all__ = [
    "OpenAIGateway",
    "OpenAIToolRegistry",
]
