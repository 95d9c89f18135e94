"""Collect concrete provider implementations and their capability sources."""

from .bedrock import BedrockChatProvider, BedrockChatHandler, BedrockSettings
from .openrouter import OpenRouterClient

__all__ = [
    "BedrockChatProvider",
    "BedrockChatHandler",
    "BedrockSettings",
    "OpenRouterClient",
]
