"""Bedrock Chat Library - adapts a generic tool-calling chat interface to the Bedrock Converse stream."""

from .llm_core import (
    ChatProvider,
    ModelInfo,
    CancellationToken,
    CollectingProgress,
    ChatMessage,
    TextPart,
    ThinkingPart,
    ImagePart,
    ToolCallPart,
    ToolResultPart,
    ToolDeclaration,
    RequestOptions,
    get_logger,
    setup_logging,
)
from .llm_impl import BedrockChatProvider, BedrockChatHandler, BedrockSettings, OpenRouterClient

__all__ = [
    "ChatProvider",
    "ModelInfo",
    "CancellationToken",
    "CollectingProgress",
    "ChatMessage",
    "TextPart",
    "ThinkingPart",
    "ImagePart",
    "ToolCallPart",
    "ToolResultPart",
    "ToolDeclaration",
    "RequestOptions",
    "get_logger",
    "setup_logging",
    "BedrockChatProvider",
    "BedrockChatHandler",
    "BedrockSettings",
    "OpenRouterClient",
]
