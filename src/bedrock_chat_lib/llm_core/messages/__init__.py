"""Expose provider-agnostic message and response part types shared by chat providers."""

from .models import (
    ChatMessage,
    ChatRole,
    ContentPart,
    ImagePart,
    ResponsePart,
    TextPart,
    ThinkingPart,
    ToolCallPart,
    ToolResultPart,
)

__all__ = [
    "ChatMessage",
    "ChatRole",
    "ContentPart",
    "ImagePart",
    "ResponsePart",
    "TextPart",
    "ThinkingPart",
    "ToolCallPart",
    "ToolResultPart",
]
