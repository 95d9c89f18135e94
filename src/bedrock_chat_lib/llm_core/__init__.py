"""Public exports for the provider-agnostic chat abstractions and utilities."""

from .base import ChatProvider, ModelInfo, Progress, CancellationToken, CollectingProgress, SafeProgress
from .cache import TTLCache
from .exceptions import (
    BedrockChatError,
    InvalidRequestError,
    InvalidToolNameError,
    ToolPairingError,
    ToolChoiceError,
    TooManyToolsError,
    TokenLimitExceededError,
    AuthenticationError,
    MetadataFetchError,
)
from .logger import get_logger, setup_logging
from .messages import (
    ChatMessage,
    ContentPart,
    ImagePart,
    ResponsePart,
    TextPart,
    ThinkingPart,
    ToolCallPart,
    ToolResultPart,
)
from .tools import ToolDeclaration, RequestOptions, ToolMode

__all__ = [
    "ChatProvider",
    "ModelInfo",
    "Progress",
    "CancellationToken",
    "CollectingProgress",
    "SafeProgress",
    "TTLCache",
    "BedrockChatError",
    "InvalidRequestError",
    "InvalidToolNameError",
    "ToolPairingError",
    "ToolChoiceError",
    "TooManyToolsError",
    "TokenLimitExceededError",
    "AuthenticationError",
    "MetadataFetchError",
    "get_logger",
    "setup_logging",
    "ChatMessage",
    "ContentPart",
    "ImagePart",
    "ResponsePart",
    "TextPart",
    "ThinkingPart",
    "ToolCallPart",
    "ToolResultPart",
    "ToolDeclaration",
    "RequestOptions",
    "ToolMode",
]
