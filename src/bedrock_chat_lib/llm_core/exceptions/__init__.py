"""Export the exception hierarchy used across validation, conversion and dispatch."""

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

__all__ = [
    "BedrockChatError",
    "InvalidRequestError",
    "InvalidToolNameError",
    "ToolPairingError",
    "ToolChoiceError",
    "TooManyToolsError",
    "TokenLimitExceededError",
    "AuthenticationError",
    "MetadataFetchError",
]
