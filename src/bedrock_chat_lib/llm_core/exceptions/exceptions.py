"""
Custom exception classes for the Bedrock chat adapter.

This module defines the hierarchy of exceptions raised while validating,
converting and dispatching chat requests. Recoverable conditions (malformed
streamed tool arguments, duplicate tool calls, metadata fetch failures, sink
failures) are logged by the library and never surface as exceptions.
"""


class BedrockChatError(Exception):
    """Base exception for all adapter errors."""

    pass


class InvalidRequestError(BedrockChatError):
    """Raised when a request violates a structural rule and must not be sent."""

    pass


class InvalidToolNameError(InvalidRequestError):
    """Raised when a tool name contains characters outside ``[A-Za-z0-9_-]``."""

    pass


class ToolPairingError(InvalidRequestError):
    """Raised when a tool call is not answered by a matching, correctly ordered tool result."""

    pass


class ToolChoiceError(InvalidRequestError):
    """Raised when the tool mode requires a single tool but several are declared."""

    pass


class TooManyToolsError(InvalidRequestError):
    """Raised when more tools are declared than the vendor accepts per request."""

    pass


class TokenLimitExceededError(InvalidRequestError):
    """Raised when the estimated input exceeds the model's input token limit."""

    pass


class AuthenticationError(BedrockChatError):
    """Raised when the configured authentication method is incomplete."""

    pass


class MetadataFetchError(BedrockChatError):
    """Raised when the model metadata catalogue cannot be retrieved."""

    pass
