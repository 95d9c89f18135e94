"""Bedrock Converse implementation."""

from .config import BedrockSettings
from .core import BedrockChatHandler
from .messages import ConvertedMessages, convert_messages
from .model_service import ChatEndpoint, ModelService
from .provider import BedrockChatProvider
from .schema_sanitizer import sanitize_schema, sanitize_function_name, sanitize_tool_schema
from .stream import StreamProcessor
from .tool_buffer import ToolCallBuffer
from .tools import convert_tools
from .transport import BedrockCredentials, ConverseStreamClient, FoundationModelCatalog, FoundationModelSummary
from .validation import validate_request, validate_tools

__all__ = [
    "BedrockSettings",
    "BedrockChatHandler",
    "ConvertedMessages",
    "convert_messages",
    "ChatEndpoint",
    "ModelService",
    "BedrockChatProvider",
    "sanitize_schema",
    "sanitize_function_name",
    "sanitize_tool_schema",
    "StreamProcessor",
    "ToolCallBuffer",
    "convert_tools",
    "BedrockCredentials",
    "ConverseStreamClient",
    "FoundationModelCatalog",
    "FoundationModelSummary",
    "validate_request",
    "validate_tools",
]
