"""Structural checks applied to a request before it is converted and sent."""

import re
from typing import Sequence

from bedrock_chat_lib.llm_core.exceptions import InvalidRequestError, InvalidToolNameError, ToolPairingError
from bedrock_chat_lib.llm_core.logger import get_logger
from bedrock_chat_lib.llm_core.messages import ChatMessage, ToolResultPart
from bedrock_chat_lib.llm_core.tools import ToolDeclaration

logger = get_logger(__name__)

_TOOL_NAME_PATTERN = re.compile(r"[\w-]+", re.ASCII)

_PAIRING_ERROR = (
    "Invalid request: Tool call part must be followed by a User message with a tool result part "
    "with a matching call id."
)


def validate_tools(tools: Sequence[ToolDeclaration]) -> None:
    """Ensures every tool name uses only letters, digits, hyphens and underscores.

    Raises:
        InvalidToolNameError: If a name contains any other character.
    """
    for tool in tools:
        if not _TOOL_NAME_PATTERN.fullmatch(tool.name):
            msg = (
                f'Invalid tool name "{tool.name}": only alphanumeric characters, hyphens, '
                "and underscores are allowed."
            )
            logger.error(msg)
            raise InvalidToolNameError(msg)


def validate_request(messages: Sequence[ChatMessage]) -> None:
    """
    Checks the tool call / tool result pairing of a conversation.

    Every assistant message with tool calls must be followed by user messages
    consisting only of tool results until each of its call ids has been answered.

    Args:
        messages: The conversation to check.

    Raises:
        InvalidRequestError: If the conversation is empty.
        ToolPairingError: If a tool call is left unanswered or another part interleaves.
    """
    if not messages:
        msg = "Invalid request: no messages."
        logger.error(msg)
        raise InvalidRequestError(msg)

    for i, message in enumerate(messages):
        if message.role != "assistant":
            continue

        pending = {call.call_id for call in message.tool_calls}
        next_index = i + 1
        while pending:
            if next_index >= len(messages) or messages[next_index].role != "user":
                logger.error(f"Missing tool result for call IDs: {sorted(pending)}")
                raise ToolPairingError(_PAIRING_ERROR)

            for part in messages[next_index].content:
                if not isinstance(part, ToolResultPart):
                    logger.error(f"Expected tool result part, got: {type(part).__name__}")
                    raise ToolPairingError(_PAIRING_ERROR)
                pending.discard(part.call_id)
            next_index += 1
