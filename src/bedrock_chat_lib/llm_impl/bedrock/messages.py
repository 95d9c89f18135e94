"""Convert provider-agnostic chat messages into Converse API messages."""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from bedrock_chat_lib.llm_core.logger import get_logger
from bedrock_chat_lib.llm_core.messages import (
    ChatMessage,
    ImagePart,
    TextPart,
    ToolCallPart,
    ToolResultPart,
)
from .profiles import ModelProfile, get_model_profile
from .tool_buffer import generate_call_id

logger = get_logger(__name__)

SUPPORTED_IMAGE_FORMATS = frozenset({"png", "jpeg", "gif", "webp"})

Block = Dict[str, Any]


@dataclass
class ConvertedMessages:
    """Result of converting a generic conversation.

    Attributes:
        messages: Converse ``messages`` array, user and assistant roles only.
        system: Converse ``system`` blocks extracted from system-role text.
    """

    messages: List[Dict[str, Any]] = field(default_factory=list)
    system: List[Block] = field(default_factory=list)


class _ToolResultBatch:
    """Collects tool results answering one assistant turn into a single user message.

    The batch is either open (holding results) or flushed (empty). A message
    that is not made exclusively of tool results closes an open batch before it
    is converted itself.
    """

    def __init__(self) -> None:
        self._results: List[Block] = []
        self._trailing: List[Block] = []

    @property
    def is_open(self) -> bool:
        return bool(self._results)

    def add(self, results: Sequence[Block], trailing: Sequence[Block] = ()) -> None:
        self._results.extend(results)
        self._trailing.extend(trailing)

    def flush_into(self, out: List[Dict[str, Any]]) -> None:
        if not self._results:
            return
        # Tool results lead the message; extra user content goes after them.
        out.append({"role": "user", "content": self._results + self._trailing})
        self._results = []
        self._trailing = []


def convert_messages(messages: Sequence[ChatMessage], model_id: str) -> ConvertedMessages:
    """
    Converts generic chat messages to Converse messages and system blocks.

    Args:
        messages: The ordered conversation.
        model_id: Bedrock model id; selects the tool-result format.

    Returns:
        The converted messages and system blocks.
    """
    profile = get_model_profile(model_id)
    converted = ConvertedMessages()
    batch = _ToolResultBatch()

    for message in messages:
        if batch.is_open and not message.is_tool_result_only():
            batch.flush_into(converted.messages)

        text_parts: List[str] = []
        images: List[Block] = []
        tool_uses: List[Block] = []
        tool_results: List[Block] = []

        for part in message.content:
            if isinstance(part, TextPart):
                if message.role == "system":
                    converted.system.append({"text": part.value})
                else:
                    text_parts.append(part.value)
            elif isinstance(part, ImagePart):
                block = _convert_image(part)
                if block is not None:
                    images.append(block)
            elif isinstance(part, ToolCallPart):
                tool_uses.append(_convert_tool_call(part))
            elif isinstance(part, ToolResultPart):
                tool_results.append(_convert_tool_result(part, profile))

        if message.role == "system":
            continue

        text = "".join(text_parts)
        leading: List[Block] = [{"text": text}] if text else []

        if tool_results:
            if message.role != "user":
                logger.warning(f"Tool results found in a '{message.role}' message; sending them as user content.")
            batch.add(tool_results, trailing=leading + images)
            continue

        if tool_uses and message.role == "assistant":
            converted.messages.append({"role": "assistant", "content": leading + images + tool_uses})
            continue

        if tool_uses:
            logger.warning("Ignoring tool calls in a user message.")

        if leading or images:
            converted.messages.append({"role": message.role, "content": leading + images})

    batch.flush_into(converted.messages)
    return converted


def _convert_image(part: ImagePart) -> Optional[Block]:
    mime_type = part.mime_type.lower()
    if not mime_type.startswith("image/"):
        logger.warning(f"Skipping non-image data part with MIME type '{part.mime_type}'.")
        return None

    image_format = mime_type.split("/", 1)[1]
    if image_format == "jpg":
        image_format = "jpeg"
    if image_format not in SUPPORTED_IMAGE_FORMATS:
        logger.warning(f"Unsupported image format: {image_format}")
        return None

    logger.debug(f"Added image block with format: {image_format}")
    return {"image": {"format": image_format, "source": {"bytes": part.data}}}


def _convert_tool_call(part: ToolCallPart) -> Block:
    return {
        "toolUse": {
            "toolUseId": part.call_id or generate_call_id(),
            "name": part.name,
            "input": part.input or {},
        }
    }


def _convert_tool_result(part: ToolResultPart, profile: ModelProfile) -> Block:
    result_text = part.text
    logger.debug(f"Tool result text length {len(result_text)} for ID {part.call_id}")

    content: List[Block] = [{"text": result_text}]
    if profile.tool_result_format == "json":
        try:
            parsed = json.loads(result_text)
        except ValueError:
            logger.error("Failed to parse tool result as JSON, using text format")
        else:
            content = [{"json": parsed}]

    return {"toolResult": {"toolUseId": part.call_id, "content": content}}
