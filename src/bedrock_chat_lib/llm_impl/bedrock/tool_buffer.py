"""Reassembles streamed tool-use blocks into complete tool call parts."""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional, Set

from bedrock_chat_lib.llm_core.base import Progress
from bedrock_chat_lib.llm_core.logger import get_logger
from bedrock_chat_lib.llm_core.messages import ToolCallPart
from .schema_sanitizer import try_parse_json_object

logger = get_logger(__name__)

SNIPPET_LENGTH = 200


@dataclass
class _PendingToolCall:
    """Argument text accumulated for one content block index."""

    id: Optional[str] = None
    name: Optional[str] = None
    args: str = ""


def _normalize_numbers(value: Any) -> Any:
    """Collapses integral floats to ints so ``1`` and ``1.0`` compare equal."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, dict):
        return {key: _normalize_numbers(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_normalize_numbers(item) for item in value]
    return value


def canonical_key(name: str, arguments: Dict[str, Any]) -> str:
    """Deterministic identity of a tool call, independent of key order, whitespace and number spelling."""
    normalized = _normalize_numbers(arguments)
    return f"{name}:{json.dumps(normalized, sort_keys=True, separators=(',', ':'), ensure_ascii=False)}"


def generate_call_id() -> str:
    return f"call_{uuid.uuid4().hex[:8]}"


class ToolCallBuffer:
    """
    Accumulates tool input fragments per content block index.

    A tool call is emitted as soon as its accumulated arguments parse as a JSON
    object, or is force-attempted at block/message stop. Each index is emitted at
    most once, and calls whose name and arguments match an earlier emission in
    the same stream are dropped. The state belongs to a single stream and must be
    reset between requests.
    """

    def __init__(self, model_id: str = "") -> None:
        self.model_id = model_id
        self._buffers: Dict[int, _PendingToolCall] = {}
        self._completed: Set[int] = set()
        self._emitted_keys: Set[str] = set()
        self._has_text = False
        self._first_tool = True

    def reset(self) -> None:
        self._buffers.clear()
        self._completed.clear()
        self._emitted_keys.clear()
        self._has_text = False
        self._first_tool = True

    @property
    def open_indices(self) -> list[int]:
        return list(self._buffers)

    def start_tool_call(self, index: int, tool_use_id: Optional[str], name: Optional[str]) -> None:
        if index in self._completed:
            logger.debug(f"Ignoring tool start for already completed block index {index}.")
            return
        self._buffers[index] = _PendingToolCall(id=tool_use_id or None, name=name or None)

    def append_args(self, index: int, fragment: str) -> None:
        buf = self._buffers.get(index)
        if buf is not None:
            buf.args += fragment

    def mark_has_text(self) -> None:
        self._has_text = True

    def should_add_space_before_first_tool(self) -> bool:
        return self._has_text and self._first_tool

    def mark_first_tool_emitted(self) -> None:
        self._first_tool = False

    def try_emit(self, index: int, progress: Progress, force: bool = False) -> bool:
        """Attempts to emit the tool call buffered at ``index``.

        Args:
            index: Content block index of the tool call.
            progress: Sink that receives the completed ToolCallPart.
            force: Set at block/message stop; an unparsable buffer is then logged.

        Returns:
            True if the index was completed by this call (emitted or deduplicated).
        """
        buf = self._buffers.get(index)
        if buf is None or index in self._completed or not buf.name:
            return False

        arguments = try_parse_json_object(buf.args)
        if arguments is None:
            if force:
                logger.error(
                    "Invalid JSON for tool call '%s' (model '%s', block index %d): %r",
                    buf.name,
                    self.model_id,
                    index,
                    buf.args[:SNIPPET_LENGTH],
                )
                del self._buffers[index]
                self._completed.add(index)
            return False

        key = canonical_key(buf.name, arguments)
        del self._buffers[index]
        self._completed.add(index)

        if key in self._emitted_keys:
            logger.debug(f"Skipping duplicate tool call '{buf.name}' at block index {index}.")
            return True

        self._emitted_keys.add(key)
        call_id = buf.id or generate_call_id()
        logger.debug(f"Emitting tool call '{buf.name}' ({call_id}) from block index {index}.")
        progress.report(ToolCallPart(call_id=call_id, name=buf.name, input=arguments))
        return True

    def emit_all(self, progress: Progress) -> None:
        """Force-attempts emission of every still open index."""
        for index in list(self._buffers):
            self.try_emit(index, progress, force=True)
