"""Consumes a Converse event stream and reports generic response parts."""

from typing import Any, AsyncIterable, Dict, Optional

from bedrock_chat_lib.llm_core.base import CancellationToken, Progress, SafeProgress
from bedrock_chat_lib.llm_core.logger import get_logger
from bedrock_chat_lib.llm_core.messages import TextPart, ThinkingPart
from .tool_buffer import ToolCallBuffer

logger = get_logger(__name__)


class StreamProcessor:
    """
    Translates Converse stream events into Text, Thinking and ToolCall parts.

    Text and reasoning deltas are forwarded immediately; tool input deltas go
    through a ToolCallBuffer. One instance handles one stream at a time: its state
    is reset when a stream starts and again on every exit path, so it can be
    reused for sequential requests but not shared by concurrent ones.
    """

    def __init__(self, tool_buffer: Optional[ToolCallBuffer] = None) -> None:
        self.tool_buffer = tool_buffer or ToolCallBuffer()

    def reset(self) -> None:
        self.tool_buffer.reset()

    async def process_stream(
        self,
        stream: AsyncIterable[Dict[str, Any]],
        progress: Progress,
        token: Optional[CancellationToken] = None,
        model_id: str = "",
    ) -> None:
        """Drives the stream to completion, cancellation or failure.

        Args:
            stream: Async iterable of Converse stream events.
            progress: Sink for response parts. Failures inside ``report`` are logged and ignored.
            token: Checked once per event; cancellation stops consumption immediately
                without flushing partially buffered tool calls.
            model_id: Model id, used in diagnostics.
        """
        self.reset()
        self.tool_buffer.model_id = model_id
        sink = SafeProgress(progress, model_id)
        event_count = 0

        try:
            async for event in stream:
                if token is not None and token.is_cancellation_requested:
                    logger.info(f"Cancellation requested after {event_count} events; stopping stream.")
                    break
                event_count += 1
                self._handle_event(event, sink)
        finally:
            self.reset()
            logger.debug(f"Stream processing finished after {event_count} events.")

    def _handle_event(self, event: Dict[str, Any], sink: Progress) -> None:
        if "contentBlockStart" in event:
            self._on_block_start(event["contentBlockStart"] or {}, sink)
        elif "contentBlockDelta" in event:
            self._on_block_delta(event["contentBlockDelta"] or {}, sink)
        elif "contentBlockStop" in event:
            index = (event["contentBlockStop"] or {}).get("contentBlockIndex") or 0
            self.tool_buffer.try_emit(index, sink, force=True)
        elif "messageStop" in event:
            self.tool_buffer.emit_all(sink)
        else:
            logger.debug(f"Ignoring stream event with keys {sorted(event)}.")

    def _on_block_start(self, payload: Dict[str, Any], sink: Progress) -> None:
        index = payload.get("contentBlockIndex") or 0
        tool_use = (payload.get("start") or {}).get("toolUse")
        if not tool_use:
            return

        if self.tool_buffer.should_add_space_before_first_tool():
            sink.report(TextPart(value=" "))
        self.tool_buffer.start_tool_call(index, tool_use.get("toolUseId"), tool_use.get("name"))
        self.tool_buffer.mark_first_tool_emitted()

    def _on_block_delta(self, payload: Dict[str, Any], sink: Progress) -> None:
        index = payload.get("contentBlockIndex") or 0
        delta = payload.get("delta") or {}

        thinking = (delta.get("reasoningContent") or {}).get("text")
        if thinking:
            sink.report(ThinkingPart(value=thinking))

        text = delta.get("text")
        if text:
            sink.report(TextPart(value=text))
            self.tool_buffer.mark_has_text()

        fragment = (delta.get("toolUse") or {}).get("input")
        if fragment:
            self.tool_buffer.append_args(index, fragment)
            self.tool_buffer.try_emit(index, sink)
