"""Character based token estimation (roughly four characters per token)."""

import json
import math
from typing import Any, Dict, Optional, Sequence, Union

from bedrock_chat_lib.llm_core.logger import get_logger
from bedrock_chat_lib.llm_core.messages import ChatMessage, TextPart

logger = get_logger(__name__)

CHARS_PER_TOKEN = 4


class TokenEstimator:
    """Estimates token counts without a tokenizer. Only text parts are counted."""

    @staticmethod
    def estimate_text(text: str) -> int:
        return math.ceil(len(text) / CHARS_PER_TOKEN)

    def estimate_tokens(self, text: Union[str, ChatMessage]) -> int:
        if isinstance(text, str):
            return self.estimate_text(text)
        return sum(self.estimate_text(part.value) for part in text.content if isinstance(part, TextPart))

    def estimate_messages_tokens(self, messages: Sequence[ChatMessage]) -> int:
        return sum(self.estimate_tokens(message) for message in messages)

    def estimate_tool_tokens(self, tool_config: Optional[Dict[str, Any]]) -> int:
        if not tool_config or not tool_config.get("tools"):
            return 0
        try:
            serialized = json.dumps(tool_config)
        except (TypeError, ValueError) as e:
            logger.warning(f"Could not serialize tool config for token estimation: {e}")
            return 0
        return self.estimate_text(serialized)
