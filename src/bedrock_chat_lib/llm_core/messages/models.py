"""Provider-agnostic message and response part models.

Content parts form an explicit tagged union discriminated by ``type`` so that
callers build the right variant at the boundary and the converters never have
to guess a part's shape.
"""

from typing import Annotated, Any, Dict, List, Literal, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field


class TextPart(BaseModel):
    """Plain text content.

    Attributes:
        value: The text payload.
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    value: str


class ThinkingPart(BaseModel):
    """Reasoning text streamed by models with extended thinking enabled."""

    model_config = ConfigDict(frozen=True)

    type: Literal["thinking"] = "thinking"
    value: str


class ImagePart(BaseModel):
    """Binary image content.

    Attributes:
        mime_type: MIME type of the image, e.g. ``image/png``.
        data: Raw image bytes.
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["image"] = "image"
    mime_type: str
    data: bytes


class ToolCallPart(BaseModel):
    """A request by the assistant to invoke a tool.

    Attributes:
        call_id: Identifier that pairs the call with its result.
        name: Name of the tool to invoke.
        input: Parsed JSON object with the tool arguments.
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["tool_call"] = "tool_call"
    call_id: str
    name: str
    input: Dict[str, Any] = Field(default_factory=dict)


class ToolResultPart(BaseModel):
    """The outcome of a tool invocation, sent back by the user side.

    Attributes:
        call_id: Identifier of the tool call this result answers.
        content: Text fragments making up the result.
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["tool_result"] = "tool_result"
    call_id: str
    content: List[TextPart] = Field(default_factory=list)

    @property
    def text(self) -> str:
        """Concatenated text of all result fragments."""
        return "".join(part.value for part in self.content)


ContentPart = Annotated[
    Union[TextPart, ImagePart, ToolCallPart, ToolResultPart],
    Field(discriminator="type"),
]

ResponsePart = Union[TextPart, ThinkingPart, ToolCallPart]

ChatRole = Literal["user", "assistant", "system"]


class ChatMessage(BaseModel):
    """A single message of a multi-turn conversation.

    Attributes:
        role: Author of the message.
        content: Ordered content parts.
    """

    model_config = ConfigDict(frozen=True)

    role: ChatRole
    content: List[ContentPart] = Field(default_factory=list)

    @classmethod
    def user(cls, *parts: Union[str, TextPart, ImagePart, ToolResultPart]) -> "ChatMessage":
        """Build a user message; plain strings become text parts."""
        return cls(role="user", content=_coerce_parts(parts))

    @classmethod
    def assistant(cls, *parts: Union[str, TextPart, ImagePart, ToolCallPart]) -> "ChatMessage":
        """Build an assistant message; plain strings become text parts."""
        return cls(role="assistant", content=_coerce_parts(parts))

    @classmethod
    def system(cls, text: str) -> "ChatMessage":
        """Build a system message carrying a single text part."""
        return cls(role="system", content=[TextPart(value=text)])

    @property
    def tool_calls(self) -> List[ToolCallPart]:
        return [part for part in self.content if isinstance(part, ToolCallPart)]

    @property
    def tool_results(self) -> List[ToolResultPart]:
        return [part for part in self.content if isinstance(part, ToolResultPart)]

    def is_tool_result_only(self) -> bool:
        """True if this is a user message made exclusively of tool results."""
        return self.role == "user" and bool(self.content) and all(isinstance(part, ToolResultPart) for part in self.content)


def _coerce_parts(parts: Sequence[Any]) -> List[Any]:
    return [TextPart(value=part) if isinstance(part, str) else part for part in parts]
