"""Generic tool declaration and request option models."""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

ToolMode = Literal["auto", "required"]


class ToolDeclaration(BaseModel):
    """
    Represents a tool offered to the model by the host chat surface.

    Attributes:
        name: The name of the tool as the model will call it.
        description: A brief description of what the tool does.
        input_schema: A JSON schema describing the tool's input object. It may
                      use any JSON-schema keywords; provider adapters sanitize it.
    """

    name: str
    description: Optional[str] = None
    input_schema: Optional[Dict[str, Any]] = None


class RequestOptions(BaseModel):
    """
    Per-request options supplied alongside the message list.

    Attributes:
        tools: Tools the model may call.
        tool_mode: ``auto`` lets the model decide; ``required`` forces a call to the single declared tool.
        model_options: Free-form model options such as ``max_tokens``, ``temperature``, ``top_p`` and ``stop``.
    """

    tools: List[ToolDeclaration] = Field(default_factory=list)
    tool_mode: ToolMode = "auto"
    model_options: Dict[str, Any] = Field(default_factory=dict)
