"""Per-model conversion policies for the Bedrock Converse API."""

from dataclasses import dataclass
from typing import Literal, Tuple

ToolResultFormat = Literal["text", "json"]


@dataclass(frozen=True)
class ModelProfile:
    """Conversion policy selected by model id.

    Attributes:
        tool_result_format: Whether tool results are sent as ``text`` blocks or
            as structured ``json`` blocks.
        supports_tool_choice: Whether the model accepts a ``toolChoice`` setting.
    """

    tool_result_format: ToolResultFormat = "text"
    supports_tool_choice: bool = True


DEFAULT_PROFILE = ModelProfile()

# Matched in order against the model id with any cross-region prefix removed.
_PROFILES: Tuple[Tuple[str, ModelProfile], ...] = (
    ("anthropic.", ModelProfile(tool_result_format="text", supports_tool_choice=True)),
    ("amazon.nova", ModelProfile(tool_result_format="json", supports_tool_choice=True)),
    ("mistral.", ModelProfile(tool_result_format="json", supports_tool_choice=True)),
    ("cohere.", ModelProfile(tool_result_format="json", supports_tool_choice=True)),
    ("meta.", ModelProfile(tool_result_format="text", supports_tool_choice=False)),
    ("ai21.", ModelProfile(tool_result_format="text", supports_tool_choice=False)),
)

_REGION_PREFIXES = ("us.", "eu.", "ap.", "apac.", "global.", "us-gov.", "ca.", "jp.", "au.")


def strip_region_prefix(model_id: str) -> str:
    """Removes a cross-region inference profile prefix such as ``us.``."""
    lowered = model_id.lower()
    for prefix in _REGION_PREFIXES:
        if lowered.startswith(prefix):
            return model_id[len(prefix):]
    return model_id


def get_model_profile(model_id: str) -> ModelProfile:
    base_id = strip_region_prefix(model_id).lower()
    for prefix, profile in _PROFILES:
        if base_id.startswith(prefix):
            return profile
    return DEFAULT_PROFILE
