"""Core abstractions for chat provider implementations."""

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence, Union

from pydantic import BaseModel

from ..messages import ChatMessage
from ..tools import RequestOptions
from .progress import Progress, CancellationToken


class ModelInfo(BaseModel):
    """Describes a chat model as exposed to the host chat surface.

    Attributes:
        id: Identifier used when sending requests (may be a cross-region profile id).
        name: Human readable model name.
        family: Model family shown by the host.
        version: Version string shown by the host.
        max_input_tokens: Advertised input token limit.
        max_output_tokens: Advertised output token limit.
        tool_calling: Whether the model accepts tool declarations.
        image_input: Whether the model accepts image parts.
        tooltip: Short description for the host UI.
        detail: Secondary description for the host UI.
    """

    id: str
    name: str
    family: str = "bedrock"
    version: str = "1.0.0"
    max_input_tokens: int
    max_output_tokens: int
    tool_calling: bool = True
    image_input: bool = False
    tooltip: Optional[str] = None
    detail: Optional[str] = None


class ChatProvider(ABC):
    """Abstract base class for chat provider implementations.

    A provider lists the models it serves, streams responses for chat requests
    into a progress sink and estimates token counts for the host.
    """

    @abstractmethod
    async def provide_chat_information(self, silent: bool = False) -> List[ModelInfo]:
        """Returns the models this provider can serve."""
        pass

    @abstractmethod
    async def provide_chat_response(
        self,
        model: ModelInfo,
        messages: Sequence[ChatMessage],
        options: RequestOptions,
        progress: Progress,
        token: CancellationToken,
    ) -> None:
        """Streams the response for ``messages`` into ``progress``."""
        pass

    @abstractmethod
    async def provide_token_count(self, model: ModelInfo, text: Union[str, ChatMessage]) -> int:
        """Estimates the token count of a string or message."""
        pass

    def handle_configuration_change(self, *args: Any, **kwargs: Any) -> None:
        """Hook invoked when the host configuration changes. No-op by default."""
        pass
