"""Bedrock chat provider tying together model listing, chat handling and token counting."""

from typing import List, Optional, Sequence, Union

from bedrock_chat_lib.llm_core.base import CancellationToken, ChatProvider, ModelInfo, Progress
from bedrock_chat_lib.llm_core.exceptions import AuthenticationError
from bedrock_chat_lib.llm_core.logger import get_logger
from bedrock_chat_lib.llm_core.messages import ChatMessage
from bedrock_chat_lib.llm_core.tools import RequestOptions
from bedrock_chat_lib.llm_impl.openrouter import OpenRouterClient
from .config import BedrockSettings
from .core import BedrockChatHandler
from .model_service import ChatEndpoint, ModelService
from .token_estimator import TokenEstimator
from .transport import BedrockCredentials, ConverseStreamClient, FoundationModelCatalog

logger = get_logger(__name__)


class BedrockChatProvider(ChatProvider):
    """
    Implementation of ChatProvider for AWS Bedrock.

    Credentials are derived from the current settings on each call and passed
    explicitly to the transport; nothing is stored in process-wide state.
    """

    def __init__(
        self,
        settings: BedrockSettings,
        client: ConverseStreamClient,
        catalog: FoundationModelCatalog,
        capabilities: Optional[OpenRouterClient] = None,
    ) -> None:
        """
        Initializes the provider.

        Args:
            settings: Provider settings.
            client: Transport for ConverseStream calls.
            catalog: Transport for foundation model and inference profile listing.
            capabilities: Capability resolver. A default OpenRouterClient is used if omitted.
        """
        self.settings = settings
        self.model_service = ModelService(settings, catalog, capabilities)
        self.chat_handler = BedrockChatHandler(settings, client, self.model_service)
        self.token_estimator = TokenEstimator()
        logger.info(f"Initialized BedrockChatProvider for region '{settings.region}'")

    def handle_configuration_change(self, settings: BedrockSettings) -> None:
        self.settings = settings
        self.model_service.handle_configuration_change(settings)
        self.chat_handler.handle_configuration_change(settings)

    def credentials(self) -> BedrockCredentials:
        return BedrockCredentials.from_settings(self.settings)

    async def provide_chat_information(self, silent: bool = False) -> List[ModelInfo]:
        try:
            credentials = self.credentials()
        except AuthenticationError:
            if not silent:
                logger.warning("Bedrock authentication is not configured; no models available.")
            return []
        return await self.model_service.get_chat_information(credentials)

    def get_chat_endpoints(self) -> List[ChatEndpoint]:
        return self.model_service.get_chat_endpoints()

    async def provide_chat_response(
        self,
        model: ModelInfo,
        messages: Sequence[ChatMessage],
        options: RequestOptions,
        progress: Progress,
        token: CancellationToken,
    ) -> None:
        await self.chat_handler.handle_chat_request(model, messages, options, progress, token, self.credentials())

    async def provide_token_count(self, model: ModelInfo, text: Union[str, ChatMessage]) -> int:
        return self.token_estimator.estimate_tokens(text)
