"""Chat request handling for Bedrock models: validate, convert, dispatch and stream."""

from typing import Any, Dict, List, Optional, Sequence

from bedrock_chat_lib.llm_core.base import CancellationToken, ModelInfo, Progress
from bedrock_chat_lib.llm_core.exceptions import TokenLimitExceededError, TooManyToolsError
from bedrock_chat_lib.llm_core.logger import get_logger
from bedrock_chat_lib.llm_core.messages import ChatMessage
from bedrock_chat_lib.llm_core.tools import RequestOptions
from .config import BedrockSettings
from .messages import ConvertedMessages, convert_messages
from .model_service import ModelService
from .stream import StreamProcessor
from .token_estimator import TokenEstimator
from .tools import convert_tools
from .transport import BedrockCredentials, ConverseStreamClient
from .validation import validate_request, validate_tools

logger = get_logger(__name__)

MAX_TOOLS_PER_REQUEST = 128
DEFAULT_MAX_TOKENS = 4096
DEFAULT_TEMPERATURE = 0.7
THINKING_TEMPERATURE = 1.0


class BedrockChatHandler:
    """
    Handles chat requests for Bedrock models.

    Every structural check runs before the transport is touched; a rejected
    request never reaches the network. The stream processor is reused across
    requests, so one handler must not serve two requests concurrently.
    """

    def __init__(
        self,
        settings: BedrockSettings,
        client: ConverseStreamClient,
        model_service: ModelService,
        stream_processor: Optional[StreamProcessor] = None,
        token_estimator: Optional[TokenEstimator] = None,
    ) -> None:
        """
        Initializes the handler.

        Args:
            settings: Provider settings (thinking configuration).
            client: Transport executing ConverseStream calls.
            model_service: Source of reasoning support information.
            stream_processor: Processor for the event stream. A new one is created if omitted.
            token_estimator: Estimator used for the input limit check.
        """
        self.settings = settings
        self.client = client
        self.model_service = model_service
        self.stream_processor = stream_processor or StreamProcessor()
        self.token_estimator = token_estimator or TokenEstimator()

    def handle_configuration_change(self, settings: BedrockSettings) -> None:
        self.settings = settings

    async def handle_chat_request(
        self,
        model: ModelInfo,
        messages: Sequence[ChatMessage],
        options: RequestOptions,
        progress: Progress,
        token: CancellationToken,
        credentials: BedrockCredentials,
    ) -> None:
        """
        Processes a chat request and streams the response into ``progress``.

        Args:
            model: The target model.
            messages: The conversation.
            options: Tools, tool mode and model options.
            progress: Sink for response parts.
            token: Cancellation token, checked once per stream event.
            credentials: Credentials handed to the transport.

        Raises:
            InvalidRequestError: If the request is structurally invalid or too large.
            Exception: Any transport error, after it has been logged.
        """
        try:
            request = await self.build_request(model, messages, options)

            logger.info("Starting streaming request")
            stream = await self.client.converse_stream(credentials, request)

            logger.info("Processing stream events")
            await self.stream_processor.process_stream(stream, progress, token, model_id=model.id)
            logger.info("Finished processing stream")
        except Exception as e:
            logger.error(
                f"Chat request failed for model '{model.id}' with {len(messages)} messages: "
                f"{type(e).__name__}: {e}"
            )
            raise

    async def build_request(
        self, model: ModelInfo, messages: Sequence[ChatMessage], options: RequestOptions
    ) -> Dict[str, Any]:
        """
        Validates the request and builds the ConverseStream request dictionary.

        Args:
            model: The target model.
            messages: The conversation.
            options: Tools, tool mode and model options.

        Returns:
            The request dictionary for the transport.

        Raises:
            InvalidRequestError: If a structural rule or a boundary limit is violated.
        """
        self._log_message_shapes(messages)

        validate_tools(options.tools)
        validate_request(messages)

        if len(options.tools) > MAX_TOOLS_PER_REQUEST:
            msg = f"Cannot have more than {MAX_TOOLS_PER_REQUEST} tools per request."
            logger.error(msg)
            raise TooManyToolsError(msg)

        converted = convert_messages(messages, model.id)
        self._log_converted_shapes(converted)
        tool_config = convert_tools(options, model.id)

        self._check_token_limit(model, messages, tool_config)

        thinking_config = self.settings.thinking_config()
        thinking = thinking_config is not None and await self.model_service.supports_thinking(model.id)

        model_options = options.model_options or {}
        max_tokens = model_options.get("max_tokens") or DEFAULT_MAX_TOKENS
        if thinking:
            # Extended thinking only accepts the default temperature
            temperature = THINKING_TEMPERATURE
        else:
            temperature = model_options.get("temperature")
            if temperature is None:
                temperature = DEFAULT_TEMPERATURE

        inference_config: Dict[str, Any] = {
            "maxTokens": min(max_tokens, model.max_output_tokens),
            "temperature": temperature,
        }

        top_p = model_options.get("top_p")
        if isinstance(top_p, (int, float)) and not isinstance(top_p, bool):
            inference_config["topP"] = top_p

        stop = model_options.get("stop")
        if isinstance(stop, str):
            inference_config["stopSequences"] = [stop]
        elif isinstance(stop, list):
            inference_config["stopSequences"] = list(stop)

        request: Dict[str, Any] = {
            "modelId": model.id,
            "messages": converted.messages,
            "inferenceConfig": inference_config,
        }
        if converted.system:
            request["system"] = converted.system
        if tool_config:
            request["toolConfig"] = tool_config
        if thinking:
            request["additionalModelRequestFields"] = {"thinking": thinking_config}
            logger.info(f"Extended thinking enabled with budget: {self.settings.thinking_budget_tokens}")

        return request

    def _check_token_limit(
        self, model: ModelInfo, messages: Sequence[ChatMessage], tool_config: Optional[Dict[str, Any]]
    ) -> None:
        input_tokens = self.token_estimator.estimate_messages_tokens(messages)
        tool_tokens = self.token_estimator.estimate_tool_tokens(tool_config)
        token_limit = max(1, model.max_input_tokens)
        total = input_tokens + tool_tokens
        if total > token_limit:
            msg = f"Message exceeds token limit ({total} > {token_limit})."
            logger.error(msg)
            raise TokenLimitExceededError(msg)

    @staticmethod
    def _log_message_shapes(messages: Sequence[ChatMessage]) -> None:
        logger.debug(f"Converting messages, count: {len(messages)}")
        for idx, message in enumerate(messages):
            kinds: List[str] = [part.type for part in message.content]
            logger.debug(f"Message {idx} ({message.role}): {kinds}")

    @staticmethod
    def _log_converted_shapes(converted: ConvertedMessages) -> None:
        logger.debug(f"Converted to Bedrock messages: {len(converted.messages)}")
        for idx, message in enumerate(converted.messages):
            kinds = [next(iter(block)) for block in message["content"]]
            logger.debug(f"Bedrock message {idx} ({message['role']}): {kinds}")
