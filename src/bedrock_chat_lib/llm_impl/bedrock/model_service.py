"""Builds the list of chat models offered to the host from the Bedrock catalogue."""

import asyncio
from typing import List, Optional, Set

from pydantic import BaseModel

from bedrock_chat_lib.llm_core.base import ModelInfo
from bedrock_chat_lib.llm_core.logger import get_logger
from bedrock_chat_lib.llm_impl.openrouter import OpenRouterClient
from .config import BedrockSettings
from .transport import BedrockCredentials, FoundationModelCatalog, FoundationModelSummary

logger = get_logger(__name__)

DEFAULT_MAX_OUTPUT_TOKENS = 4096
DEFAULT_CONTEXT_LENGTH = 200000


class ChatEndpoint(BaseModel):
    model: str
    model_max_prompt_tokens: int


class ModelService:
    """
    Manages model information, capabilities and metadata.

    Combines the Bedrock foundation model catalogue (what can be called, and
    under which id) with OpenRouter metadata (how large the context is and
    whether the model can reason).
    """

    def __init__(
        self,
        settings: BedrockSettings,
        catalog: FoundationModelCatalog,
        capabilities: Optional[OpenRouterClient] = None,
    ) -> None:
        self.settings = settings
        self.catalog = catalog
        self.capabilities = capabilities or OpenRouterClient()
        self.chat_endpoints: List[ChatEndpoint] = []

    def handle_configuration_change(self, settings: BedrockSettings) -> None:
        self.settings = settings
        logger.info(f"Configuration changed, region updated to: {settings.region}")

    def get_chat_endpoints(self) -> List[ChatEndpoint]:
        """Prompt budgets of the models returned by the last listing."""
        return list(self.chat_endpoints)

    async def get_chat_information(self, credentials: BedrockCredentials) -> List[ModelInfo]:
        """
        Lists streaming text models, preferring cross-region inference profiles.

        Args:
            credentials: Credentials passed to the catalogue.

        Returns:
            Model descriptions for the host. Empty if the catalogue call fails.
        """
        region = self.settings.region
        try:
            models, profile_ids = await asyncio.gather(
                self.catalog.list_foundation_models(credentials, region),
                self._list_profiles(credentials, region),
            )
        except Exception as e:
            logger.error(f"Failed to fetch Bedrock models: {e}", exc_info=True)
            return []

        infos: List[ModelInfo] = []
        for summary in models:
            if not summary.response_streaming_supported or "TEXT" not in summary.output_modalities:
                continue
            infos.append(await self._build_model_info(summary, profile_ids))

        self.chat_endpoints = [
            ChatEndpoint(model=info.id, model_max_prompt_tokens=info.max_input_tokens + info.max_output_tokens)
            for info in infos
        ]
        logger.info(f"Prepared {len(infos)} Bedrock chat models for region {region}")
        return infos

    async def _list_profiles(self, credentials: BedrockCredentials, region: str) -> Set[str]:
        try:
            return await self.catalog.list_inference_profiles(credentials, region)
        except Exception as e:
            # Cross-region profiles are optional, fall back to plain model ids
            logger.error(f"Failed to fetch inference profiles: {e}")
            return set()

    async def _build_model_info(self, summary: FoundationModelSummary, profile_ids: Set[str]) -> ModelInfo:
        profile_id = f"{self.settings.region_prefix}.{summary.model_id}"
        has_profile = profile_id in profile_ids
        model_id = profile_id if has_profile else summary.model_id

        properties = await self.capabilities.get_model_properties(model_id)
        max_input = (properties.context_length if properties else None) or DEFAULT_CONTEXT_LENGTH
        max_output = (properties.max_output_tokens if properties else None) or DEFAULT_MAX_OUTPUT_TOKENS

        return ModelInfo(
            id=model_id,
            name=summary.model_name or summary.model_id,
            max_input_tokens=max_input,
            max_output_tokens=max_output,
            tool_calling=True,
            image_input="IMAGE" in summary.input_modalities,
            tooltip=f"AWS Bedrock - {summary.provider_name}{' (Cross-Region)' if has_profile else ''}",
            detail=f"{summary.provider_name} • {'Multi-Region' if has_profile else self.settings.region}",
        )

    async def supports_thinking(self, model_id: str) -> bool:
        """True if thinking is enabled in the settings and the model supports reasoning."""
        if self.settings.thinking_config() is None:
            return False
        return await self.capabilities.supports_thinking(model_id)
