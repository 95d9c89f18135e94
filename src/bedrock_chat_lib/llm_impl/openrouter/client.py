"""
Client for model capability metadata published by OpenRouter.

Bedrock does not expose context lengths, output limits or reasoning support for
its models, so this client pulls the public OpenRouter catalogue, caches it for
a day and matches Bedrock model ids against it loosely. Lookups never raise: a
failed fetch or an unknown model simply yields "no reasoning" and no overrides.
"""

import re
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from bedrock_chat_lib.llm_core.cache import TTLCache, DEFAULT_TTL_SECONDS
from bedrock_chat_lib.llm_core.exceptions import MetadataFetchError
from bedrock_chat_lib.llm_core.logger import get_logger

logger = get_logger(__name__)

OPENROUTER_MODELS_URL = "https://openrouter.ai/api/v1/models"

REASONING_PARAMETERS = frozenset({"reasoning", "include_reasoning"})

_REGION_PREFIX = re.compile(r"^(us|eu|ap|apac|global)\.", re.IGNORECASE)


class OpenRouterTopProvider(BaseModel):
    model_config = ConfigDict(extra="ignore")

    max_completion_tokens: Optional[int] = None


class OpenRouterModel(BaseModel):
    """One catalogue record. Unknown fields are ignored."""

    model_config = ConfigDict(extra="ignore")

    id: str
    context_length: Optional[int] = None
    top_provider: Optional[OpenRouterTopProvider] = None
    supported_parameters: List[str] = Field(default_factory=list)

    @field_validator("supported_parameters", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def supports_reasoning(self) -> bool:
        return any(param in REASONING_PARAMETERS for param in self.supported_parameters)

    @property
    def max_completion_tokens(self) -> Optional[int]:
        return self.top_provider.max_completion_tokens if self.top_provider else None


class ModelProperties(BaseModel):
    """Limits found for a model. Either value may be missing from the catalogue."""

    context_length: Optional[int] = None
    max_output_tokens: Optional[int] = None


def base_model_id(catalogue_id: str) -> str:
    """Drops the vendor prefix of a catalogue id (``anthropic/claude-x`` -> ``claude-x``)."""
    return catalogue_id.split("/", 1)[1] if "/" in catalogue_id else catalogue_id


def normalize_model_id(model_id: str) -> str:
    """Strips a cross-region prefix, lowercases and turns dots into dashes."""
    return _REGION_PREFIX.sub("", model_id).lower().replace(".", "-")


class OpenRouterClient:
    """
    Resolves model capabilities from the OpenRouter catalogue.

    The catalogue is fetched wholesale when the cache is empty or expired and
    stored keyed by base model id. Matching is substring based in both
    directions and the first match wins.
    """

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        cache: Optional[TTLCache[OpenRouterModel]] = None,
        api_url: str = OPENROUTER_MODELS_URL,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the client.

        Args:
            http_client: HTTP client to use. If None, a short-lived client is created per fetch.
            cache: Cache holding catalogue records. Defaults to a 24 hour TTLCache.
            api_url: Catalogue endpoint.
            timeout: Request timeout in seconds for the default client.
        """
        self.http_client = http_client
        self.cache: TTLCache[OpenRouterModel] = cache or TTLCache("OpenRouter", DEFAULT_TTL_SECONDS)
        self.api_url = api_url
        self.timeout = timeout

    async def fetch_metadata(self) -> None:
        """Refreshes the catalogue unless the cache is still valid. Failures are logged only."""
        if self.cache.is_valid():
            return

        try:
            records = await self._fetch_catalogue()
        except MetadataFetchError as e:
            logger.error(f"Failed to fetch OpenRouter metadata: {e}")
            return

        entries: Dict[str, OpenRouterModel] = {}
        for record in records:
            entries[base_model_id(record.id)] = record
        self.cache.set_all(entries)
        logger.info(f"Fetched OpenRouter metadata for {len(entries)} models")

    async def _fetch_catalogue(self) -> List[OpenRouterModel]:
        try:
            if self.http_client is not None:
                response = await self.http_client.get(self.api_url)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(self.api_url)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            raise MetadataFetchError(f"OpenRouter request failed: {e}") from e
        except ValueError as e:
            raise MetadataFetchError(f"OpenRouter returned invalid JSON: {e}") from e

        raw_models = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(raw_models, list):
            raise MetadataFetchError("OpenRouter response has no 'data' list")

        return [model for model in (self._parse_record(raw) for raw in raw_models) if model is not None]

    @staticmethod
    def _parse_record(raw: Any) -> Optional[OpenRouterModel]:
        try:
            return OpenRouterModel.model_validate(raw)
        except ValidationError as e:
            logger.debug(f"Skipping malformed OpenRouter record: {e.error_count()} error(s)")
            return None

    def find_metadata(self, model_id: str) -> Optional[OpenRouterModel]:
        """Returns the first cached record whose id overlaps ``model_id`` after normalization."""
        normalized = normalize_model_id(model_id)
        if not normalized:
            return None
        for cached_id, metadata in self.cache.get_all().items():
            normalized_cached = cached_id.lower().replace(".", "-")
            if not normalized_cached:
                continue
            if normalized in normalized_cached or normalized_cached in normalized:
                return metadata
        return None

    async def supports_thinking(self, model_id: str) -> bool:
        """True if the catalogue lists a reasoning parameter for the model."""
        await self.fetch_metadata()

        metadata = self.find_metadata(model_id)
        if metadata is None:
            logger.info(f"Model {model_id} not found in OpenRouter metadata, assuming no thinking support")
            return False

        result = metadata.supports_reasoning
        logger.info(f"Model {model_id} thinking support: {result}")
        return result

    async def get_model_properties(self, model_id: str) -> Optional[ModelProperties]:
        """Returns context and output limits for the model, or None if it is unknown."""
        await self.fetch_metadata()

        metadata = self.find_metadata(model_id)
        if metadata is None:
            logger.info(f"No OpenRouter metadata found for {model_id}")
            return None

        properties = ModelProperties(
            context_length=metadata.context_length,
            max_output_tokens=metadata.max_completion_tokens,
        )
        logger.debug(f"Found metadata for {model_id}: {properties}")
        return properties

    def clear_cache(self) -> None:
        self.cache.clear()
