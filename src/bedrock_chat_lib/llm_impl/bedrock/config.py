"""Settings for the Bedrock chat provider."""

import os
from typing import Any, Dict, Literal, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, field_validator

from bedrock_chat_lib.llm_core.logger import get_logger

logger = get_logger(__name__)

AuthMethod = Literal["default", "api-key", "profile", "access-keys"]

MIN_THINKING_BUDGET_TOKENS = 1024

ENV_PREFIX = "BEDROCK_"


class BedrockSettings(BaseModel):
    """
    Provider configuration.

    Attributes:
        region: AWS region used for runtime and catalogue calls.
        auth_method: How credentials are obtained.
        api_key: Bedrock API key (``api-key`` method).
        profile: Shared config profile name (``profile`` method).
        access_key_id: Access key id (``access-keys`` method).
        secret_access_key: Secret access key (``access-keys`` method).
        session_token: Optional session token for temporary credentials.
        thinking_enabled: Whether extended thinking is requested for models that support it.
        thinking_budget_tokens: Token budget for extended thinking, at least 1024.
    """

    region: str = "us-east-1"
    auth_method: AuthMethod = "default"
    api_key: Optional[str] = None
    profile: Optional[str] = None
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    session_token: Optional[str] = None
    thinking_enabled: bool = False
    thinking_budget_tokens: int = MIN_THINKING_BUDGET_TOKENS

    @field_validator("thinking_budget_tokens")
    @classmethod
    def _clamp_budget(cls, value: int) -> int:
        return max(MIN_THINKING_BUDGET_TOKENS, value)

    @property
    def region_prefix(self) -> str:
        """Geography prefix of the region, e.g. ``us`` for ``us-east-1``."""
        return self.region.split("-")[0]

    def thinking_config(self) -> Optional[Dict[str, Any]]:
        """Returns the ``thinking`` request field, or None if thinking is disabled."""
        if not self.thinking_enabled:
            return None
        return {"type": "enabled", "budget_tokens": self.thinking_budget_tokens}

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "BedrockSettings":
        """
        Builds settings from ``BEDROCK_*`` environment variables.

        A ``.env`` file is loaded first (without overriding variables that are
        already set).

        Args:
            dotenv_path: Explicit ``.env`` path. If None, the nearest ``.env`` is used.

        Returns:
            The populated settings.
        """
        env_file = dotenv_path or find_dotenv(usecwd=True)
        if env_file:
            logger.debug(f"Loading .env from: {env_file}")
            load_dotenv(env_file)

        values: Dict[str, Any] = {}
        for field_name in cls.model_fields:
            raw = os.getenv(f"{ENV_PREFIX}{field_name.upper()}")
            if raw is not None and raw != "":
                values[field_name] = raw
        return cls.model_validate(values)
