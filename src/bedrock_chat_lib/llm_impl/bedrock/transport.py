"""Credential value and the transport seams the provider talks through.

The library never performs AWS calls itself. Callers plug in objects that
satisfy ``ConverseStreamClient`` and ``FoundationModelCatalog`` (for example thin
wrappers around boto3 clients) and receive the credentials to use as an
explicit argument on every call.
"""

from typing import Any, AsyncIterable, Dict, List, Optional, Protocol, Set

from pydantic import BaseModel, ConfigDict, Field

from bedrock_chat_lib.llm_core.exceptions import AuthenticationError
from bedrock_chat_lib.llm_core.logger import get_logger
from .config import AuthMethod, BedrockSettings

logger = get_logger(__name__)


class BedrockCredentials(BaseModel):
    """
    Credentials passed down the call chain to the transport.

    Attributes:
        method: Authentication method.
        api_key: Bearer token for the ``api-key`` method.
        profile: Shared config profile for the ``profile`` method.
        access_key_id: Access key id for the ``access-keys`` method.
        secret_access_key: Secret key for the ``access-keys`` method.
        session_token: Optional session token for the ``access-keys`` method.
    """

    model_config = ConfigDict(frozen=True)

    method: AuthMethod = "default"
    api_key: Optional[str] = Field(default=None, repr=False)
    profile: Optional[str] = None
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = Field(default=None, repr=False)
    session_token: Optional[str] = Field(default=None, repr=False)

    @classmethod
    def from_settings(cls, settings: BedrockSettings) -> "BedrockCredentials":
        """
        Builds credentials for the configured authentication method.

        Args:
            settings: Provider settings.

        Returns:
            The credentials value.

        Raises:
            AuthenticationError: If the chosen method lacks a required setting.
        """
        method = settings.auth_method

        if method == "api-key":
            if not settings.api_key:
                raise _auth_error("API key is required for api-key authentication method")
            logger.info("Using API key authentication")
            return cls(method=method, api_key=settings.api_key)

        if method == "profile":
            if not settings.profile:
                raise _auth_error("Profile name is required for profile authentication method")
            logger.info(f"Using profile authentication: {settings.profile}")
            return cls(method=method, profile=settings.profile)

        if method == "access-keys":
            if not settings.access_key_id or not settings.secret_access_key:
                raise _auth_error(
                    "Access key ID and secret access key are required for access-keys authentication method"
                )
            logger.info("Using access keys authentication")
            return cls(
                method=method,
                access_key_id=settings.access_key_id,
                secret_access_key=settings.secret_access_key,
                session_token=settings.session_token,
            )

        logger.info("Using default credential provider chain")
        return cls(method="default")


def _auth_error(msg: str) -> AuthenticationError:
    logger.error(msg)
    return AuthenticationError(msg)


class FoundationModelSummary(BaseModel):
    """Subset of a Bedrock foundation model summary used to build the model list."""

    model_config = ConfigDict(extra="ignore", protected_namespaces=())

    model_id: str
    model_name: str = ""
    provider_name: str = ""
    input_modalities: List[str] = Field(default_factory=list)
    output_modalities: List[str] = Field(default_factory=list)
    response_streaming_supported: bool = False


class ConverseStreamClient(Protocol):
    """Executes a ConverseStream call and yields its events."""

    async def converse_stream(
        self, credentials: BedrockCredentials, request: Dict[str, Any]
    ) -> AsyncIterable[Dict[str, Any]]:
        """Starts the stream for ``request`` and returns its event iterator."""
        ...


class FoundationModelCatalog(Protocol):
    """Lists the models and inference profiles available in a region."""

    async def list_foundation_models(self, credentials: BedrockCredentials, region: str) -> List[FoundationModelSummary]:
        ...

    async def list_inference_profiles(self, credentials: BedrockCredentials, region: str) -> Set[str]:
        ...
