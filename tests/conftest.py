import os
from typing import Any, AsyncIterator, Dict, Iterable, List, Set

import pytest
from dotenv import load_dotenv, find_dotenv

from bedrock_chat_lib import CancellationToken, CollectingProgress, ModelInfo
from bedrock_chat_lib.llm_impl.bedrock import BedrockCredentials, FoundationModelSummary

# Load environment variables from .env file
env_file = find_dotenv(usecwd=True)
if env_file:
    load_dotenv(env_file)

ANTHROPIC_MODEL_ID = "us.anthropic.claude-3-7-sonnet-20250219-v1:0"
NOVA_MODEL_ID = "amazon.nova-pro-v1:0"


async def stream_of(events: Iterable[Dict[str, Any]]) -> AsyncIterator[Dict[str, Any]]:
    """Turns a list of Converse events into an async event stream."""
    for event in events:
        yield event


def block_start(index: int, tool_use_id: str, name: str) -> Dict[str, Any]:
    return {"contentBlockStart": {"contentBlockIndex": index, "start": {"toolUse": {"toolUseId": tool_use_id, "name": name}}}}


def text_delta(index: int, text: str) -> Dict[str, Any]:
    return {"contentBlockDelta": {"contentBlockIndex": index, "delta": {"text": text}}}


def reasoning_delta(index: int, text: str) -> Dict[str, Any]:
    return {"contentBlockDelta": {"contentBlockIndex": index, "delta": {"reasoningContent": {"text": text}}}}


def tool_delta(index: int, fragment: str) -> Dict[str, Any]:
    return {"contentBlockDelta": {"contentBlockIndex": index, "delta": {"toolUse": {"input": fragment}}}}


def block_stop(index: int) -> Dict[str, Any]:
    return {"contentBlockStop": {"contentBlockIndex": index}}


def message_stop() -> Dict[str, Any]:
    return {"messageStop": {"stopReason": "end_turn"}}


class FakeConverseClient:
    """Records requests and replays a fixed list of events."""

    def __init__(self, events: List[Dict[str, Any]]) -> None:
        self.events = events
        self.requests: List[Dict[str, Any]] = []
        self.credentials: List[BedrockCredentials] = []

    async def converse_stream(self, credentials: BedrockCredentials, request: Dict[str, Any]) -> AsyncIterator[Dict[str, Any]]:
        self.credentials.append(credentials)
        self.requests.append(request)
        return stream_of(self.events)


class FakeCatalog:
    def __init__(self, models: List[FoundationModelSummary], profiles: Set[str]) -> None:
        self.models = models
        self.profiles = profiles

    async def list_foundation_models(self, credentials: BedrockCredentials, region: str) -> List[FoundationModelSummary]:
        return self.models

    async def list_inference_profiles(self, credentials: BedrockCredentials, region: str) -> Set[str]:
        return self.profiles


@pytest.fixture
def progress() -> CollectingProgress:
    return CollectingProgress()


@pytest.fixture
def token() -> CancellationToken:
    return CancellationToken()


@pytest.fixture
def model_info() -> ModelInfo:
    return ModelInfo(id=ANTHROPIC_MODEL_ID, name="Claude 3.7 Sonnet", max_input_tokens=200000, max_output_tokens=8192)


@pytest.fixture(scope="session")
def vcr_config() -> dict[str, Any]:
    return {
        "cassette_library_dir": "tests/cassettes",
        "record_mode": os.getenv("VCR_RECORD_MODE", "none"),
        "match_on": ["method", "path", "query"],
        "filter_headers": [
            "authorization",
            "x-api-key",
            "api-key",
        ],
        "decode_compressed_response": True,
    }
