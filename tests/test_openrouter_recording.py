import os
from pathlib import Path

import pytest

from bedrock_chat_lib import OpenRouterClient
from dotenv import load_dotenv, find_dotenv

load_dotenv(find_dotenv())
CASSETTE_NAME = "openrouter_models.yaml"


def _cassette_path() -> Path:
    return Path(__file__).parent / "cassettes" / CASSETTE_NAME


def _recording() -> bool:
    return os.getenv("VCR_RECORD_MODE", "none") != "none"


def _skip_without_cassette() -> None:
    if not _recording() and not _cassette_path().is_file():
        pytest.skip("Set VCR_RECORD_MODE=once to record or add tests/cassettes/openrouter_models.yaml for playback.")


@pytest.mark.asyncio
@pytest.mark.vcr(cassette_name=CASSETTE_NAME)
async def test_openrouter_catalogue_roundtrip() -> None:
    _skip_without_cassette()

    client = OpenRouterClient()

    await client.fetch_metadata()

    assert client.cache.size() > 0
    properties = await client.get_model_properties("us.anthropic.claude-3-7-sonnet-20250219-v1:0")
    assert properties is not None
    assert properties.context_length
    assert await client.supports_thinking("us.anthropic.claude-3-7-sonnet-20250219-v1:0") is True
