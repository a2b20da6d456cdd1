"""Shared fixtures: fake Azure OpenAI SDK objects and settings."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.core.config import Settings


def make_completion(content):
    """Shape of openai's ChatCompletion as far as the client reads it."""
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))]
    )


def make_image_response(url):
    return SimpleNamespace(data=[SimpleNamespace(url=url)])


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        azure_openai_endpoint="https://chat.example.openai.azure.com/",
        azure_openai_image_endpoint="https://image.example.openai.azure.com/",
        azure_openai_deployment="gpt-35-turbo-16k",
        azure_openai_image_deployment="dall-e-3",
        azure_openai_key="test-key-1234567890",
        database_url="",
    )


@pytest.fixture
def fake_openai():
    """Stand-in for AsyncAzureOpenAI exposing chat.completions and images."""
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=make_completion("Hello from AI"))
    client.images.generate = AsyncMock(
        return_value=make_image_response("https://images.example.com/apple.png")
    )
    return client
