"""Tests for settings loading and startup validation."""

import pytest

from app.core.config import Settings
from app.core.errors import ConfigurationError

ENV_NAMES = [
    "AZURE_OPENAI_ENDPOINT",
    "AZURE_OPENAI_IMAGE_ENDPOINT",
    "AZURE_OPENAI_DEPLOYMENT",
    "AZURE_OPENAI_IMAGE_DEPLOYMENT",
    "AZURE_OPENAI_KEY",
    "DATABASE_URL",
    "AzureOpenAIEndpoint",
    "AzureOpenAIImageEndpoint",
    "AzureOpenAIDeployment",
    "AzureOpenAIImageDeployment",
    "AzureOpenAIKey",
    "DefaultConnection",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:

    def test_defaults(self, clean_env):
        settings = Settings(_env_file=None)
        assert settings.azure_openai_deployment == "gpt-35-turbo-16k"
        assert settings.azure_openai_image_deployment == "dall-e-3"
        assert settings.backend_port == 7157

    def test_missing_endpoints_fail_fast(self, clean_env):
        settings = Settings(_env_file=None)
        with pytest.raises(ConfigurationError) as exc_info:
            settings.validate_required()
        assert "AZURE_OPENAI_ENDPOINT" in str(exc_info.value)
        assert "AZURE_OPENAI_IMAGE_ENDPOINT" in str(exc_info.value)

    def test_missing_image_endpoint_only(self, clean_env):
        settings = Settings(_env_file=None, azure_openai_endpoint="https://chat.example.com/")
        with pytest.raises(ConfigurationError) as exc_info:
            settings.validate_required()
        assert "AZURE_OPENAI_IMAGE_ENDPOINT" in str(exc_info.value)
        assert "AZURE_OPENAI_ENDPOINT" not in str(exc_info.value)

    def test_valid_settings_pass(self, test_settings):
        test_settings.validate_required()

    def test_reads_functions_style_names(self, clean_env):
        clean_env.setenv("AzureOpenAIEndpoint", "https://chat.example.com/")
        clean_env.setenv("AzureOpenAIImageEndpoint", "https://image.example.com/")
        clean_env.setenv("AzureOpenAIDeployment", "gpt-4o")
        clean_env.setenv("DefaultConnection", "sqlite:///finance.db")

        settings = Settings(_env_file=None)

        assert settings.azure_openai_endpoint == "https://chat.example.com/"
        assert settings.azure_openai_image_endpoint == "https://image.example.com/"
        assert settings.azure_openai_deployment == "gpt-4o"
        assert settings.database_url == "sqlite:///finance.db"
        settings.validate_required()

    def test_reads_snake_case_names(self, clean_env):
        clean_env.setenv("AZURE_OPENAI_ENDPOINT", "https://chat.example.com/")
        settings = Settings(_env_file=None)
        assert settings.azure_openai_endpoint == "https://chat.example.com/"

    def test_effective_settings_mask_key(self, test_settings):
        effective = test_settings.get_effective_settings()
        assert effective["azure_openai_key"] == "test***********7890"
        assert effective["database_configured"] is False
