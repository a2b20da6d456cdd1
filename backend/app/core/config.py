from pydantic_settings import BaseSettings
from pydantic import AliasChoices, Field
from typing import List
import json
import os

from app.core.errors import ConfigurationError


class Settings(BaseSettings):
    app_name: str = "AI Request Function"

    # Azure OpenAI (accepts the Functions-style names as well)
    azure_openai_endpoint: str = Field(
        default="",
        validation_alias=AliasChoices("azure_openai_endpoint", "AzureOpenAIEndpoint"),
    )
    azure_openai_image_endpoint: str = Field(
        default="",
        validation_alias=AliasChoices("azure_openai_image_endpoint", "AzureOpenAIImageEndpoint"),
    )
    azure_openai_deployment: str = Field(
        default="gpt-35-turbo-16k",
        validation_alias=AliasChoices("azure_openai_deployment", "AzureOpenAIDeployment"),
    )
    azure_openai_image_deployment: str = Field(
        default="dall-e-3",
        validation_alias=AliasChoices("azure_openai_image_deployment", "AzureOpenAIImageDeployment"),
    )
    azure_openai_key: str = Field(
        default="",
        validation_alias=AliasChoices("azure_openai_key", "AzureOpenAIKey"),
    )
    azure_openai_api_version: str = "2024-06-01"

    # Database used by the rag flow
    database_url: str = Field(
        default="",
        validation_alias=AliasChoices("database_url", "DefaultConnection"),
    )

    # Server
    backend_port: int = 7157
    cors_origins: List[str] = ["http://localhost:4200"]
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"
        populate_by_name = True

    def __init__(self, **kwargs):
        super().__init__(**kwargs)

        # Handle CORS_ORIGINS as JSON string from env
        cors_env = os.getenv("CORS_ORIGINS")
        if cors_env:
            try:
                self.cors_origins = json.loads(cors_env)
            except json.JSONDecodeError:
                pass

    def validate_required(self) -> None:
        """Fail fast when an endpoint the clients need is missing."""
        missing = []
        if not self.azure_openai_endpoint:
            missing.append("AZURE_OPENAI_ENDPOINT")
        if not self.azure_openai_image_endpoint:
            missing.append("AZURE_OPENAI_IMAGE_ENDPOINT")
        if missing:
            raise ConfigurationError(
                f"Azure OpenAI endpoint not configured: {', '.join(missing)}"
            )

    def get_effective_settings(self) -> dict:
        """Get current effective settings with secrets masked (for logging)."""
        return {
            "azure_openai_endpoint": self.azure_openai_endpoint,
            "azure_openai_image_endpoint": self.azure_openai_image_endpoint,
            "azure_openai_deployment": self.azure_openai_deployment,
            "azure_openai_image_deployment": self.azure_openai_image_deployment,
            "azure_openai_key": self._mask_key(self.azure_openai_key),
            "azure_openai_api_version": self.azure_openai_api_version,
            "database_configured": bool(self.database_url),
            "cors_origins": self.cors_origins,
        }

    def _mask_key(self, key: str) -> str:
        """Mask a secret key for display."""
        if not key:
            return ""
        if len(key) <= 8:
            return "*" * len(key)
        return key[:4] + "*" * (len(key) - 8) + key[-4:]


settings = Settings()
