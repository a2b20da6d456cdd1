"""Image generation wrapper around Azure OpenAI (DALL-E deployment)."""

import logging
from typing import Optional

from openai import AsyncAzureOpenAI

from app.core.config import Settings
from app.core.errors import ProviderError

logger = logging.getLogger(__name__)


class ImageClient:
    """Generate one image per prompt at a fixed size and quality."""

    SIZE = "1024x1024"
    QUALITY = "standard"

    def __init__(self, settings: Settings, client: Optional[AsyncAzureOpenAI] = None):
        self.client = client or AsyncAzureOpenAI(
            azure_endpoint=settings.azure_openai_image_endpoint,
            api_key=settings.azure_openai_key,
            api_version=settings.azure_openai_api_version,
        )
        self.model = settings.azure_openai_image_deployment

    async def generate_image(self, prompt: str) -> str:
        """Return the URL of the generated image. Raises ProviderError on failure."""
        logger.info("Image request: deployment=%s", self.model)

        try:
            response = await self.client.images.generate(
                model=self.model,
                prompt=prompt,
                size=self.SIZE,
                quality=self.QUALITY,
                n=1,
            )
        except Exception as e:
            logger.error("Error calling Azure OpenAI: %s", str(e))
            raise ProviderError(f"Image generation failed: {str(e)}") from e

        if not response or not response.data or not response.data[0].url:
            logger.error("Image generation returned no URL")
            raise ProviderError("Image generation returned no URL")

        return response.data[0].url
