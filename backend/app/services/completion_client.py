"""Chat completion wrapper around Azure OpenAI."""

import logging
from typing import List, Optional

from openai import AsyncAzureOpenAI

from app.core.config import Settings
from app.core.errors import ProviderError
from app.schemas.ai_request import (
    ChatMessage,
    CompletionOptions,
    DEFAULT_COMPLETION_OPTIONS,
)

logger = logging.getLogger(__name__)

NO_RESPONSE_TEXT = "No response from AI."


class CompletionClient:
    """Single chat-completion call with fixed sampling parameters."""

    def __init__(self, settings: Settings, client: Optional[AsyncAzureOpenAI] = None):
        self.client = client or AsyncAzureOpenAI(
            azure_endpoint=settings.azure_openai_endpoint,
            api_key=settings.azure_openai_key,
            api_version=settings.azure_openai_api_version,
        )
        self.model = settings.azure_openai_deployment

    async def complete(
        self,
        messages: List[ChatMessage],
        options: CompletionOptions = DEFAULT_COMPLETION_OPTIONS,
    ) -> str:
        """
        Send messages to the completion API.

        Returns:
            Text of the first choice, or NO_RESPONSE_TEXT when the provider
            returned nothing

        Raises:
            ProviderError: the API call failed
        """
        logger.info("Completion request: deployment=%s messages=%d", self.model, len(messages))

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[m.to_openai() for m in messages],
                temperature=options.temperature,
                max_tokens=options.max_tokens,
                top_p=options.top_p,
                frequency_penalty=options.frequency_penalty,
                presence_penalty=options.presence_penalty,
            )
        except Exception as e:
            logger.error("Error calling Azure OpenAI: %s", str(e))
            raise ProviderError(f"Completion request failed: {str(e)}") from e

        if not response or not response.choices:
            return NO_RESPONSE_TEXT

        content = response.choices[0].message.content
        if not content:
            return NO_RESPONSE_TEXT

        logger.info("Completion response: length=%d", len(content))
        return content
