"""
Client-side adapter used by the single-page front end to call the AI request endpoint.

Not mounted by the server; it runs wherever the front end does.
"""

import logging
from typing import Optional, Tuple

import httpx

from app.schemas.ai_request import RequestType
from app.services.response_formatter import format_response

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:7157/api/ProcessAIRequest"

ERROR_TEXT = "Error processing request."

# Request types that send a text prompt; the rest upload a file
TEXT_REQUEST_TYPES = {RequestType.CHAT.value, RequestType.IMAGE.value, RequestType.RAG.value}


class ChatDocClient:
    """Post user input to the backend and turn the envelope into display text."""

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 120.0,
    ):
        self.api_url = api_url
        self._transport = transport
        self._timeout = timeout

    async def _post(self, **kwargs) -> dict:
        async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
            response = await client.post(self.api_url, **kwargs)
            response.raise_for_status()
            return response.json()

    async def send_text_request(self, request_type: str, message: str) -> dict:
        return await self._post(json={"type": request_type, "message": message})

    async def send_file_request(self, request_type: str, filename: str, content: bytes) -> dict:
        return await self._post(
            data={"type": request_type},
            files={"file": (filename, content)},
        )

    async def send_image_request(self, message: str) -> dict:
        return await self.send_text_request(RequestType.IMAGE.value, message)

    async def send_rag_request(self, message: str) -> dict:
        return await self.send_text_request(RequestType.RAG.value, message)

    async def send_request(
        self,
        request_type: str,
        user_input: str = "",
        file: Optional[Tuple[str, bytes]] = None,
    ) -> str:
        """
        Send the current form state and return the text to display.

        Args:
            request_type: chat, summarize, ask, image or rag
            user_input: Text typed by the user
            file: (filename, content) of the selected file, for summarize/ask

        Returns:
            Formatted response text, the image URL, or an error message
        """
        try:
            if request_type in TEXT_REQUEST_TYPES:
                envelope = await self.send_text_request(request_type, user_input)
            elif file is not None:
                filename, content = file
                envelope = await self.send_file_request(request_type, filename, content)
            else:
                return ""
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Error: %s", str(e))
            return ERROR_TEXT

        if request_type == RequestType.IMAGE.value:
            return envelope.get("imageUrl") or ""
        return format_response(envelope.get("response"))
