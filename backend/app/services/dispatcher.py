"""Request dispatch for the chat, image, rag and document flows."""

import asyncio
import logging
from typing import Optional

from app.agents.prompts import build_chat_messages, build_rag_answer_messages
from app.core.errors import QueryRejectedError, ValidationError
from app.schemas.ai_request import AIResponse, RejectedStatement, RequestType
from app.services.completion_client import CompletionClient
from app.services.document_parser import DocumentParser
from app.services.image_client import ImageClient
from app.services.query_executor import QueryExecutor
from app.services.sql_bridge import SQLBridge

logger = logging.getLogger(__name__)


class RequestDispatcher:
    """
    Route a validated request to its flow.

    External calls within one request are awaited one after another. Typed
    failures from the clients propagate unchanged and are mapped to HTTP
    status codes by the API layer.
    """

    def __init__(
        self,
        completion_client: CompletionClient,
        image_client: ImageClient,
        query_executor: QueryExecutor,
        parser: Optional[DocumentParser] = None,
        sql_bridge: Optional[SQLBridge] = None,
    ):
        self.completion_client = completion_client
        self.image_client = image_client
        self.query_executor = query_executor
        self.parser = parser or DocumentParser()
        self.sql_bridge = sql_bridge or SQLBridge(completion_client)

    async def dispatch(self, request_type: str, message: str) -> AIResponse:
        if request_type == RequestType.IMAGE.value:
            return await self.process_image(message)
        if request_type == RequestType.RAG.value:
            return await self.process_rag(message)
        return await self.process_chat(message)

    async def process_chat(self, message: str) -> AIResponse:
        text = await self.completion_client.complete(build_chat_messages(message))
        return AIResponse(response=text)

    async def process_image(self, prompt: str) -> AIResponse:
        image_url = await self.image_client.generate_image(prompt)
        return AIResponse(imageUrl=image_url)

    async def process_rag(self, message: str) -> AIResponse:
        """NL -> SQL -> rows -> NL. Rejected SQL never reaches the database."""
        statement = await self.sql_bridge.to_sql(message)
        if isinstance(statement, RejectedStatement):
            raise QueryRejectedError(statement.reason)

        result = await self.query_executor.execute(statement)

        text = await self.completion_client.complete(
            build_rag_answer_messages(message, result)
        )
        return AIResponse(response=text)

    async def process_document(
        self, filename: str, content: bytes, request_type: Optional[str] = None
    ) -> AIResponse:
        logger.info("Received file: %s, Type: %s", filename, request_type)

        # unstructured parses synchronously
        extracted_text = await asyncio.to_thread(self.parser.extract, content, filename)
        if not extracted_text or not extracted_text.strip():
            raise ValidationError("Unable to extract text from file.")

        return await self.process_chat(extracted_text)
