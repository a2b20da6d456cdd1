"""HTTP entry point for chat, image, rag and document requests."""

import logging

from fastapi import APIRouter, Depends, Request
from starlette.datastructures import UploadFile

from app.api.deps import get_dispatcher
from app.core.errors import ValidationError
from app.schemas.ai_request import AIResponse, IncomingRequest
from app.services.dispatcher import RequestDispatcher

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ai"])

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


def has_form_content_type(request: Request) -> bool:
    content_type = request.headers.get("content-type", "").lower()
    return content_type.startswith(FORM_CONTENT_TYPES)


async def parse_json_request(request: Request) -> IncomingRequest:
    """Read a JSON body and check that 'type' and 'message' are present."""
    invalid = ValidationError("Invalid request: 'type' and 'message' are required.")

    try:
        body = await request.json()
    except ValueError:
        raise invalid from None

    if not isinstance(body, dict):
        raise invalid

    request_type = body.get("type")
    message = body.get("message")
    if not isinstance(request_type, str) or not isinstance(message, str):
        raise invalid

    return IncomingRequest(type=request_type, message=message)


@router.post(
    "/ProcessAIRequest",
    response_model=AIResponse,
    response_model_exclude_none=True,
)
async def process_ai_request(
    request: Request,
    dispatcher: RequestDispatcher = Depends(get_dispatcher),
):
    """Form content is a document upload; anything else is a JSON chat/image/rag request."""
    logger.info("Processing AI request...")

    if has_form_content_type(request):
        form = await request.form()
        file = form.get("file")
        request_type = form.get("type")

        if not isinstance(file, UploadFile) or not file.filename:
            raise ValidationError("File is required.")

        content = await file.read()
        return await dispatcher.process_document(file.filename, content, request_type)

    payload = await parse_json_request(request)
    logger.info("Request type: %s", payload.type)
    return await dispatcher.dispatch(payload.type, payload.message)
