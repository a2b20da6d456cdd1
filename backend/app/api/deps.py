"""Dependency injection for API routes."""
from functools import lru_cache

from app.core.config import settings
from app.services.completion_client import CompletionClient
from app.services.dispatcher import RequestDispatcher
from app.services.image_client import ImageClient
from app.services.query_executor import QueryExecutor


def get_settings():
    """Get application settings."""
    return settings


@lru_cache
def get_dispatcher() -> RequestDispatcher:
    """Build the dispatcher once; the vendor clients are reused across requests."""
    app_settings = get_settings()
    return RequestDispatcher(
        completion_client=CompletionClient(app_settings),
        image_client=ImageClient(app_settings),
        query_executor=QueryExecutor(),
    )
