"""Typed failures raised by the request flows.

Every external call (completion, image generation, text extraction, SQL)
surfaces its failure as one of these. The API layer maps them to HTTP
status codes in a single exception handler.
"""


class ChatFunctionError(Exception):
    """Base class for failures that map onto an HTTP response."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ChatFunctionError):
    """Caller sent something we cannot process. Never retried."""

    status_code = 400


class ExtractionError(ValidationError):
    """An uploaded document could not be parsed."""


class QueryRejectedError(ValidationError):
    """Generated SQL is not a single read-only SELECT."""


class ProviderError(ChatFunctionError):
    """The completion or image-generation API failed."""

    status_code = 500


class DatabaseError(ChatFunctionError):
    """The query could not be executed."""

    status_code = 500


class ConfigurationError(Exception):
    """Required settings are missing at startup."""
