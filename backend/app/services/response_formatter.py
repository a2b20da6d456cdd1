"""
Display formatting for AI text shown on the single-page front end.

Client side: used by ChatDocClient, not by the server routes.
"""

from typing import Optional

QUOTE_CHARS = ('"', "'")


def strip_wrapping_quotes(text: str) -> str:
    """Remove a single pair of matching quotes around the whole text."""
    if len(text) >= 2 and text[0] == text[-1] and text[0] in QUOTE_CHARS:
        return text[1:-1]
    return text


def nl2br(text: str) -> str:
    """Convert literal '\\n' sequences and real newlines into <br> tags."""
    text = text.replace("\r\n", "\n")
    text = text.replace("\\n", "<br>")
    text = text.replace("\n\n", "<br><br>")
    return text.replace("\n", "<br>")


def format_response(text: Optional[str]) -> str:
    if not text:
        return ""
    return nl2br(strip_wrapping_quotes(text.strip()))
