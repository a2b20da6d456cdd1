"""Pydantic schemas for AI request dispatch."""

from enum import Enum
from typing import Optional, Literal, Union
from pydantic import BaseModel, ConfigDict, Field


class RequestType(str, Enum):
    CHAT = "chat"
    SUMMARIZE = "summarize"
    ASK = "ask"
    IMAGE = "image"
    RAG = "rag"


# Chat roles sent to the completion API
ChatRole = Literal["system", "user"]


class ChatMessage(BaseModel):
    """Single message in the ordered prompt sent to the completion API."""
    model_config = ConfigDict(frozen=True)

    role: ChatRole
    text: str

    @classmethod
    def system(cls, text: str) -> "ChatMessage":
        return cls(role="system", text=text)

    @classmethod
    def user(cls, text: str) -> "ChatMessage":
        return cls(role="user", text=text)

    def to_openai(self) -> dict:
        return {"role": self.role, "content": self.text}


class CompletionOptions(BaseModel):
    """Sampling parameters. Constant across all calls, no per-request tuning."""
    model_config = ConfigDict(frozen=True)

    temperature: float = 0.7
    max_tokens: int = 1000
    top_p: float = 0.95
    frequency_penalty: float = 0.0
    presence_penalty: float = 0.0


DEFAULT_COMPLETION_OPTIONS = CompletionOptions()


class IncomingRequest(BaseModel):
    """JSON body of a chat, image or rag request."""
    type: str
    message: str


class AIResponse(BaseModel):
    """Outward-facing envelope. Exactly one field is populated."""
    response: Optional[str] = None
    imageUrl: Optional[str] = None


# Tagged output of the NL-to-SQL bridge

class SelectStatement(BaseModel):
    """A single read-only SELECT that the query executor may run."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["safe"] = "safe"
    sql: str


class RejectedStatement(BaseModel):
    """Generated SQL that failed the read-only check."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["rejected"] = "rejected"
    reason: str
    sql: str = Field(default="", description="The text the model returned, for logging")


BridgeResult = Union[SelectStatement, RejectedStatement]
