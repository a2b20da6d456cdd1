"""Shared prompt building functions for the chat, document and rag flows."""

from dataclasses import dataclass
from typing import List, Tuple

from app.schemas.ai_request import ChatMessage


CHAT_SYSTEM_PROMPT = "You are an AI assistant."

SQL_SYSTEM_PROMPT = "You are an AI that converts natural language into SQL queries."

RAG_ANSWER_SYSTEM_PROMPT = (
    "You are an AI assistant that formats financial responses in user-friendly language."
)

SQL_PRECEDENCE_INSTRUCTION = (
    "Ensure correct operator precedence by using parentheses in OR conditions."
)

SQL_READ_ONLY_INSTRUCTION = (
    "Respond with a single read-only SELECT statement only, "
    "without explanation or markdown."
)

RAG_ANSWER_INSTRUCTION = (
    "Convert the result into a natural language response for the user."
)


@dataclass(frozen=True)
class TableSchema:
    name: str
    columns: Tuple[str, ...]

    def describe(self) -> str:
        return f"{self.name} table: {', '.join(self.columns)}"


# Schema the rag flow is allowed to query. Enumerated once and injected
# into the SQL bridge.
DATABASE_SCHEMA: Tuple[TableSchema, ...] = (
    TableSchema(
        name="IncomeExpenses",
        columns=(
            "Id (int)",
            "Amount (decimal)",
            "Type (varchar)",
            "Date (datetime)",
            "CategoryId (int, foreign key to Categories.Id)",
        ),
    ),
    TableSchema(
        name="Categories",
        columns=("Id (int)", "Name (varchar)"),
    ),
)


def build_chat_messages(user_message: str) -> List[ChatMessage]:
    """Plain chat: fixed preamble followed by the user's text."""
    return [
        ChatMessage.system(CHAT_SYSTEM_PROMPT),
        ChatMessage.user(user_message),
    ]


def build_sql_messages(
    question: str,
    schema: Tuple[TableSchema, ...] = DATABASE_SCHEMA,
) -> List[ChatMessage]:
    """
    Build the NL-to-SQL prompt.

    Args:
        question: The user's natural-language question
        schema: Tables the model may reference

    Returns:
        Ordered messages for the completion client
    """
    messages = [
        ChatMessage.system(SQL_SYSTEM_PROMPT),
        ChatMessage.user("Database Schema:"),
    ]
    messages.extend(ChatMessage.user(table.describe()) for table in schema)
    messages.append(ChatMessage.user(SQL_PRECEDENCE_INSTRUCTION))
    messages.append(ChatMessage.user(SQL_READ_ONLY_INSTRUCTION))
    messages.append(ChatMessage.user(f"Convert this into SQL: {question}"))
    return messages


def build_rag_answer_messages(question: str, query_result: str) -> List[ChatMessage]:
    """
    Build the second rag pass that phrases a database result for the user.

    Args:
        question: The user's question
        query_result: Space-joined first-column values from the query

    Returns:
        Ordered messages for the completion client
    """
    return [
        ChatMessage.system(RAG_ANSWER_SYSTEM_PROMPT),
        ChatMessage.user(f"User asked: {question}"),
        ChatMessage.user(f"Database result: {query_result}"),
        ChatMessage.user(RAG_ANSWER_INSTRUCTION),
    ]
