"""
Natural-language-to-SQL bridge for the rag flow.

The model's output is never trusted as-is. It is classified into a
SelectStatement (safe to run) or a RejectedStatement, and only the former
is accepted by the query executor.

Rules applied to the generated text:
1. Only the first fenced block is kept (prose around it is dropped), then
   a single trailing semicolon is stripped
2. Exactly one statement, no SQL comments
3. Must start with SELECT or WITH
4. No write, DDL or execution keywords anywhere in the text
"""

import logging
import re
from typing import Tuple

from app.agents.prompts import DATABASE_SCHEMA, TableSchema, build_sql_messages
from app.schemas.ai_request import BridgeResult, RejectedStatement, SelectStatement
from app.services.completion_client import CompletionClient, NO_RESPONSE_TEXT

logger = logging.getLogger(__name__)


FORBIDDEN_KEYWORDS = (
    "insert",
    "update",
    "delete",
    "merge",
    "drop",
    "alter",
    "create",
    "truncate",
    "exec",
    "execute",
    "grant",
    "revoke",
    "deny",
    "into",
    "backup",
    "restore",
    "shutdown",
    "dbcc",
)

_FORBIDDEN_PATTERN = re.compile(
    r"\b(" + "|".join(FORBIDDEN_KEYWORDS) + r")\b", re.IGNORECASE
)
_LEADING_KEYWORD = re.compile(r"^\s*(select|with)\b", re.IGNORECASE)
_CODE_FENCE = re.compile(r"```(?:[a-zA-Z]*[ \t]*\n)?(.*?)```", re.DOTALL)


def clean_sql(text: str) -> str:
    """Keep the first fenced block if any, then drop one trailing semicolon."""
    sql = (text or "").strip()
    fenced = _CODE_FENCE.search(sql)
    if fenced:
        sql = fenced.group(1).strip()
    if sql.endswith(";"):
        sql = sql[:-1].rstrip()
    return sql


def check_select_statement(text: str) -> BridgeResult:
    """
    Classify generated SQL.

    Args:
        text: Raw model output

    Returns:
        SelectStatement if the text is a single read-only query,
        otherwise RejectedStatement with the reason
    """
    sql = clean_sql(text)

    if not sql or sql == NO_RESPONSE_TEXT:
        return RejectedStatement(reason="No SQL query was generated.", sql=sql)

    if ";" in sql:
        return RejectedStatement(reason="Only a single SQL statement is allowed.", sql=sql)

    if "--" in sql or "/*" in sql:
        return RejectedStatement(reason="SQL comments are not allowed.", sql=sql)

    if not _LEADING_KEYWORD.match(sql):
        return RejectedStatement(reason="Only SELECT queries are allowed.", sql=sql)

    forbidden = _FORBIDDEN_PATTERN.search(sql)
    if forbidden:
        return RejectedStatement(
            reason=f"Only SELECT queries are allowed (found {forbidden.group(1).upper()}).",
            sql=sql,
        )

    return SelectStatement(sql=sql)


class SQLBridge:
    """Turn a question into a checked SELECT statement via the completion client."""

    def __init__(
        self,
        completion_client: CompletionClient,
        schema: Tuple[TableSchema, ...] = DATABASE_SCHEMA,
    ):
        self.completion_client = completion_client
        self.schema = schema

    async def to_sql(self, question: str) -> BridgeResult:
        messages = build_sql_messages(question, self.schema)
        raw = await self.completion_client.complete(messages)

        result = check_select_statement(raw)
        if isinstance(result, SelectStatement):
            logger.info("Generated SQL Query: %s", result.sql)
        else:
            logger.warning("Rejected generated SQL (%s): %s", result.reason, result.sql)
        return result
