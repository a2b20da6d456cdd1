"""Run checked SELECT statements for the rag flow."""

import logging
import re
from typing import Optional
import databases

from app.core.errors import DatabaseError, QueryRejectedError
from app.db.database import get_database
from app.schemas.ai_request import SelectStatement

logger = logging.getLogger(__name__)


# Session statements that forbid writes for the duration of one query, per dialect
READ_ONLY_SESSION = {
    "sqlite": ("PRAGMA query_only = ON", "PRAGMA query_only = OFF"),
    "postgresql": (
        "SET SESSION CHARACTERISTICS AS TRANSACTION READ ONLY",
        "SET SESSION CHARACTERISTICS AS TRANSACTION READ WRITE",
    ),
    "mysql": ("SET SESSION TRANSACTION READ ONLY", "SET SESSION TRANSACTION READ WRITE"),
}

# Same rule SQLAlchemy's text() uses to find :name bind parameters
_BIND_COLON = re.compile(r"(?<![:\w\\]):(?=\w)")


def escape_bind_colons(sql: str) -> str:
    """Make ':word' literal so text() does not read it as a bind parameter."""
    return _BIND_COLON.sub(r"\\:", sql)


class QueryExecutor:
    """Execute a SelectStatement and flatten the first column of the result."""

    def __init__(self, database: Optional[databases.Database] = None):
        self._database = database

    async def _resolve_database(self) -> databases.Database:
        database = self._database
        if database is None:
            database = await get_database()
        if database is None:
            raise DatabaseError("Database connection string not configured.")
        return database

    async def execute(self, statement: SelectStatement, values: Optional[dict] = None) -> str:
        """
        Execute a checked statement on a read-only session.

        Args:
            statement: Output of the SQL bridge; anything else is refused
            values: Bind parameters, when the caller has any. Without them
                every colon in the statement is literal.

        Returns:
            First-column values of every row, space-separated
        """
        if not isinstance(statement, SelectStatement):
            raise QueryRejectedError("Only checked SELECT statements can be executed.")

        database = await self._resolve_database()
        query = statement.sql if values is not None else escape_bind_colons(statement.sql)
        guard = READ_ONLY_SESSION.get(database.url.dialect)

        try:
            async with database.connection() as connection:
                if guard:
                    await connection.execute(guard[0])
                try:
                    rows = await connection.fetch_all(query=query, values=values)
                finally:
                    if guard:
                        await connection.execute(guard[1])
        except Exception as e:
            logger.exception("Query execution failed: %s", statement.sql)
            raise DatabaseError(f"Query execution failed: {str(e)}") from e

        result = " ".join("" if row[0] is None else str(row[0]) for row in rows)
        logger.info("Query returned %d rows", len(rows))
        return result.strip()
