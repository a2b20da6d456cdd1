"""Database connection and lifecycle management for the rag flow."""

from typing import Optional
import databases

from app.core.config import settings

# Created on startup when a connection string is configured
database: Optional[databases.Database] = None


async def get_database() -> Optional[databases.Database]:
    """Get database connection pool (None when no database is configured)."""
    return database


async def connect_db():
    """Connect to database on startup."""
    global database
    if not settings.database_url:
        return
    if database is None:
        database = databases.Database(settings.database_url)
    if not database.is_connected:
        await database.connect()


async def disconnect_db():
    """Disconnect from database on shutdown."""
    if database is not None and database.is_connected:
        await database.disconnect()
