"""
Database table creation script.

Creates all tables defined in ORM models using SQLAlchemy metadata.

Dependencies: sqlalchemy, chunkbridge.configs
System role: Database schema initialization for local development

Usage:
    python -m chunkbridge.boundary.db.create_tables
"""

import asyncio
import logging

from chunkbridge.boundary.db.base import Base
from chunkbridge.boundary.db.connection import get_async_engine

# Import all models to register them with Base.metadata
from chunkbridge.boundary.db.models.document_chunk_model import DocumentChunkModel  # noqa: F401

logger = logging.getLogger(__name__)


async def create_all_tables() -> None:
    """
    Create all database tables from registered ORM models.

    Idempotent: uses CREATE TABLE IF NOT EXISTS semantics, so safe to run
    multiple times. Existing tables remain unchanged.

    Raises:
        SQLAlchemyError: If database connection fails or table creation fails
    """
    engine = get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"{__name__}:create_all_tables - Tables created: {sorted(Base.metadata.tables)}")


async def drop_all_tables() -> None:
    """
    Drop all database tables and their data.

    WARNING: Irreversible data loss. Only use in development environments.
    """
    engine = get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.info(f"{__name__}:drop_all_tables - All tables dropped")


if __name__ == "__main__":
    from chunkbridge.observability.logger import configure_logging

    configure_logging()
    asyncio.run(create_all_tables())
