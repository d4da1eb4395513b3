"""
Global database session and engine management.

This module manages the global AsyncEngine and async_sessionmaker instances
that are used throughout the application for database access.
"""

from __future__ import annotations

from wikipedia_potd.core.logging_config import get_logger
from wikipedia_potd.server.core.config import settings

from .utils import create_all, create_engine, create_sessionmaker

logger = get_logger(__name__)

# Create global engine and session factory
engine = create_engine(settings.database_url)
async_session_maker = create_sessionmaker(engine)


async def init_db() -> None:
    """
    Initialize the database.

    Creates the tables that do not exist yet. PostgreSQL deployments may run
    the Alembic migrations beforehand, in which case this is a no-op.
    """
    await create_all(engine)
    logger.info(f"Database initialized: {engine.url.render_as_string(hide_password=True)}")


async def dispose_engine() -> None:
    """Close every pooled connection of the global engine."""
    await engine.dispose()
