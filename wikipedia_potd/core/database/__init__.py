"""
Database layer for the Wikipedia POTD service.

Structure:
- entities/: SQLModel table models
- repositories/: Data access layer on top of async sessions
- session.py: Global engine and session factory management
- utils.py: Engine and session factory helpers
"""

from .base import Base
from .session import (
    async_session_maker,
    dispose_engine,
    engine,
    init_db,
)
from .utils import (
    create_all,
    create_engine,
    create_sessionmaker,
)

__all__ = [
    "Base",
    "async_session_maker",
    "create_all",
    "create_engine",
    "create_sessionmaker",
    "dispose_engine",
    "engine",
    "init_db",
]
