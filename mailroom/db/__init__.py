"""Database package: async SQLAlchemy engine, session factory, Base."""
from mailroom.db.base import (
    Base,
    async_session_factory,
    create_tables,
    engine,
    get_db,
    get_session_factory,
)

__all__ = [
    "Base",
    "async_session_factory",
    "create_tables",
    "engine",
    "get_db",
    "get_session_factory",
]
