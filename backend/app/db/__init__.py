"""Database package for ORM, session management, and the trip store."""

from .base import Base
from .session import get_db_session, get_engine, get_session_factory

__all__ = [
    "Base",
    "get_db_session",
    "get_engine",
    "get_session_factory",
]
