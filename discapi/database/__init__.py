"""Database module for the application.

This module provides async SQLAlchemy configuration, session management
and the catalog models.
"""

from discapi.database.engine import (
    create_tables,
    dispose_engine,
    get_db_session,
    get_db_session_context,
    get_engine,
    get_session_factory,
    init_engine,
)
from discapi.database.models import Base, Record, Singer, Song
from discapi.database.repository import fetch_page, get_or_404

__all__ = [
    "init_engine",
    "get_engine",
    "get_session_factory",
    "get_db_session",
    "get_db_session_context",
    "create_tables",
    "dispose_engine",
    "Base",
    "Singer",
    "Record",
    "Song",
    "fetch_page",
    "get_or_404",
]
