"""
Database package for SQLAlchemy models, schema reset and session management.

CHANGELOG:
- 2026-10-16: Initial creation

TODO:
- None
"""

from powerlog.src.db.models import Base, Device, PowerReading
from powerlog.src.db.schema import reset_schema
from powerlog.src.db.session import (
    create_engine,
    create_session_factory,
    dispose_engine,
    get_async_session,
    init_engine,
)

__all__ = [
    "Base",
    "Device",
    "PowerReading",
    "create_engine",
    "create_session_factory",
    "dispose_engine",
    "get_async_session",
    "init_engine",
    "reset_schema",
]
