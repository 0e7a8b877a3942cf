"""Database models and configuration for the SQL document store."""

from .base import Base, create_tables, get_engine, get_session, make_engine
from .models import Document

__all__ = [
    "Base",
    "create_tables",
    "get_engine",
    "get_session",
    "make_engine",
    "Document",
]
