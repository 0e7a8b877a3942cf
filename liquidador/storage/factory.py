"""
Document store factory for creating store instances based on configuration.

This module provides a factory function to create the appropriate document
store based on the application configuration.
"""

from typing import TYPE_CHECKING

from .base import DocumentStore
from .local import LocalDocumentStore
from .sql import SqlDocumentStore

if TYPE_CHECKING:
    from liquidador.config import Settings


def create_document_store(settings: "Settings") -> DocumentStore:
    """
    Create a document store instance based on configuration.

    Args:
        settings: Application settings containing storage configuration

    Returns:
        DocumentStore: Configured document store instance

    Raises:
        ValueError: If storage configuration is invalid
    """
    if settings.storage_type == "local":
        return LocalDocumentStore(base_path=settings.storage_base_path, create_dirs=True)

    elif settings.storage_type == "sql":
        if not settings.db_url:
            raise ValueError("DB_URL must be set when using SQL storage")
        return SqlDocumentStore(db_url=settings.db_url)

    else:
        raise ValueError(f"Unsupported storage type: {settings.storage_type}")


def get_document_store() -> DocumentStore:
    """
    Get a document store instance using global settings.

    Returns:
        DocumentStore: Configured document store instance
    """
    from liquidador.config import get_global_settings

    settings = get_global_settings()
    return create_document_store(settings)
