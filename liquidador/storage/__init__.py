"""
Storage module for pensioner documents.

This module provides a unified interface for storing and retrieving the
documents the liquidation engine reads (pensioners, payments, legacy
snapshots and causante records) from various backends.
"""

from .base import (
    DocumentStore,
    StorageError,
    StorageNotFoundError,
    StoragePermissionError,
)
from .factory import create_document_store, get_document_store
from .local import LocalDocumentStore
from .sql import SqlDocumentStore

__all__ = [
    "DocumentStore",
    "StorageError",
    "StorageNotFoundError",
    "StoragePermissionError",
    "LocalDocumentStore",
    "SqlDocumentStore",
    "create_document_store",
    "get_document_store",
]
