"""
Local filesystem document store implementation.

This module provides a document store that keeps each document as a JSON
file under ``<base_path>/<collection>/<key>.json``. It's suitable for
development and single-instance deployments.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from .base import (
    DocumentStore,
    StorageError,
    StorageNotFoundError,
    StoragePermissionError,
)

logger = logging.getLogger(__name__)

DOCUMENT_SUFFIX = ".json"


class LocalDocumentStore(DocumentStore):
    """
    Local filesystem document store.

    Stores documents as UTF-8 JSON files, one directory per collection.
    """

    def __init__(self, base_path: str = "storage", create_dirs: bool = True):
        """
        Initialize the local document store.

        Args:
            base_path: Base directory for storing documents
            create_dirs: Whether to create directories if they don't exist
        """
        self.base_path = Path(base_path)
        self.create_dirs = create_dirs

        if self.create_dirs:
            self.base_path.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _sanitize(part: str) -> str:
        # Keys must name a single file inside their collection directory
        if (
            not part.strip()
            or part in (".", "..")
            or any(char in part for char in ("/", "\\", "\0"))
        ):
            raise StorageError(f"Invalid document path component: {part!r}")
        return part

    def _get_document_path(self, collection: str, key: str) -> Path:
        """
        Get the full local path for a document.

        Args:
            collection: Collection name
            key: Document key

        Returns:
            Path: Full local filesystem path
        """
        return (
            self.base_path
            / self._sanitize(collection)
            / f"{self._sanitize(key)}{DOCUMENT_SUFFIX}"
        )

    def put_document(self, collection: str, key: str, payload: Dict[str, Any]) -> str:
        try:
            local_path = self._get_document_path(collection, key)

            if self.create_dirs:
                local_path.parent.mkdir(parents=True, exist_ok=True)

            with open(local_path, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2, default=str)

            logger.debug(f"Stored document {collection}/{key}")
            return key

        except PermissionError as e:
            raise StoragePermissionError(
                f"Permission denied storing document {collection}/{key}: {e}"
            )
        except OSError as e:
            raise StorageError(f"Failed to store document {collection}/{key}: {e}")

    def get_document(self, collection: str, key: str) -> Dict[str, Any]:
        try:
            local_path = self._get_document_path(collection, key)

            if not local_path.exists():
                raise StorageNotFoundError(f"Document not found: {collection}/{key}")

            with open(local_path, "r", encoding="utf-8") as f:
                return json.load(f)

        except PermissionError as e:
            raise StoragePermissionError(
                f"Permission denied retrieving document {collection}/{key}: {e}"
            )
        except json.JSONDecodeError as e:
            logger.error(f"Corrupted document {collection}/{key}: {e}")
            raise StorageError(f"Failed to decode document {collection}/{key}: {e}")
        except OSError as e:
            raise StorageError(f"Failed to retrieve document {collection}/{key}: {e}")

    def delete_document(self, collection: str, key: str) -> bool:
        try:
            local_path = self._get_document_path(collection, key)
            if not local_path.exists():
                return False

            local_path.unlink()
            return True

        except PermissionError as e:
            raise StoragePermissionError(
                f"Permission denied deleting document {collection}/{key}: {e}"
            )
        except OSError as e:
            raise StorageError(f"Failed to delete document {collection}/{key}: {e}")

    def document_exists(self, collection: str, key: str) -> bool:
        return self._get_document_path(collection, key).exists()

    def list_documents(self, collection: str) -> List[str]:
        collection_path = self.base_path / self._sanitize(collection)
        if not collection_path.exists():
            return []

        try:
            return sorted(
                path.name[: -len(DOCUMENT_SUFFIX)]
                for path in collection_path.iterdir()
                if path.is_file() and path.name.endswith(DOCUMENT_SUFFIX)
            )
        except OSError as e:
            raise StorageError(f"Failed to list collection {collection}: {e}")
