"""
Base document store interface and exceptions.

This module defines the abstract interface that all document store
implementations must follow, along with common exceptions. Documents are
plain JSON-compatible dictionaries grouped in collections and addressed by
key, mirroring the layout of the pensioner database:

- ``pensionados/<pensioner id>``: identity record
- ``pagos/<pensioner id>``: ``{"records": [payment, ...]}``
- ``pagosHistorico/<document number>``: ``{"records": [snapshot, ...]}``
- ``causante/<document number>``: ``{"records": [sharing record, ...]}``
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List

PENSIONERS_COLLECTION = "pensionados"
PAYMENTS_COLLECTION = "pagos"
HISTORICAL_PAYMENTS_COLLECTION = "pagosHistorico"
SHARING_COLLECTION = "causante"


class StorageError(Exception):
    """Base exception for storage-related errors."""


class StorageNotFoundError(StorageError):
    """Raised when a requested document is not found in storage."""


class StoragePermissionError(StorageError):
    """Raised when there are permission issues with storage operations."""


class DocumentStore(ABC):
    """
    Abstract base class for document stores.

    This interface defines the contract that all storage implementations
    must follow for storing and retrieving documents.
    """

    @abstractmethod
    def put_document(self, collection: str, key: str, payload: Dict[str, Any]) -> str:
        """
        Store a document, replacing any previous version.

        Args:
            collection: Collection name
            key: Document key within the collection
            payload: JSON-compatible document body

        Returns:
            str: The key where the document was stored

        Raises:
            StorageError: If the document cannot be stored
        """

    @abstractmethod
    def get_document(self, collection: str, key: str) -> Dict[str, Any]:
        """
        Retrieve a document.

        Args:
            collection: Collection name
            key: Document key within the collection

        Returns:
            Dict: The document body

        Raises:
            StorageNotFoundError: If the document is not found
            StorageError: If the document cannot be retrieved
        """

    @abstractmethod
    def delete_document(self, collection: str, key: str) -> bool:
        """
        Delete a document.

        Returns:
            bool: True if the document was deleted, False if it didn't exist
        """

    @abstractmethod
    def document_exists(self, collection: str, key: str) -> bool:
        """Check if a document exists."""

    @abstractmethod
    def list_documents(self, collection: str) -> List[str]:
        """
        List document keys in a collection.

        Args:
            collection: Collection name

        Returns:
            Sorted list of document keys
        """

    def get_pensioner(self, pensioner_id: str) -> Dict[str, Any]:
        """
        Get a pensioner identity record.

        Raises:
            StorageNotFoundError: If the pensioner does not exist
        """
        document = self.get_document(PENSIONERS_COLLECTION, pensioner_id)
        return {"id": pensioner_id, **document}

    def list_payments(self, pensioner_id: str) -> List[Dict[str, Any]]:
        """Get the raw payment documents of a pensioner (empty when none)."""
        return self._get_records(PAYMENTS_COLLECTION, pensioner_id)

    def get_historical_records(self, document_number: str) -> List[Dict[str, Any]]:
        """Get the legacy payment snapshots of a document number."""
        return self._get_records(HISTORICAL_PAYMENTS_COLLECTION, document_number)

    def get_sharing_records(self, document_number: str) -> List[Dict[str, Any]]:
        """Get the causante (sharing) records of a document number."""
        return self._get_records(SHARING_COLLECTION, document_number)

    def _get_records(self, collection: str, key: str) -> List[Dict[str, Any]]:
        if not self.document_exists(collection, key):
            return []

        records = self.get_document(collection, key).get("records")
        if not isinstance(records, list):
            return []
        return records
