"""
SQL document store implementation.

Documents are kept in the ``documents`` table as JSON payloads, one row per
(collection, key). Works with any SQLAlchemy-supported database; SQLite is
used for development and tests.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import Engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from liquidador.database.base import create_tables, make_engine
from liquidador.database.models import Document

from .base import DocumentStore, StorageError, StorageNotFoundError

logger = logging.getLogger(__name__)


class SqlDocumentStore(DocumentStore):
    """Document store backed by a relational database."""

    def __init__(self, db_url: Optional[str] = None, engine: Optional[Engine] = None):
        """
        Initialize the SQL document store.

        Args:
            db_url: Database URL, used when no engine is given
            engine: Existing engine to reuse
        """
        if engine is None:
            if not db_url:
                raise ValueError("Either db_url or engine must be provided")
            engine = make_engine(db_url)

        self.engine = engine
        self._session_factory = sessionmaker(bind=engine)
        create_tables(engine)

    def _find(self, session, collection: str, key: str) -> Optional[Document]:
        return session.execute(
            select(Document).where(
                Document.collection == collection, Document.key == key
            )
        ).scalar_one_or_none()

    def put_document(self, collection: str, key: str, payload: Dict[str, Any]) -> str:
        try:
            with self._session_factory() as session:
                document = self._find(session, collection, key)
                if document is None:
                    session.add(Document(collection=collection, key=key, payload=payload))
                else:
                    document.payload = payload
                    document.updated_at = datetime.utcnow()
                session.commit()

            logger.debug(f"Stored document {collection}/{key}")
            return key

        except SQLAlchemyError as e:
            logger.error(f"Failed to store document {collection}/{key}: {e}")
            raise StorageError(f"Failed to store document {collection}/{key}: {e}")

    def get_document(self, collection: str, key: str) -> Dict[str, Any]:
        try:
            with self._session_factory() as session:
                document = self._find(session, collection, key)
                if document is None:
                    raise StorageNotFoundError(f"Document not found: {collection}/{key}")
                return dict(document.payload)

        except SQLAlchemyError as e:
            logger.error(f"Failed to retrieve document {collection}/{key}: {e}")
            raise StorageError(f"Failed to retrieve document {collection}/{key}: {e}")

    def delete_document(self, collection: str, key: str) -> bool:
        try:
            with self._session_factory() as session:
                document = self._find(session, collection, key)
                if document is None:
                    return False
                session.delete(document)
                session.commit()
                return True

        except SQLAlchemyError as e:
            raise StorageError(f"Failed to delete document {collection}/{key}: {e}")

    def document_exists(self, collection: str, key: str) -> bool:
        with self._session_factory() as session:
            return self._find(session, collection, key) is not None

    def list_documents(self, collection: str) -> List[str]:
        with self._session_factory() as session:
            keys = session.execute(
                select(Document.key)
                .where(Document.collection == collection)
                .order_by(Document.key)
            ).scalars()
            return list(keys)
