"""
SQLAlchemy database models for the document store.

Every pensioner document (identity record, payments, legacy snapshots and
causante records) is kept as one JSON payload row keyed by collection and key.
"""

from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, Index, Integer, String, UniqueConstraint

from .base import Base


class Document(Base):
    """A JSON document in a named collection."""

    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, index=True)
    collection = Column(String(100), nullable=False, index=True)
    key = Column(String(255), nullable=False)
    payload = Column(JSON, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    __table_args__ = (
        UniqueConstraint("collection", "key", name="uq_documents_collection_key"),
        Index("idx_documents_collection_key", "collection", "key"),
    )

    def __repr__(self):
        return f"<Document(id={self.id}, collection='{self.collection}', key='{self.key}')>"
