import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from infrastructure.database.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_document_id() -> str:
    return uuid.uuid4().hex


class DocumentRecord(Base):
    """One schemaless document; ``collection`` plays the role of a table name."""

    __tablename__ = "documents"

    id = Column(String(32), primary_key=True, default=_new_document_id)
    collection = Column(String(64), nullable=False, index=True)
    data = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    tokens = relationship(
        "DocumentToken",
        back_populates="document",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("ix_documents_collection_created_at", "collection", "created_at"),
    )


class DocumentToken(Base):
    """Array-field membership index: one row per (document, field, element)."""

    __tablename__ = "document_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    document_id = Column(
        String(32),
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    collection = Column(String(64), nullable=False)
    field = Column(String(64), nullable=False)
    token = Column(Text, nullable=False)

    document = relationship("DocumentRecord", back_populates="tokens")

    __table_args__ = (
        Index("ix_document_tokens_lookup", "collection", "field", "token"),
    )
