"""SQLAlchemy models for chunk entities."""

import uuid as uuid_pkg
from typing import List

from pgvector.sqlalchemy import Vector
from sqlalchemy import ForeignKey, Index, Integer, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from ...infrastructure.config.settings import settings
from ...infrastructure.database.models import TimestampMixin, UUIDMixin
from ...infrastructure.database.session import Base


class DocumentChunk(Base, UUIDMixin, TimestampMixin):
    """Chunk model storing a page fragment with its vector embedding.

    ``page_number`` is 1-based and ``chunk_index`` restarts at 0 on every
    page, so (page_number, chunk_index) orders a document's chunks the way
    they appear in the PDF.
    """

    __tablename__ = "document_chunks"
    __table_args__ = (
        Index("ix_document_chunks_position", "document_id", "page_number", "chunk_index"),
        Index(
            "ix_document_chunks_embedding",
            "embedding",
            postgresql_using="hnsw",
            postgresql_with={"m": 16, "ef_construction": 64},
            postgresql_ops={"embedding": "vector_cosine_ops"},
        ),
    )

    document_id: Mapped[uuid_pkg.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("documents.id", ondelete="CASCADE"), index=True
    )
    page_number: Mapped[int] = mapped_column(Integer)
    chunk_index: Mapped[int] = mapped_column(Integer)
    content: Mapped[str] = mapped_column(Text)
    embedding: Mapped[List[float]] = mapped_column(Vector(settings.EMBEDDING_DIMENSION))
