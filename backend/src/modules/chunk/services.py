"""Chunk storage and similarity search."""

from datetime import UTC, datetime
from typing import List
from uuid import UUID

from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..document.models import Document
from .crud import chunk_crud
from .models import DocumentChunk
from .schemas import ChunkCreate, ChunkMatch, ChunkRead


class ChunkService:
    """Service for writing a document's chunks and searching them by vector.

    Chunks are never edited in place: a document is embedded once, all its
    chunks in a single bulk insert.
    """

    async def create_chunks_bulk(
        self,
        chunks_data: List[ChunkCreate],
        db: AsyncSession,
    ) -> int:
        """Insert chunks in one statement and commit.

        Args:
            chunks_data: Embedded chunks
            db: Database session

        Returns:
            Number of inserted chunks
        """
        if not chunks_data:
            return 0

        now = datetime.now(UTC)
        chunks_to_insert = [
            {
                "document_id": chunk.document_id,
                "page_number": chunk.page_number,
                "chunk_index": chunk.chunk_index,
                "content": chunk.content,
                "embedding": chunk.embedding,
                "created_at": now,
                "updated_at": now,
            }
            for chunk in chunks_data
        ]

        await db.execute(insert(DocumentChunk), chunks_to_insert)
        await db.commit()

        return len(chunks_to_insert)

    async def count_chunks(self, document_id: UUID, db: AsyncSession) -> int:
        return await chunk_crud.count(db=db, document_id=document_id)

    async def get_chunks_by_document(
        self,
        document_id: UUID,
        db: AsyncSession,
    ) -> List[ChunkRead]:
        """Get a document's chunks in reading order.

        Returns:
            Chunks ordered by page number, then by position in the page
        """
        stmt = (
            select(DocumentChunk)
            .where(DocumentChunk.document_id == document_id)
            .order_by(DocumentChunk.page_number, DocumentChunk.chunk_index)
        )
        result = await db.execute(stmt)
        return [ChunkRead.model_validate(chunk) for chunk in result.scalars()]

    async def search_document_chunks(
        self,
        query_embedding: List[float],
        document_id: UUID,
        match_count: int,
        db: AsyncSession,
    ) -> List[ChunkMatch]:
        """Find the chunks of one document closest to ``query_embedding``.

        Args:
            query_embedding: Embedded question
            document_id: Document to search in
            match_count: Maximum number of matches
            db: Database session

        Returns:
            Matches ordered by descending similarity
        """
        distance = DocumentChunk.embedding.cosine_distance(query_embedding).label("distance")

        stmt = (
            select(
                DocumentChunk.id,
                DocumentChunk.document_id,
                Document.filename,
                DocumentChunk.page_number,
                DocumentChunk.chunk_index,
                DocumentChunk.content,
                distance,
            )
            .join(Document, Document.id == DocumentChunk.document_id)
            .where(DocumentChunk.document_id == document_id)
            .order_by(distance)
            .limit(match_count)
        )

        result = await db.execute(stmt)

        return [
            ChunkMatch(
                chunk_id=row.id,
                document_id=row.document_id,
                filename=row.filename,
                page_number=row.page_number,
                chunk_index=row.chunk_index,
                content=row.content,
                similarity=1.0 - float(row.distance),
            )
            for row in result.all()
        ]
