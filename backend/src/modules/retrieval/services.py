"""Multi-document similarity retrieval."""

from typing import Iterable, List, Optional, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.config.settings import get_settings
from ...infrastructure.embedding import EmbeddingService, get_embedding_service
from ...infrastructure.logging import get_logger
from ..chunk.schemas import ChunkMatch
from ..chunk.services import ChunkService
from ..common.exceptions import ValidationError
from ..document.crud import document_crud

logger = get_logger(__name__)

MIN_MATCH_COUNT = 3
MAX_MATCH_COUNT = 5
MAX_TOP_K = 5


def merge_matches(match_lists: Iterable[Sequence[ChunkMatch]], top_k: int) -> List[ChunkMatch]:
    """Merge per-document matches into one list of the ``top_k`` most similar chunks."""
    merged = [match for matches in match_lists for match in matches]
    merged.sort(key=lambda match: match.similarity, reverse=True)
    return merged[:top_k]


class RetrievalService:
    """Finds the chunks most relevant to a question across several documents.

    The question is embedded once; each document is then searched in turn
    and the results are merged by similarity. A document that is not owned
    by the user, or whose search fails, contributes nothing.
    """

    def __init__(
        self,
        embedding_service: Optional[EmbeddingService] = None,
        chunk_service: Optional[ChunkService] = None,
        match_count: Optional[int] = None,
        top_k: Optional[int] = None,
    ):
        settings = get_settings()
        self._embedding_service = embedding_service
        self.chunk_service = chunk_service or ChunkService()
        requested = match_count if match_count is not None else settings.RETRIEVAL_MATCH_COUNT
        self.match_count = max(MIN_MATCH_COUNT, min(MAX_MATCH_COUNT, requested))
        requested_top_k = top_k if top_k is not None else settings.RETRIEVAL_TOP_K
        self.top_k = max(1, min(MAX_TOP_K, requested_top_k))

    @property
    def embedding_service(self) -> EmbeddingService:
        if self._embedding_service is None:
            self._embedding_service = get_embedding_service()
        return self._embedding_service

    async def retrieve(
        self,
        question: str,
        document_ids: Sequence[UUID],
        db: AsyncSession,
        user_id: Optional[str] = None,
    ) -> List[ChunkMatch]:
        """Retrieve the globally most similar chunks for ``question``.

        Args:
            question: User question
            document_ids: Documents to search
            db: Database session
            user_id: When given, documents owned by someone else are skipped

        Returns:
            At most ``top_k`` matches, most similar first

        Raises:
            ValidationError: If the question or the document list is empty.
        """
        if not question or not question.strip():
            raise ValidationError("Message is required")
        if not document_ids:
            raise ValidationError("At least one document must be selected")

        unique_ids = list(dict.fromkeys(document_ids))
        query_embedding = await self.embedding_service.embed_text(question)

        per_document: List[List[ChunkMatch]] = []
        for document_id in unique_ids:
            try:
                if user_id is not None and not await document_crud.exists(db=db, id=document_id, user_id=user_id):
                    logger.warning("Skipping inaccessible document", extra={"document_id": str(document_id)})
                    continue
                matches = await self.chunk_service.search_document_chunks(
                    query_embedding, document_id, self.match_count, db
                )
            except Exception as e:
                logger.error(f"Search failed for document {document_id}: {e}")
                await db.rollback()
                continue
            per_document.append(matches)

        results = merge_matches(per_document, self.top_k)
        logger.debug(
            "Retrieved chunks",
            extra={"documents": len(unique_ids), "searched": len(per_document), "results": len(results)},
        )
        return results
