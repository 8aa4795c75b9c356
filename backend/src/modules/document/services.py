"""Document management service."""

from typing import Any, Optional, Tuple
from uuid import UUID

from fastcrud.paginated.response import paginated_response
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.logging import get_logger
from ...infrastructure.storage import ObjectStorage, get_object_storage
from ..chunk.models import DocumentChunk
from ..common.exceptions import DocumentNotFoundError
from ..notebook.services import NotebookService
from .crud import document_crud
from .models import Document, DocumentStatus
from .schemas import DocumentRead

logger = get_logger(__name__)


class DocumentService:
    """Service for reading and removing a user's documents.

    Creating documents goes through ingestion, which also stores the PDF.
    """

    def __init__(self, storage: Optional[ObjectStorage] = None):
        self._storage = storage
        self.notebook_service = NotebookService(storage=storage)

    @property
    def storage(self) -> ObjectStorage:
        if self._storage is None:
            self._storage = get_object_storage()
        return self._storage

    def _with_chunk_count(self, user_id: str, **filters: Any):
        stmt = (
            select(Document, func.count(DocumentChunk.id).label("chunk_count"))
            .outerjoin(DocumentChunk, Document.id == DocumentChunk.document_id)
            .where(Document.user_id == user_id)
            .group_by(Document.id)
        )
        for column, value in filters.items():
            stmt = stmt.where(getattr(Document, column) == value)
        return stmt

    @staticmethod
    def _to_read(document: Document, chunk_count: int) -> DocumentRead:
        return DocumentRead(
            id=document.id,
            notebook_id=document.notebook_id,
            user_id=document.user_id,
            filename=document.filename,
            storage_path=document.storage_path,
            file_size=document.file_size,
            page_count=document.page_count,
            status=DocumentStatus(document.status),
            chunk_count=chunk_count,
            created_at=document.created_at,
            updated_at=document.updated_at,
        )

    async def get_document(
        self,
        document_id: UUID,
        user_id: str,
        db: AsyncSession,
    ) -> Optional[DocumentRead]:
        """Get a document owned by ``user_id`` with its chunk count.

        Args:
            document_id: Document ID to retrieve
            user_id: Requesting user
            db: Database session

        Returns:
            Document data, or None when missing or owned by another user
        """
        result = await db.execute(self._with_chunk_count(user_id, id=document_id))
        row = result.first()
        if not row:
            return None

        return self._to_read(row[0], row.chunk_count)

    async def get_documents_by_notebook(
        self,
        notebook_id: UUID,
        user_id: str,
        db: AsyncSession,
        page: int = 1,
        items_per_page: int = 50,
    ) -> dict[str, Any]:
        """Get a notebook's documents, newest first, with chunk counts.

        Returns:
            Paginated response with documents
        """
        offset = (page - 1) * items_per_page

        total_count = await document_crud.count(db=db, notebook_id=notebook_id, user_id=user_id)

        stmt = (
            self._with_chunk_count(user_id, notebook_id=notebook_id)
            .order_by(Document.created_at.desc())
            .offset(offset)
            .limit(items_per_page)
        )
        result = await db.execute(stmt)
        documents = [self._to_read(row[0], row.chunk_count).model_dump() for row in result.all()]

        return paginated_response({"data": documents, "total_count": total_count}, page, items_per_page)

    async def get_document_pdf(
        self,
        document_id: UUID,
        user_id: str,
        db: AsyncSession,
    ) -> Tuple[str, bytes]:
        """Load the stored PDF of a document.

        Returns:
            Tuple of (filename, pdf bytes)

        Raises:
            DocumentNotFoundError: If the document or its stored object is missing.
        """
        document = await document_crud.get(db=db, id=document_id, user_id=user_id)
        if not document or not document["storage_path"]:
            raise DocumentNotFoundError(f"Document {document_id} not found")

        try:
            data = await self.storage.download(document["storage_path"])
        except FileNotFoundError as e:
            raise DocumentNotFoundError(f"Document {document_id} not found") from e

        return document["filename"], data

    async def set_status(
        self,
        document_id: UUID,
        status: DocumentStatus,
        db: AsyncSession,
        page_count: Optional[int] = None,
    ) -> None:
        values: dict[str, Any] = {"status": status.value}
        if page_count is not None:
            values["page_count"] = page_count

        await db.execute(update(Document).where(Document.id == document_id).values(**values))
        await db.commit()

    async def delete_document(
        self,
        document_id: UUID,
        user_id: str,
        db: AsyncSession,
    ) -> bool:
        """Delete a document, its chunks and its stored PDF.

        Returns:
            True if the document existed and was deleted
        """
        document = await document_crud.get(db=db, id=document_id, user_id=user_id)
        if not document:
            return False

        if document["storage_path"]:
            await self.storage.delete(document["storage_path"])

        await document_crud.delete(db=db, id=document_id, user_id=user_id)
        await self.notebook_service.refresh_source_count(document["notebook_id"], db)

        logger.info("Document deleted", extra={"document_id": str(document_id)})
        return True
