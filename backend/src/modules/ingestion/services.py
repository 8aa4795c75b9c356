"""Upload, parse, chunk and embed PDFs."""

import os
from typing import Any, List, Optional, cast
from uuid import UUID

from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.config.settings import Settings, get_settings
from ...infrastructure.embedding import EmbeddingService, get_embedding_service
from ...infrastructure.logging import get_logger
from ...infrastructure.pdf import PDFParseError, parse_pdf_pages
from ...infrastructure.storage import ObjectStorage, get_object_storage
from ..chunk.schemas import ChunkCreate
from ..chunk.services import ChunkService
from ..common.exceptions import DocumentNotFoundError, GenerationError, NotebookNotFoundError, ValidationError
from ..document.crud import document_crud
from ..document.models import DocumentStatus
from ..document.schemas import DocumentEmbedResponse, DocumentRead
from ..document.services import DocumentService
from ..notebook.services import NotebookService
from .chunking import build_page_chunks

logger = get_logger(__name__)

PDF_CONTENT_TYPES = {"application/pdf", "application/x-pdf"}


class IngestionService:
    """Turns uploaded PDF bytes into stored, embedded chunks.

    The pipeline is parse, chunk, embed, insert. Embedding calls are made one
    chunk at a time. The document row carries the outcome in ``status``.
    """

    def __init__(
        self,
        embedding_service: Optional[EmbeddingService] = None,
        storage: Optional[ObjectStorage] = None,
        settings: Optional[Settings] = None,
    ):
        self._embedding_service = embedding_service
        self._storage = storage
        self.settings = settings or get_settings()
        self.chunk_service = ChunkService()
        self.notebook_service = NotebookService(storage=storage)
        self.document_service = DocumentService(storage=storage)

    @property
    def embedding_service(self) -> EmbeddingService:
        if self._embedding_service is None:
            self._embedding_service = get_embedding_service()
        return self._embedding_service

    @property
    def storage(self) -> ObjectStorage:
        if self._storage is None:
            self._storage = get_object_storage()
        return self._storage

    def validate_upload(self, filename: str, data: bytes, content_type: Optional[str] = None) -> None:
        """Reject anything that is not a non-empty PDF within the size limit.

        Raises:
            ValidationError: If the file is not acceptable.
        """
        is_pdf_name = filename.lower().endswith(".pdf")
        is_pdf_type = content_type in PDF_CONTENT_TYPES
        if not (is_pdf_name or is_pdf_type):
            raise ValidationError("Only PDF files are supported")
        if not data:
            raise ValidationError("Uploaded file is empty")
        if len(data) > self.settings.MAX_UPLOAD_SIZE:
            raise ValidationError(f"File exceeds the maximum upload size of {self.settings.MAX_UPLOAD_SIZE} bytes")

    async def ingest(self, document_id: UUID, pdf_bytes: bytes, db: AsyncSession) -> int:
        """Parse, chunk and embed a stored document.

        Args:
            document_id: Document the chunks belong to
            pdf_bytes: Raw PDF bytes
            db: Database session

        Returns:
            Number of chunks stored

        Raises:
            ValidationError: If the PDF is unreadable or has no usable text.
            GenerationError: If the embedding model returns a vector of the wrong size.
        """
        try:
            pages = await parse_pdf_pages(pdf_bytes)
        except PDFParseError as e:
            await self.document_service.set_status(document_id, DocumentStatus.ERROR, db, page_count=0)
            raise ValidationError(str(e)) from e

        page_chunks = build_page_chunks(
            pages,
            chunk_size=self.settings.CHUNK_SIZE,
            overlap=self.settings.CHUNK_OVERLAP,
            min_length=self.settings.MIN_CHUNK_LENGTH,
        )

        if not page_chunks:
            await self.document_service.set_status(document_id, DocumentStatus.ERROR, db, page_count=0)
            raise ValidationError("No text content could be extracted from the PDF")

        try:
            chunks: List[ChunkCreate] = []
            for page_chunk in page_chunks:
                embedding = await self.embedding_service.embed_text(page_chunk.content)
                try:
                    chunks.append(ChunkCreate(document_id=document_id, embedding=embedding, **page_chunk.model_dump()))
                except SchemaValidationError as e:
                    raise GenerationError(f"Embedding model returned an unusable vector: {e.errors()[0]['msg']}") from e

            chunk_count = await self.chunk_service.create_chunks_bulk(chunks, db)
        except Exception:
            await db.rollback()
            await self.document_service.set_status(document_id, DocumentStatus.ERROR, db)
            raise

        await self.document_service.set_status(document_id, DocumentStatus.READY, db, page_count=len(pages))

        logger.info(
            "Document ingested",
            extra={"document_id": str(document_id), "page_count": len(pages), "chunk_count": chunk_count},
        )
        return chunk_count

    async def upload_document(
        self,
        user_id: str,
        notebook_id: UUID,
        filename: str,
        data: bytes,
        db: AsyncSession,
        content_type: Optional[str] = None,
    ) -> DocumentRead:
        """Store a PDF in a notebook and ingest it.

        Args:
            user_id: Uploading user
            notebook_id: Target notebook, must belong to ``user_id``
            filename: Original file name
            data: Raw PDF bytes
            db: Database session
            content_type: Declared MIME type, if any

        Returns:
            The created document record

        Raises:
            NotebookNotFoundError: If the notebook is missing or not owned.
            ValidationError: If the file is rejected or contains no text.
        """
        if not await self.notebook_service.notebook_exists(notebook_id, user_id, db):
            raise NotebookNotFoundError(f"Notebook {notebook_id} not found")

        self.validate_upload(filename, data, content_type)

        class DocumentCreateInternal(BaseModel):
            notebook_id: UUID
            user_id: str
            filename: str
            file_size: int
            status: str = DocumentStatus.PROCESSING.value

        document_internal = DocumentCreateInternal(
            notebook_id=notebook_id, user_id=user_id, filename=os.path.basename(filename), file_size=len(data)
        )
        created_document = cast(Any, await document_crud.create(db=db, object=document_internal))
        document_id = created_document.id

        storage_path = f"{user_id}/{document_id}.pdf"
        try:
            await self.storage.upload(storage_path, data)
        except Exception:
            logger.error("Storing PDF failed, removing document", extra={"document_id": str(document_id)})
            await document_crud.delete(db=db, id=document_id)
            raise

        await document_crud.update(db=db, object={"storage_path": storage_path}, id=document_id)

        try:
            await self.ingest(document_id, data, db)
        finally:
            await self.notebook_service.refresh_source_count(notebook_id, db)

        document = await self.document_service.get_document(document_id, user_id, db)
        if document is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return document

    async def ensure_embedded(
        self,
        document_id: UUID,
        user_id: str,
        db: AsyncSession,
    ) -> DocumentEmbedResponse:
        """Make sure a document has chunks, re-ingesting its stored PDF if not.

        A document still being ingested is reported as ``processing`` and left
        alone, so its chunks are only ever inserted by one run.

        Raises:
            DocumentNotFoundError: If the document or its stored PDF is missing.
        """
        document = await document_crud.get(db=db, id=document_id, user_id=user_id)
        if not document:
            raise DocumentNotFoundError(f"Document {document_id} not found")

        if document["status"] == DocumentStatus.PROCESSING.value:
            return DocumentEmbedResponse(document_id=document_id, status="processing", chunk_count=0)

        existing = await self.chunk_service.count_chunks(document_id, db)
        if existing > 0:
            return DocumentEmbedResponse(document_id=document_id, status="already_embedded", chunk_count=existing)

        _, pdf_bytes = await self.document_service.get_document_pdf(document_id, user_id, db)
        chunk_count = await self.ingest(document_id, pdf_bytes, db)

        return DocumentEmbedResponse(document_id=document_id, status="embedded", chunk_count=chunk_count)
