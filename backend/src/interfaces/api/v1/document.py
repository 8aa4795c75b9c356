"""Document API endpoints."""

from typing import Annotated
from urllib.parse import quote
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Response, UploadFile, status

from ....modules.common.exceptions import ValidationError
from ....modules.common.utils.error_handler import handle_exception, unexpected_error
from ....modules.document.schemas import DocumentEmbedRequest, DocumentEmbedResponse, DocumentListResponse, DocumentRead
from ....modules.document.services import DocumentService
from ....modules.ingestion.services import IngestionService
from ..dependencies import CurrentUserId, DbSession, get_document_service, get_ingestion_service

router = APIRouter(prefix="/document", tags=["Documents"])


@router.post(
    "/upload",
    status_code=status.HTTP_201_CREATED,
    summary="Upload PDF",
    description="""
    Uploads a PDF into a notebook, stores it and embeds its text.

    The PDF is parsed page by page, split into overlapping chunks and each
    chunk is embedded. A PDF without extractable text is rejected.

    - **file**: The PDF file (multipart)
    - **notebook_id**: Target notebook
    """,
    responses={
        201: {"description": "Document stored and embedded"},
        400: {"description": "Not a PDF, empty, too large or without text"},
        404: {"description": "Notebook not found"},
    },
)
async def upload_document(
    user_id: CurrentUserId,
    db: DbSession,
    file: Annotated[UploadFile, File(description="PDF file")],
    notebook_id: Annotated[UUID, Form(description="Notebook to add the document to")],
    ingestion_service: IngestionService = Depends(get_ingestion_service),
) -> DocumentRead:
    """Upload a PDF document."""
    try:
        max_size = ingestion_service.settings.MAX_UPLOAD_SIZE
        data = await file.read(max_size + 1)
        if len(data) > max_size:
            raise ValidationError(f"File exceeds the maximum upload size of {max_size} bytes")
        return await ingestion_service.upload_document(
            user_id, notebook_id, file.filename or "document.pdf", data, db, content_type=file.content_type
        )
    except Exception as e:
        http_exc = handle_exception(e)
        if http_exc:
            raise http_exc
        raise unexpected_error(e, "Uploading document")


@router.post(
    "/embed",
    summary="Ensure Document Embedded",
    description="""
    Makes sure a document has embedded chunks.

    Returns `already_embedded` with the existing chunk count, `processing`
    while an upload is still being ingested, or re-ingests the stored PDF
    and returns `embedded`.
    """,
    responses={
        200: {"description": "Document has embedded chunks"},
        400: {"description": "Missing document id or PDF without text"},
        404: {"description": "Document or stored PDF not found"},
    },
)
async def embed_document(
    request: DocumentEmbedRequest,
    user_id: CurrentUserId,
    db: DbSession,
    ingestion_service: IngestionService = Depends(get_ingestion_service),
) -> DocumentEmbedResponse:
    """Embed a document if it has no chunks yet."""
    try:
        if request.document_id is None:
            raise ValidationError("document_id is required")
        return await ingestion_service.ensure_embedded(request.document_id, user_id, db)
    except Exception as e:
        http_exc = handle_exception(e)
        if http_exc:
            raise http_exc
        raise unexpected_error(e, "Embedding document")


@router.get(
    "/",
    response_model=DocumentListResponse,
    summary="List Documents",
    description="""
    Lists the documents of a notebook, newest first, with chunk counts.

    - **notebook_id**: Notebook to list
    - **page**: Page number (1-indexed, default: 1)
    - **items_per_page**: Number of documents per page (default: 50, max: 100)
    """,
)
async def get_documents(
    user_id: CurrentUserId,
    db: DbSession,
    notebook_id: Annotated[UUID, Query(description="Notebook ID")],
    page: Annotated[int, Query(ge=1, description="Page number (1-indexed)")] = 1,
    items_per_page: Annotated[int, Query(ge=1, le=100, description="Items per page")] = 50,
    document_service: DocumentService = Depends(get_document_service),
):
    """Get a notebook's documents with pagination."""
    try:
        return await document_service.get_documents_by_notebook(notebook_id, user_id, db, page, items_per_page)
    except Exception as e:
        http_exc = handle_exception(e)
        if http_exc:
            raise http_exc
        raise unexpected_error(e, "Listing documents")


@router.get(
    "/{document_id}",
    summary="Get Document Details",
    responses={
        200: {"description": "Document details with chunk count"},
        404: {"description": "Document not found"},
    },
)
async def get_document(
    document_id: UUID,
    user_id: CurrentUserId,
    db: DbSession,
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentRead:
    """Get a specific document by ID."""
    try:
        result = await document_service.get_document(document_id, user_id, db)
        if not result:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
        return result
    except Exception as e:
        http_exc = handle_exception(e)
        if http_exc:
            raise http_exc
        raise unexpected_error(e, "Getting document")


@router.get(
    "/{document_id}/pdf",
    summary="Download PDF",
    response_class=Response,
    responses={
        200: {"content": {"application/pdf": {}}, "description": "The stored PDF"},
        404: {"description": "Document or stored PDF not found"},
    },
)
async def get_document_pdf(
    document_id: UUID,
    user_id: CurrentUserId,
    db: DbSession,
    document_service: DocumentService = Depends(get_document_service),
) -> Response:
    """Return the stored PDF bytes for the in-app viewer."""
    try:
        filename, data = await document_service.get_document_pdf(document_id, user_id, db)
    except Exception as e:
        http_exc = handle_exception(e)
        if http_exc:
            raise http_exc
        raise unexpected_error(e, "Loading PDF")

    return Response(
        content=data,
        media_type="application/pdf",
        headers={"Content-Disposition": f"inline; filename*=UTF-8''{quote(filename)}"},
    )


@router.delete(
    "/{document_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Document",
    description="""
    Deletes a document, its chunks and its stored PDF, then refreshes the
    notebook's source count.

    **Warning**: This operation cannot be undone.
    """,
    responses={
        204: {"description": "Document deleted successfully"},
        404: {"description": "Document not found"},
    },
)
async def delete_document(
    document_id: UUID,
    user_id: CurrentUserId,
    db: DbSession,
    document_service: DocumentService = Depends(get_document_service),
) -> None:
    """Delete a document."""
    try:
        deleted = await document_service.delete_document(document_id, user_id, db)
        if not deleted:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    except Exception as e:
        http_exc = handle_exception(e)
        if http_exc:
            raise http_exc
        raise unexpected_error(e, "Deleting document")
