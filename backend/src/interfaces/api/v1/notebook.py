"""Notebook API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ....modules.common.utils.error_handler import handle_exception, unexpected_error
from ....modules.notebook.schemas import NotebookCreate, NotebookListResponse, NotebookRead, NotebookUpdate
from ....modules.notebook.services import NotebookService
from ..dependencies import CurrentUserId, DbSession, get_notebook_service

router = APIRouter(prefix="/notebook", tags=["Notebooks"])


@router.post(
    "/",
    status_code=status.HTTP_201_CREATED,
    summary="Create New Notebook",
    description="""
    Creates a notebook owned by the authenticated user.

    - **title**: Notebook title
    - **description**: Optional description
    - **is_featured**: Pin the notebook above the others
    """,
    responses={
        201: {"description": "Notebook created successfully"},
        401: {"description": "Missing or invalid bearer token"},
    },
)
async def create_notebook(
    notebook_data: NotebookCreate,
    user_id: CurrentUserId,
    db: DbSession,
    notebook_service: NotebookService = Depends(get_notebook_service),
) -> NotebookRead:
    """Create a new notebook."""
    try:
        return await notebook_service.create_notebook(user_id, notebook_data, db)
    except Exception as e:
        http_exc = handle_exception(e)
        if http_exc:
            raise http_exc
        raise unexpected_error(e, "Creating notebook")


@router.get(
    "/",
    response_model=NotebookListResponse,
    summary="List Notebooks",
    description="""
    Lists the user's notebooks: featured notebooks first, then the most
    recently updated.

    - **page**: Page number (1-indexed, default: 1)
    - **items_per_page**: Number of notebooks per page (default: 50, max: 100)
    """,
)
async def get_notebooks(
    user_id: CurrentUserId,
    db: DbSession,
    page: Annotated[int, Query(ge=1, description="Page number (1-indexed)")] = 1,
    items_per_page: Annotated[int, Query(ge=1, le=100, description="Items per page")] = 50,
    notebook_service: NotebookService = Depends(get_notebook_service),
):
    """Get the user's notebooks with pagination."""
    try:
        return await notebook_service.get_notebooks(user_id, db, page, items_per_page)
    except Exception as e:
        http_exc = handle_exception(e)
        if http_exc:
            raise http_exc
        raise unexpected_error(e, "Listing notebooks")


@router.get(
    "/{notebook_id}",
    summary="Get Notebook Details",
    responses={
        200: {"description": "Notebook details"},
        404: {"description": "Notebook not found"},
    },
)
async def get_notebook(
    notebook_id: UUID,
    user_id: CurrentUserId,
    db: DbSession,
    notebook_service: NotebookService = Depends(get_notebook_service),
) -> NotebookRead:
    """Get a specific notebook by ID."""
    try:
        result = await notebook_service.get_notebook(notebook_id, user_id, db)
        if not result:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notebook not found")
        return result
    except Exception as e:
        http_exc = handle_exception(e)
        if http_exc:
            raise http_exc
        raise unexpected_error(e, "Getting notebook")


@router.put(
    "/{notebook_id}",
    summary="Update Notebook",
    description="Updates the title, description or featured flag of a notebook. Omitted fields are left unchanged.",
    responses={
        200: {"description": "Notebook updated successfully"},
        404: {"description": "Notebook not found"},
    },
)
async def update_notebook(
    notebook_id: UUID,
    update_data: NotebookUpdate,
    user_id: CurrentUserId,
    db: DbSession,
    notebook_service: NotebookService = Depends(get_notebook_service),
) -> NotebookRead:
    """Update a notebook."""
    try:
        result = await notebook_service.update_notebook(notebook_id, user_id, update_data, db)
        if not result:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notebook not found")
        return result
    except Exception as e:
        http_exc = handle_exception(e)
        if http_exc:
            raise http_exc
        raise unexpected_error(e, "Updating notebook")


@router.delete(
    "/{notebook_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Notebook",
    description="""
    Deletes a notebook together with its documents, chunks, chat history and
    quiz attempts. Stored PDFs are removed as well.

    **Warning**: This operation cannot be undone.
    """,
    responses={
        204: {"description": "Notebook deleted successfully"},
        404: {"description": "Notebook not found"},
    },
)
async def delete_notebook(
    notebook_id: UUID,
    user_id: CurrentUserId,
    db: DbSession,
    notebook_service: NotebookService = Depends(get_notebook_service),
) -> None:
    """Delete a notebook."""
    try:
        deleted = await notebook_service.delete_notebook(notebook_id, user_id, db)
        if not deleted:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notebook not found")
    except Exception as e:
        http_exc = handle_exception(e)
        if http_exc:
            raise http_exc
        raise unexpected_error(e, "Deleting notebook")
