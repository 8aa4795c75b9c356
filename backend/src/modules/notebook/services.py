"""Notebook management service."""

from typing import Any, Optional, cast
from uuid import UUID

from fastcrud.paginated.response import paginated_response
from pydantic import BaseModel
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.logging import get_logger
from ...infrastructure.storage import ObjectStorage, get_object_storage
from ..document.models import Document
from .crud import notebook_crud
from .models import Notebook
from .schemas import NotebookCreate, NotebookRead, NotebookUpdate

logger = get_logger(__name__)


class NotebookService:
    """Service for managing a user's notebooks.

    Every query filters on ``user_id``: a notebook owned by someone else is
    indistinguishable from a missing one.
    """

    def __init__(self, storage: Optional[ObjectStorage] = None):
        self._storage = storage

    @property
    def storage(self) -> ObjectStorage:
        if self._storage is None:
            self._storage = get_object_storage()
        return self._storage

    async def create_notebook(
        self,
        user_id: str,
        notebook_data: NotebookCreate,
        db: AsyncSession,
    ) -> NotebookRead:
        """Create a new notebook for ``user_id``.

        Args:
            user_id: Owner of the notebook
            notebook_data: Notebook creation data
            db: Database session

        Returns:
            Created notebook data
        """

        class NotebookCreateInternal(BaseModel):
            user_id: str
            title: str
            description: str | None = None
            is_featured: bool = False
            source_count: int = 0

        notebook_internal = NotebookCreateInternal(user_id=user_id, **notebook_data.model_dump())

        created_notebook = cast(Any, await notebook_crud.create(db=db, object=notebook_internal))

        return NotebookRead.model_validate(created_notebook)

    async def get_notebook(
        self,
        notebook_id: UUID,
        user_id: str,
        db: AsyncSession,
    ) -> Optional[NotebookRead]:
        """Get a notebook owned by ``user_id``.

        Returns:
            Notebook data, or None when missing or owned by another user
        """
        notebook = await notebook_crud.get(db=db, id=notebook_id, user_id=user_id)
        if not notebook:
            return None

        return NotebookRead(**notebook)

    async def notebook_exists(self, notebook_id: UUID, user_id: str, db: AsyncSession) -> bool:
        return await notebook_crud.exists(db=db, id=notebook_id, user_id=user_id)

    async def get_notebooks(
        self,
        user_id: str,
        db: AsyncSession,
        page: int = 1,
        items_per_page: int = 50,
    ) -> dict[str, Any]:
        """Get the user's notebooks, featured first and then most recently updated.

        Args:
            user_id: Owner of the notebooks
            db: Database session
            page: Page number (1-indexed)
            items_per_page: Number of notebooks per page

        Returns:
            Paginated response with notebooks
        """
        offset = (page - 1) * items_per_page

        result = await notebook_crud.get_multi(
            db=db,
            offset=offset,
            limit=items_per_page,
            sort_columns=["is_featured", "updated_at"],
            sort_orders=["desc", "desc"],
            user_id=user_id,
        )

        return paginated_response(result, page, items_per_page)

    async def count_notebooks(self, user_id: str, db: AsyncSession) -> int:
        return await notebook_crud.count(db=db, user_id=user_id)

    async def update_notebook(
        self,
        notebook_id: UUID,
        user_id: str,
        update_data: NotebookUpdate,
        db: AsyncSession,
    ) -> Optional[NotebookRead]:
        """Update a notebook.

        Returns:
            Updated notebook data, or None when the notebook does not exist
        """
        if not await self.notebook_exists(notebook_id, user_id, db):
            return None

        update_dict = update_data.model_dump(exclude_unset=True)
        if update_dict:
            await notebook_crud.update(db=db, object=update_dict, id=notebook_id, user_id=user_id)

        return await self.get_notebook(notebook_id, user_id, db)

    async def delete_notebook(
        self,
        notebook_id: UUID,
        user_id: str,
        db: AsyncSession,
    ) -> bool:
        """Delete a notebook, its stored PDFs and, by cascade, all its rows.

        Returns:
            True if the notebook existed and was deleted
        """
        if not await self.notebook_exists(notebook_id, user_id, db):
            return False

        result = await db.execute(select(Document.storage_path).where(Document.notebook_id == notebook_id))
        for storage_path in result.scalars():
            if storage_path:
                await self.storage.delete(storage_path)

        await notebook_crud.delete(db=db, id=notebook_id, user_id=user_id)
        logger.info("Notebook deleted", extra={"notebook_id": str(notebook_id)})
        return True

    async def refresh_source_count(self, notebook_id: UUID, db: AsyncSession) -> int:
        """Recompute the denormalized document count of a notebook.

        Returns:
            The new source count
        """
        result = await db.execute(select(func.count(Document.id)).where(Document.notebook_id == notebook_id))
        source_count = int(result.scalar_one())

        await db.execute(
            update(Notebook).where(Notebook.id == notebook_id).values(source_count=source_count)
        )
        await db.commit()

        return source_count
