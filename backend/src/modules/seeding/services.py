"""Sample notebook for users without any notebook."""

from typing import List, Optional

import anyio
from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.config.settings import Settings, get_settings
from ...infrastructure.logging import get_logger
from ..ingestion.services import IngestionService
from ..notebook.schemas import NotebookCreate
from ..notebook.services import NotebookService
from .schemas import SeedResult

logger = get_logger(__name__)


class SeedingService:
    """Creates the featured welcome notebook from the PDFs in ``SEED_FOLDER``.

    PDFs go through the regular upload path. A file that fails is logged and
    skipped; the other files are still seeded.
    """

    def __init__(
        self,
        ingestion_service: Optional[IngestionService] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.ingestion_service = ingestion_service or IngestionService()
        self.notebook_service = NotebookService()

    async def user_needs_seeding(self, user_id: str, db: AsyncSession) -> bool:
        return await self.notebook_service.count_notebooks(user_id, db) == 0

    async def list_seed_files(self) -> List[anyio.Path]:
        folder = anyio.Path(self.settings.SEED_FOLDER)
        if not await folder.is_dir():
            logger.warning(f"Seed folder not found: {self.settings.SEED_FOLDER}")
            return []

        files = [path async for path in folder.iterdir() if path.name.lower().endswith(".pdf")]
        return sorted(files, key=lambda path: path.name)

    async def seed_new_user(self, user_id: str, db: AsyncSession) -> SeedResult:
        """Seed the welcome notebook unless the user already has notebooks.

        Returns:
            The created notebook id and the number of documents ingested
        """
        if not await self.user_needs_seeding(user_id, db):
            logger.info("User already has notebooks, skipping seeding")
            return SeedResult(success=True, documents_created=0)

        notebook = await self.notebook_service.create_notebook(
            user_id,
            NotebookCreate(
                title=self.settings.SEED_NOTEBOOK_TITLE,
                description=self.settings.SEED_NOTEBOOK_DESCRIPTION,
                is_featured=True,
            ),
            db,
        )

        documents_created = 0
        for path in await self.list_seed_files():
            try:
                data = await path.read_bytes()
                await self.ingestion_service.upload_document(
                    user_id, notebook.id, path.name, data, db, content_type="application/pdf"
                )
            except Exception as e:
                logger.error(f"Seeding {path.name} failed: {e}")
                await db.rollback()
                continue
            documents_created += 1

        logger.info(
            "Seeding complete",
            extra={"notebook_id": str(notebook.id), "documents_created": documents_created},
        )
        return SeedResult(success=True, notebook_id=notebook.id, documents_created=documents_created)
