"""Tests for first-login seeding against PostgreSQL."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.config.settings import get_settings
from src.modules.ingestion.services import IngestionService
from src.modules.notebook.schemas import NotebookCreate
from src.modules.notebook.services import NotebookService
from src.modules.seeding.services import SeedingService

PAGES = ["Photosynthesis converts light energy into chemical energy in plants. " * 3]


@pytest.fixture
def seed_folder(tmp_path):
    folder = tmp_path / "seed"
    folder.mkdir()
    (folder / "b-plants.pdf").write_bytes(b"%PDF-1.4 plants")
    (folder / "a-cells.pdf").write_bytes(b"%PDF-1.4 cells")
    (folder / "readme.txt").write_text("not a pdf")
    return folder


@pytest.fixture
def seeding_service(seed_folder, storage):
    embedding_service = MagicMock()
    embedding_service.embed_text = AsyncMock(return_value=[0.1] * 768)
    settings = get_settings().model_copy(update={"SEED_FOLDER": str(seed_folder)})
    ingestion_service = IngestionService(embedding_service=embedding_service, storage=storage, settings=settings)
    return SeedingService(ingestion_service=ingestion_service, settings=settings)


class TestSeedingService:
    @pytest.mark.asyncio
    async def test_list_seed_files(self, seeding_service):
        files = await seeding_service.list_seed_files()

        assert [path.name for path in files] == ["a-cells.pdf", "b-plants.pdf"]

    @pytest.mark.asyncio
    async def test_missing_folder(self, seeding_service, tmp_path):
        seeding_service.settings = seeding_service.settings.model_copy(update={"SEED_FOLDER": str(tmp_path / "none")})

        assert await seeding_service.list_seed_files() == []

    @pytest.mark.asyncio
    async def test_seed_new_user(self, db_session: AsyncSession, seeding_service, user_id):
        assert await seeding_service.user_needs_seeding(user_id, db_session)

        with patch("src.modules.ingestion.services.parse_pdf_pages", new=AsyncMock(return_value=PAGES)):
            result = await seeding_service.seed_new_user(user_id, db_session)

        assert result.success is True
        assert result.documents_created == 2
        assert not await seeding_service.user_needs_seeding(user_id, db_session)

        notebook = await NotebookService().get_notebook(result.notebook_id, user_id, db_session)
        assert notebook is not None
        assert notebook.is_featured is True
        assert notebook.title == get_settings().SEED_NOTEBOOK_TITLE
        assert notebook.source_count == 2

    @pytest.mark.asyncio
    async def test_failed_file_is_skipped(self, db_session: AsyncSession, seeding_service, user_id):
        parse = AsyncMock(side_effect=[PAGES, ["", "   "]])

        with patch("src.modules.ingestion.services.parse_pdf_pages", new=parse):
            result = await seeding_service.seed_new_user(user_id, db_session)

        assert result.success is True
        assert result.documents_created == 1

    @pytest.mark.asyncio
    async def test_existing_user_is_not_seeded(self, db_session: AsyncSession, seeding_service, user_id):
        await NotebookService().create_notebook(user_id, NotebookCreate(title="Mine"), db_session)

        result = await seeding_service.seed_new_user(user_id, db_session)

        assert result.success is True
        assert result.notebook_id is None
        assert result.documents_created == 0
        assert await NotebookService().count_notebooks(user_id, db_session) == 1
