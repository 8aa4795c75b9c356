"""Tests for NotebookService against PostgreSQL."""

from typing import Any, Dict

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.modules.document.models import Document
from src.modules.notebook.schemas import NotebookCreate, NotebookUpdate
from src.modules.notebook.services import NotebookService


@pytest.fixture
def notebook_service(storage):
    return NotebookService(storage=storage)


class TestNotebookService:
    @pytest.mark.asyncio
    async def test_create_and_get(self, db_session: AsyncSession, notebook_service, user_id):
        created = await notebook_service.create_notebook(
            user_id, NotebookCreate(title="Chemistry", description="Organic reactions"), db_session
        )

        assert created.title == "Chemistry"
        assert created.user_id == user_id
        assert created.source_count == 0
        assert created.is_featured is False

        fetched = await notebook_service.get_notebook(created.id, user_id, db_session)
        assert fetched is not None
        assert fetched.description == "Organic reactions"

    @pytest.mark.asyncio
    async def test_other_users_notebook_is_invisible(
        self, db_session: AsyncSession, notebook_service, user_id, other_notebook: Dict[str, Any]
    ):
        assert await notebook_service.get_notebook(other_notebook["id"], user_id, db_session) is None
        assert not await notebook_service.notebook_exists(other_notebook["id"], user_id, db_session)
        assert await notebook_service.update_notebook(
            other_notebook["id"], user_id, NotebookUpdate(title="Mine now"), db_session
        ) is None
        assert not await notebook_service.delete_notebook(other_notebook["id"], user_id, db_session)

    @pytest.mark.asyncio
    async def test_featured_first_then_recently_updated(self, db_session: AsyncSession, notebook_service, user_id):
        first = await notebook_service.create_notebook(user_id, NotebookCreate(title="First"), db_session)
        featured = await notebook_service.create_notebook(
            user_id, NotebookCreate(title="Welcome", is_featured=True), db_session
        )
        latest = await notebook_service.create_notebook(user_id, NotebookCreate(title="Latest"), db_session)
        await notebook_service.create_notebook("user-2", NotebookCreate(title="Not mine"), db_session)

        result = await notebook_service.get_notebooks(user_id, db_session)

        assert result["total_count"] == 3
        assert [notebook["id"] for notebook in result["data"]] == [featured.id, latest.id, first.id]

        await notebook_service.update_notebook(first.id, user_id, NotebookUpdate(title="First, renamed"), db_session)
        result = await notebook_service.get_notebooks(user_id, db_session)
        assert [notebook["title"] for notebook in result["data"]] == ["Welcome", "First, renamed", "Latest"]

    @pytest.mark.asyncio
    async def test_partial_update(self, db_session: AsyncSession, notebook_service, user_id, test_notebook):
        updated = await notebook_service.update_notebook(
            test_notebook["id"], user_id, NotebookUpdate(is_featured=True), db_session
        )

        assert updated is not None
        assert updated.is_featured is True
        assert updated.title == "Biology"
        assert updated.description == "Cell biology notes"

    @pytest.mark.asyncio
    async def test_delete_removes_documents_and_stored_pdfs(
        self, db_session: AsyncSession, notebook_service, storage, user_id, test_notebook, document_factory
    ):
        document = await document_factory(test_notebook["id"], user_id, "cells.pdf")
        storage_path = f"{user_id}/{document.id}.pdf"
        document.storage_path = storage_path
        await db_session.commit()
        await storage.upload(storage_path, b"%PDF-1.4")

        assert await notebook_service.delete_notebook(test_notebook["id"], user_id, db_session)

        assert not await storage.exists(storage_path)
        remaining = await db_session.execute(select(func.count(Document.id)))
        assert remaining.scalar_one() == 0
        assert await notebook_service.count_notebooks(user_id, db_session) == 0

    @pytest.mark.asyncio
    async def test_refresh_source_count(
        self, db_session: AsyncSession, notebook_service, user_id, test_notebook, document_factory
    ):
        await document_factory(test_notebook["id"], user_id, "a.pdf")
        await document_factory(test_notebook["id"], user_id, "b.pdf")

        assert await notebook_service.refresh_source_count(test_notebook["id"], db_session) == 2

        notebook = await notebook_service.get_notebook(test_notebook["id"], user_id, db_session)
        assert notebook is not None
        assert notebook.source_count == 2
