"""API tests for the chat endpoint with mocked retrieval and generation."""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import AsyncClient

from src.interfaces.api.dependencies import get_chat_history_service, get_chat_service
from src.interfaces.main import app
from src.modules.chat.services import ChatService
from src.modules.chunk.schemas import ChunkMatch
from src.modules.common.constants import NO_CONTEXT_ANSWER
from src.modules.common.exceptions import NotebookNotFoundError
from src.modules.retrieval.services import RetrievalService


def make_match(similarity: float, page: int = 1) -> ChunkMatch:
    return ChunkMatch(
        chunk_id=uuid.uuid4(),
        document_id=uuid.uuid4(),
        filename="cells.pdf",
        page_number=page,
        chunk_index=0,
        content="Mitochondria are the powerhouse of the cell.",
        similarity=similarity,
    )


@pytest.fixture
def retrieval_service():
    service = MagicMock()
    service.retrieve = AsyncMock(return_value=[])
    return service


@pytest.fixture
def generation_service():
    service = MagicMock()
    service.generate = AsyncMock(return_value="Mitochondria produce ATP.\n\n📚 Source: cells.pdf, Page 1")
    return service


@pytest.fixture
def chat_app(api_client, retrieval_service, generation_service):
    chat_service = ChatService(retrieval_service=retrieval_service, generation_service=generation_service)
    history_service = MagicMock()
    history_service.record_exchange = AsyncMock(return_value=[])
    app.dependency_overrides[get_chat_service] = lambda: chat_service
    app.dependency_overrides[get_chat_history_service] = lambda: history_service
    return history_service


class TestChatAPI:
    @pytest.mark.asyncio
    async def test_answer_with_sources(
        self, api_client: AsyncClient, auth_headers, chat_app, retrieval_service, generation_service
    ):
        retrieval_service.retrieve.return_value = [make_match(0.91, page=1), make_match(0.72, page=3)]

        response = await api_client.post(
            "/api/v1/chat",
            json={"message": "What do mitochondria do?", "selected_documents": [str(uuid.uuid4())]},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["answer"].startswith("Mitochondria produce ATP.")
        assert [source["page_number"] for source in data["sources"]] == [1, 3]
        assert data["message_ids"] == []
        generation_service.generate.assert_awaited_once()
        chat_app.record_exchange.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_relevant_chunks(self, api_client: AsyncClient, auth_headers, chat_app, generation_service):
        response = await api_client.post(
            "/api/v1/chat",
            json={"message": "Who won the world cup?", "selected_documents": [str(uuid.uuid4())]},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["answer"] == NO_CONTEXT_ANSWER
        assert response.json()["sources"] == []
        generation_service.generate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_exchange_is_recorded_in_notebook(
        self, api_client: AsyncClient, auth_headers, user_id, chat_app, retrieval_service
    ):
        retrieval_service.retrieve.return_value = [make_match(0.8)]
        message_ids = [uuid.uuid4(), uuid.uuid4()]
        chat_app.record_exchange.return_value = [MagicMock(id=message_id) for message_id in message_ids]
        notebook_id = uuid.uuid4()

        response = await api_client.post(
            "/api/v1/chat",
            json={
                "message": "What do mitochondria do?",
                "selected_documents": [str(uuid.uuid4())],
                "notebook_id": str(notebook_id),
            },
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["message_ids"] == [str(message_id) for message_id in message_ids]
        args, kwargs = chat_app.record_exchange.call_args
        assert args[0] == notebook_id
        assert args[1] == user_id
        assert args[2] == "What do mitochondria do?"
        assert kwargs["session_id"] is None

    @pytest.mark.asyncio
    async def test_unknown_notebook(self, api_client: AsyncClient, auth_headers, chat_app, retrieval_service):
        retrieval_service.retrieve.return_value = [make_match(0.8)]
        chat_app.record_exchange.side_effect = NotebookNotFoundError("Notebook not found")

        response = await api_client.post(
            "/api/v1/chat",
            json={"message": "Hi", "selected_documents": [str(uuid.uuid4())], "notebook_id": str(uuid.uuid4())},
            headers=auth_headers,
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_generation_failure(
        self, api_client: AsyncClient, auth_headers, chat_app, retrieval_service, generation_service
    ):
        retrieval_service.retrieve.return_value = [make_match(0.8)]
        generation_service.generate.side_effect = RuntimeError("quota exceeded")

        response = await api_client.post(
            "/api/v1/chat",
            json={"message": "Hi", "selected_documents": [str(uuid.uuid4())]},
            headers=auth_headers,
        )

        assert response.status_code == 500
        assert "quota exceeded" in response.json()["detail"]


class TestChatValidation:
    """Missing input is rejected before any embedding happens."""

    @pytest.fixture
    def chat_app(self, api_client):
        embedding_service = MagicMock()
        embedding_service.embed_text = AsyncMock()

        chat_service = ChatService(
            retrieval_service=RetrievalService(embedding_service=embedding_service),
            generation_service=MagicMock(),
        )
        app.dependency_overrides[get_chat_service] = lambda: chat_service
        return embedding_service

    @pytest.mark.asyncio
    async def test_missing_message(self, api_client: AsyncClient, auth_headers, chat_app):
        response = await api_client.post(
            "/api/v1/chat", json={"selected_documents": [str(uuid.uuid4())]}, headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Message is required"
        chat_app.embed_text.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_documents_selected(self, api_client: AsyncClient, auth_headers, chat_app):
        response = await api_client.post("/api/v1/chat", json={"message": "Hello"}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "At least one document must be selected"
