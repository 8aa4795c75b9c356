"""Tests for retrieval-augmented chat answers."""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.modules.chat.prompts import build_chat_prompt, build_context
from src.modules.chat.services import ChatService
from src.modules.chunk.schemas import ChunkMatch
from src.modules.common.constants import NO_CONTEXT_ANSWER

APOLOGY = "I'm sorry, I couldn't find any relevant information in the selected documents to answer your question."


@pytest.fixture
def matches():
    document_id = uuid.uuid4()
    return [
        ChunkMatch(
            chunk_id=uuid.uuid4(),
            document_id=document_id,
            filename="cells.pdf",
            page_number=3,
            content="Mitochondria produce ATP.",
            similarity=0.9,
        ),
        ChunkMatch(
            chunk_id=uuid.uuid4(),
            document_id=document_id,
            filename="cells.pdf",
            page_number=7,
            content="Ribosomes build proteins.",
            similarity=0.7,
        ),
    ]


@pytest.fixture
def retrieval_service():
    service = MagicMock()
    service.retrieve = AsyncMock()
    return service


@pytest.fixture
def generation_service():
    service = MagicMock()
    service.generate = AsyncMock(return_value="According to p. 3 of cells.pdf: 'Mitochondria produce ATP.'")
    return service


@pytest.fixture
def chat_service(retrieval_service, generation_service):
    return ChatService(retrieval_service=retrieval_service, generation_service=generation_service)


class TestChatService:
    @pytest.mark.asyncio
    async def test_no_matches_returns_apology(self, chat_service, retrieval_service, generation_service):
        retrieval_service.retrieve.return_value = []

        result = await chat_service.answer("What is ATP?", [uuid.uuid4()], MagicMock(), user_id="user-1")

        assert result.answer == APOLOGY == NO_CONTEXT_ANSWER
        assert result.sources == []
        generation_service.generate.assert_not_called()

    @pytest.mark.asyncio
    async def test_answer_grounded_on_matches(self, chat_service, retrieval_service, generation_service, matches):
        retrieval_service.retrieve.return_value = matches

        result = await chat_service.answer("What is ATP?", [matches[0].document_id], MagicMock(), user_id="user-1")

        assert result.answer.startswith("According to p. 3")
        assert [(s.filename, s.page_number) for s in result.sources] == [("cells.pdf", 3), ("cells.pdf", 7)]

        prompt = generation_service.generate.call_args.args[0]
        assert "Source: cells.pdf, Page: 3\nContent: Mitochondria produce ATP." in prompt
        assert "Question: What is ATP?" in prompt
        assert retrieval_service.retrieve.call_args.kwargs["user_id"] == "user-1"


class TestPrompts:
    def test_context_blocks_are_separated(self, matches):
        context = build_context(matches)

        assert context == (
            "Source: cells.pdf, Page: 3\nContent: Mitochondria produce ATP."
            "\n\n---\n\n"
            "Source: cells.pdf, Page: 7\nContent: Ribosomes build proteins."
        )

    def test_citation_format_survives_formatting(self):
        prompt = build_chat_prompt("Why?", "ctx")

        assert "According to p. {page_number} of {filename}: '{snippet}'" in prompt
        assert "Context:\n---\nctx\n---" in prompt
