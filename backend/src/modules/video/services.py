"""Video recommendations as YouTube search queries."""

import re
from typing import List, Optional
from urllib.parse import urlencode
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.config.settings import get_settings
from ...infrastructure.generation import GenerationService, get_generation_service
from ...infrastructure.logging import get_logger
from ..chunk.services import ChunkService
from ..common.exceptions import DocumentNotFoundError
from ..common.utils.model_output import parse_model_json
from ..document.crud import document_crud
from .schemas import VideoRecommendation

logger = get_logger(__name__)

DEFAULT_TOPIC = "General Study Topics"
YOUTUBE_SEARCH_URL = "https://www.youtube.com/results"
FALLBACK_QUERY_SUFFIXES = ["explained", "tutorial", "lecture", "for beginners", "examples"]

_DOCUMENT_EXTENSION = re.compile(r"\.(pdf|txt|doc|docx)$", re.IGNORECASE)

VIDEO_PROMPT_TEMPLATE = """
You are helping a student find YouTube videos to study a topic.
Suggest {count} videos as a JSON array. Each item must be an object with:
- "title": a short descriptive title of the kind of video to watch
- "search_query": the YouTube search query that finds it

Topic: {topic}
{content_block}
Respond with the JSON array only.
"""


def topic_from_filename(filename: str) -> str:
    return _DOCUMENT_EXTENSION.sub("", filename) or DEFAULT_TOPIC


def youtube_search_url(query: str) -> str:
    return f"{YOUTUBE_SEARCH_URL}?{urlencode({'search_query': query})}"


def fallback_recommendations(topic: str, count: int) -> List[VideoRecommendation]:
    """Fixed queries built from the topic, used when the model output is unusable."""
    queries = [f"{topic} {suffix}" for suffix in FALLBACK_QUERY_SUFFIXES][:count]
    return [
        VideoRecommendation(title=query.title(), search_query=query, url=youtube_search_url(query)) for query in queries
    ]


def parse_recommendations(text: str, count: int) -> List[VideoRecommendation]:
    """Parse a JSON array of ``{title, search_query}`` objects.

    Raises:
        ValueError: If the text is not such an array.
    """
    data = parse_model_json(text)
    if isinstance(data, dict):
        data = data.get("videos")
    if not isinstance(data, list):
        raise ValueError("Expected a JSON array of videos")

    videos = []
    for item in data[:count]:
        if not isinstance(item, dict) or not item.get("search_query"):
            raise ValueError("Each video needs a search_query")
        query = str(item["search_query"])
        videos.append(
            VideoRecommendation(title=str(item.get("title") or query), search_query=query, url=youtube_search_url(query))
        )
    if not videos:
        raise ValueError("No videos in response")
    return videos


class VideoService:
    """Suggests videos for a topic, grounded on document text when available."""

    def __init__(self, generation_service: Optional[GenerationService] = None):
        settings = get_settings()
        self._generation_service = generation_service
        self.count = settings.VIDEO_RECOMMENDATION_COUNT
        self.context_chars = settings.VIDEO_CONTEXT_CHARS
        self.chunk_service = ChunkService()

    @property
    def generation_service(self) -> GenerationService:
        if self._generation_service is None:
            self._generation_service = get_generation_service()
        return self._generation_service

    async def load_document_context(self, document_id: UUID, user_id: str, db: AsyncSession) -> tuple[str, str]:
        """Return ``(topic from filename, joined chunk text)`` for a document.

        Raises:
            DocumentNotFoundError: If the document is missing or not owned.
        """
        document = await document_crud.get(db=db, id=document_id, user_id=user_id)
        if not document:
            raise DocumentNotFoundError(f"Document {document_id} not found")

        chunks = await self.chunk_service.get_chunks_by_document(document_id, db)
        return topic_from_filename(document["filename"]), "\n\n".join(chunk.content for chunk in chunks)

    async def recommend(self, topic: Optional[str], document_content: Optional[str] = None) -> List[VideoRecommendation]:
        """Ask the model for video search queries, falling back to fixed queries."""
        topic = (topic or "").strip() or DEFAULT_TOPIC
        content = (document_content or "").strip()[: self.context_chars]
        content_block = f"Study material excerpt:\n---\n{content}\n---\n" if content else ""

        prompt = VIDEO_PROMPT_TEMPLATE.format(count=self.count, topic=topic, content_block=content_block)
        text = await self.generation_service.generate(prompt)

        try:
            return parse_recommendations(text, self.count)
        except ValueError as e:
            logger.warning(f"Using fallback video queries for {topic!r}: {e}")
            return fallback_recommendations(topic, self.count)
