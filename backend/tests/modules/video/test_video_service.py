"""Tests for video recommendations."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.modules.video.services import (
    DEFAULT_TOPIC,
    VideoService,
    fallback_recommendations,
    parse_recommendations,
    topic_from_filename,
    youtube_search_url,
)


@pytest.fixture
def generation_service():
    service = MagicMock()
    service.generate = AsyncMock()
    return service


@pytest.fixture
def video_service(generation_service):
    return VideoService(generation_service=generation_service)


class TestHelpers:
    @pytest.mark.parametrize(
        "filename,topic",
        [("Cell Biology.pdf", "Cell Biology"), ("notes.DOCX", "notes"), ("chapter.md", "chapter.md"), (".pdf", DEFAULT_TOPIC)],
    )
    def test_topic_from_filename(self, filename, topic):
        assert topic_from_filename(filename) == topic

    def test_youtube_search_url(self):
        assert youtube_search_url("cell biology & ATP") == "https://www.youtube.com/results?search_query=cell+biology+%26+ATP"

    def test_fallback(self):
        videos = fallback_recommendations("Photosynthesis", 5)

        assert len(videos) == 5
        assert videos[0].search_query == "Photosynthesis explained"
        assert all(v.url.startswith("https://www.youtube.com/results?search_query=Photosynthesis") for v in videos)

    def test_parse_array(self):
        text = '```json\n[{"title": "Intro to ATP", "search_query": "ATP basics"}]\n```'

        videos = parse_recommendations(text, 5)

        assert len(videos) == 1
        assert videos[0].title == "Intro to ATP"
        assert videos[0].url.endswith("search_query=ATP+basics")

    @pytest.mark.parametrize("text", ["not json", "[]", '[{"title": "no query"}]', '{"title": "x"}'])
    def test_parse_rejects(self, text):
        with pytest.raises(ValueError):
            parse_recommendations(text, 5)


class TestVideoService:
    @pytest.mark.asyncio
    async def test_recommend_uses_model_output(self, video_service, generation_service):
        generation_service.generate.return_value = (
            '[{"title": "A", "search_query": "a"}, {"title": "B", "search_query": "b"}]'
        )

        videos = await video_service.recommend("Cells", "Mitochondria produce ATP.")

        assert [v.search_query for v in videos] == ["a", "b"]
        prompt = generation_service.generate.call_args.args[0]
        assert "Topic: Cells" in prompt
        assert "Mitochondria produce ATP." in prompt

    @pytest.mark.asyncio
    async def test_recommend_truncates_content(self, video_service, generation_service):
        generation_service.generate.return_value = '[{"title": "A", "search_query": "a"}]'
        video_service.context_chars = 10

        await video_service.recommend("Cells", "0123456789ABCDEF")

        prompt = generation_service.generate.call_args.args[0]
        assert "0123456789" in prompt
        assert "ABCDEF" not in prompt

    @pytest.mark.asyncio
    async def test_recommend_falls_back(self, video_service, generation_service):
        generation_service.generate.return_value = "Here are some great videos!"

        videos = await video_service.recommend("", None)

        assert len(videos) == video_service.count
        assert videos[0].search_query == f"{DEFAULT_TOPIC} explained"
