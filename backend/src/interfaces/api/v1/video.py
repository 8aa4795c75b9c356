"""Video recommendation API endpoints."""

from fastapi import APIRouter, Depends

from ....modules.common.utils.error_handler import handle_exception, unexpected_error
from ....modules.video.schemas import VideoRecommendationRequest, VideoRecommendationResponse
from ....modules.video.services import DEFAULT_TOPIC, VideoService
from ..dependencies import CurrentUserId, DbSession, get_video_service

router = APIRouter(prefix="/videos", tags=["Videos"])


@router.post(
    "/recommendations",
    summary="Recommend Videos",
    description="""
    Suggests YouTube searches for a topic.

    - **topic**: What to study; defaults to the document's file name
    - **document_content**: Study text to ground the suggestions on
    - **document_id**: Use this document's text instead of `document_content`
    """,
    responses={
        200: {"description": "Video titles with search queries and URLs"},
        404: {"description": "Document not found"},
    },
)
async def recommend_videos(
    request: VideoRecommendationRequest,
    user_id: CurrentUserId,
    db: DbSession,
    video_service: VideoService = Depends(get_video_service),
) -> VideoRecommendationResponse:
    """Recommend videos."""
    try:
        topic = (request.topic or "").strip()
        content = request.document_content

        if request.document_id is not None:
            document_topic, content = await video_service.load_document_context(request.document_id, user_id, db)
            topic = topic or document_topic

        topic = topic or DEFAULT_TOPIC
        videos = await video_service.recommend(topic, content)
        return VideoRecommendationResponse(success=True, topic=topic, videos=videos)
    except Exception as e:
        http_exc = handle_exception(e)
        if http_exc:
            raise http_exc
        raise unexpected_error(e, "Recommending videos")
