from fastapi import APIRouter

from ....infrastructure.config.settings import get_settings
from .chat import router as chat_router
from .document import router as document_router
from .notebook import router as notebook_router
from .progress import router as progress_router
from .quiz import router as quiz_router
from .seed import router as seed_router
from .video import router as video_router

router = APIRouter(prefix="/v1")
router.include_router(notebook_router)
router.include_router(document_router)
router.include_router(chat_router)
router.include_router(quiz_router)
router.include_router(progress_router)
router.include_router(video_router)
router.include_router(seed_router)


@router.get(
    "/health",
    summary="API Health Check",
    description="Simple health check endpoint for monitoring and container orchestration.",
    responses={
        200: {"description": "API is healthy and responding"},
    },
)
async def health_check():
    """Health check endpoint for Docker health checks."""
    return {"status": "healthy", "message": f"{get_settings().APP_NAME} is running"}
