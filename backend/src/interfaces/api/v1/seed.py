"""First-login seeding API endpoints."""

from fastapi import APIRouter, Depends

from ....infrastructure.logging import get_logger
from ....modules.seeding.schemas import SeedResult, SeedStatus
from ....modules.seeding.services import SeedingService
from ..dependencies import CurrentUserId, DbSession, get_seeding_service

logger = get_logger(__name__)

router = APIRouter(prefix="/seed", tags=["Seeding"])


@router.get("/status", summary="Check Seeding Status")
async def seeding_status(
    user_id: CurrentUserId,
    db: DbSession,
    seeding_service: SeedingService = Depends(get_seeding_service),
) -> SeedStatus:
    """Whether the user has no notebooks yet."""
    return SeedStatus(needs_seeding=await seeding_service.user_needs_seeding(user_id, db))


@router.post(
    "",
    summary="Seed Sample Notebook",
    description="""
    Creates the featured welcome notebook from the bundled sample PDFs for a
    user without notebooks. Users that already have notebooks are left
    untouched. Failures are reported in the body with `success: false`.
    """,
)
async def seed_user(
    user_id: CurrentUserId,
    db: DbSession,
    seeding_service: SeedingService = Depends(get_seeding_service),
) -> SeedResult:
    """Seed the welcome notebook."""
    try:
        return await seeding_service.seed_new_user(user_id, db)
    except Exception as e:
        logger.error(f"Seeding failed: {e}", exc_info=True)
        await db.rollback()
        return SeedResult(success=False, error=str(e))
