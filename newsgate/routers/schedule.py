"""Scheduled publication trigger."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from newsgate.database import get_db
from newsgate.schemas.articles import SweepResponse
from newsgate.services.publication import run_sweep

router = APIRouter(prefix="/api/v1/schedule", tags=["Schedule"])


@router.post(
    "/schedule-run",
    response_model=SweepResponse,
    status_code=status.HTTP_200_OK,
)
async def schedule_run(db: AsyncSession = Depends(get_db)) -> SweepResponse:
    """Publish every scheduled article whose publication date has passed."""
    published = await run_sweep(db)
    if not published:
        return SweepResponse(message="No articles ready to publish", published=[])
    return SweepResponse(message=f"Published {len(published)} article(s)", published=published)
