"""Interactions router: view counting and article stats."""

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from newsgate.auth.dependencies import get_optional_user
from newsgate.config import settings
from newsgate.database import get_db
from newsgate.middleware.rate_limit import limiter
from newsgate.models.user import User
from newsgate.schemas.interactions import (
    ArticleStatsResponse,
    RecordViewRequest,
    RecordViewResponse,
)
from newsgate.services.interactions import InteractionService

router = APIRouter(prefix="/api/v1/interactions", tags=["Interactions"])


@router.post(
    "/view",
    response_model=RecordViewResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(settings.view_rate_limit)
async def record_view(
    request: Request,
    response: Response,
    data: RecordViewRequest,
    db: AsyncSession = Depends(get_db),
    user: User | None = Depends(get_optional_user),
) -> RecordViewResponse:
    """
    Record a view of an article.

    Repeat views by the same reader within the dedup window return 200
    without writing a new row.
    """
    recorded = await InteractionService(db).record_view(
        data.article_id,
        user_id=user.id if user else None,
        device_id=data.device_id,
    )
    if not recorded:
        response.status_code = status.HTTP_200_OK
        return RecordViewResponse(message="View already recorded recently. Skipping.", recorded=False)
    return RecordViewResponse(message="View recorded successfully", recorded=True)


@router.get(
    "/{article_id}/stats",
    response_model=ArticleStatsResponse,
    status_code=status.HTTP_200_OK,
)
async def article_stats(
    article_id: int,
    db: AsyncSession = Depends(get_db),
) -> ArticleStatsResponse:
    stats = await InteractionService(db).article_stats(article_id)
    return ArticleStatsResponse(total_views=stats.total_views, total_comments=stats.total_comments)
