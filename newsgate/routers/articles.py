"""Articles router: reading, submission and reader reports."""

import datetime as dt

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from newsgate.auth.dependencies import get_optional_user, require_role
from newsgate.config import settings
from newsgate.database import get_db, utcnow
from newsgate.dependencies import get_notifier
from newsgate.middleware.rate_limit import limiter
from newsgate.models.enums import ArticleStatus, Role
from newsgate.models.user import User
from newsgate.schemas.articles import ArticleResponse, CreateArticleRequest, ListArticlesResponse
from newsgate.schemas.common import MessageResponse
from newsgate.services.content import HIGH_PRIORITY, ContentService
from newsgate.services.moderation import ModerationService
from newsgate.services.notifications import NotificationDispatcher

router = APIRouter(prefix="/api/v1/articles", tags=["Articles"])

require_publisher = require_role(Role.JOURNALIST, Role.MODERATOR, Role.ADMIN)


@router.get(
    "",
    response_model=ListArticlesResponse,
    status_code=status.HTTP_200_OK,
)
async def list_articles(
    db: AsyncSession = Depends(get_db),
    cursor: str | None = Query(default=None, description="Pagination cursor"),
    limit: int = Query(default=20, ge=1, le=100, description="Items per page"),
) -> ListArticlesResponse:
    """
    List published articles with cursor-based pagination.

    Returns articles ordered by publication date descending.
    """
    cursor_dt = None
    if cursor:
        try:
            cursor_dt = dt.datetime.fromisoformat(cursor)
        except ValueError:
            pass  # Invalid cursor, ignore

    articles, has_more = await ContentService(db).list_published(cursor_dt, limit)
    next_cursor = (
        articles[-1].publication_date.isoformat() if articles and has_more else None
    )
    return ListArticlesResponse(
        items=[ArticleResponse.from_article(a) for a in articles],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.get(
    "/{article_id}",
    response_model=ArticleResponse,
    status_code=status.HTTP_200_OK,
)
async def get_article(
    article_id: int,
    db: AsyncSession = Depends(get_db),
) -> ArticleResponse:
    article = await ContentService(db).get_article(article_id)
    return ArticleResponse.from_article(article)


@router.post(
    "",
    response_model=ArticleResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_article(
    data: CreateArticleRequest,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_publisher),
    notifier: NotificationDispatcher = Depends(get_notifier),
) -> ArticleResponse:
    """
    Submit an article.

    Publishing a high-priority article alerts the editors' chat.
    """
    article = await ContentService(db).create_article(
        publisher=user,
        title=data.title,
        content=data.content,
        status=data.status,
        category_id=data.category_id,
        publication_date=data.publication_date,
        priority=data.priority,
        image_urls=data.image_urls,
    )

    if article.status == ArticleStatus.PUBLISHED and article.priority == HIGH_PRIORITY:
        background_tasks.add_task(
            notifier.alert_high_priority_submission,
            user_id=str(user.id),
            username=user.display_name or user.email or str(user.id),
            title=article.title,
            category=article.category.name if article.category else "Uncategorized",
            time_sent=utcnow().isoformat(),
            content=article.content,
            attachment=data.image_urls[0] if data.image_urls else None,
        )

    return ArticleResponse.from_article(article)


@router.put(
    "/{article_id}/report",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
)
@limiter.limit(settings.report_rate_limit)
async def report_article(
    request: Request,
    article_id: int,
    db: AsyncSession = Depends(get_db),
    user: User | None = Depends(get_optional_user),
) -> MessageResponse:
    """Flag a published article for moderator review."""
    await ModerationService(db, request=request).report_article(article_id, reporter=user)
    return MessageResponse(message="Article reported successfully. A moderator will review it.")
