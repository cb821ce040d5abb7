"""Comments router."""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from newsgate.auth.dependencies import get_current_user
from newsgate.config import settings
from newsgate.database import get_db
from newsgate.middleware.rate_limit import limiter
from newsgate.models.user import User
from newsgate.schemas.comments import CommentResponse, CreateCommentRequest
from newsgate.schemas.common import MessageResponse
from newsgate.services.content import ContentService
from newsgate.services.moderation import ModerationService

router = APIRouter(prefix="/api/v1/comments", tags=["Comments"])


@router.post(
    "",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    data: CreateCommentRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> CommentResponse:
    """
    Post a comment on an article.

    Soft-banned and banned users are rejected.
    """
    comment = await ContentService(db).create_comment(user, data.article_id, data.content)
    return CommentResponse.from_comment(comment)


@router.get(
    "/{article_id}",
    response_model=list[CommentResponse],
    status_code=status.HTTP_200_OK,
)
async def list_comments(
    article_id: int,
    db: AsyncSession = Depends(get_db),
) -> list[CommentResponse]:
    comments = await ContentService(db).list_comments(article_id)
    return [CommentResponse.from_comment(c) for c in comments]


@router.put(
    "/{comment_id}/flag",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
)
@limiter.limit(settings.report_rate_limit)
async def flag_comment(
    request: Request,
    comment_id: int,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Flag a comment for review. No account required."""
    await ModerationService(db, request=request).flag_comment(comment_id)
    return MessageResponse(message="Comment flagged successfully")
