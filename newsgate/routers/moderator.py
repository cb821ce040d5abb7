"""Moderator router: review queues, content removal and ban transitions."""

from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from newsgate.auth.dependencies import require_moderator
from newsgate.database import get_db
from newsgate.dependencies import get_notifier
from newsgate.models.user import User
from newsgate.schemas.articles import ArticleResponse
from newsgate.schemas.comments import CommentResponse
from newsgate.schemas.common import MessageResponse
from newsgate.schemas.moderation import (
    ArticleDeletedResponse,
    BanTransitionResponse,
    ListFlaggedCommentsResponse,
    ListModeratedUsersResponse,
    ListReportedArticlesResponse,
    ModeratedUserResponse,
)
from newsgate.schemas.users import UserResponse
from newsgate.services.moderation import ModerationService
from newsgate.services.notifications import NotificationDispatcher

router = APIRouter(prefix="/api/v1/moderator", tags=["Moderator"])


def _service(db: AsyncSession, moderator: User, request: Request) -> ModerationService:
    return ModerationService(db, moderator=moderator, request=request)


# --- Comments ---


@router.get(
    "/comments/flagged",
    response_model=ListFlaggedCommentsResponse,
    status_code=status.HTTP_200_OK,
)
async def list_flagged_comments(
    request: Request,
    db: AsyncSession = Depends(get_db),
    moderator: User = Depends(require_moderator),
) -> ListFlaggedCommentsResponse:
    """Flagged comments awaiting review, newest first."""
    comments = await _service(db, moderator, request).list_flagged_comments()
    return ListFlaggedCommentsResponse(
        comments=[CommentResponse.from_comment(c) for c in comments]
    )


@router.put(
    "/comments/{comment_id}/unflag",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
)
async def unflag_comment(
    comment_id: int,
    request: Request,
    db: AsyncSession = Depends(get_db),
    moderator: User = Depends(require_moderator),
) -> MessageResponse:
    await _service(db, moderator, request).unflag_comment(comment_id)
    return MessageResponse(message="Comment unflagged successfully")


@router.delete(
    "/comments/{comment_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
)
async def delete_comment(
    comment_id: int,
    request: Request,
    db: AsyncSession = Depends(get_db),
    moderator: User = Depends(require_moderator),
) -> MessageResponse:
    await _service(db, moderator, request).delete_comment(comment_id)
    return MessageResponse(message="Comment deleted successfully")


# --- Articles ---


@router.get(
    "/articles/reported",
    response_model=ListReportedArticlesResponse,
    status_code=status.HTTP_200_OK,
)
async def list_reported_articles(
    request: Request,
    db: AsyncSession = Depends(get_db),
    moderator: User = Depends(require_moderator),
) -> ListReportedArticlesResponse:
    """Published articles that readers have reported."""
    articles = await _service(db, moderator, request).list_reported_articles()
    return ListReportedArticlesResponse(
        articles=[ArticleResponse.from_article(a) for a in articles]
    )


@router.put(
    "/articles/{article_id}/unflag",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
)
async def unflag_article(
    article_id: int,
    request: Request,
    db: AsyncSession = Depends(get_db),
    moderator: User = Depends(require_moderator),
) -> MessageResponse:
    await _service(db, moderator, request).unflag_article(article_id)
    return MessageResponse(message="Article unflagged successfully")


@router.delete(
    "/articles/{article_id}",
    response_model=ArticleDeletedResponse,
    status_code=status.HTTP_200_OK,
)
async def delete_article(
    article_id: int,
    request: Request,
    db: AsyncSession = Depends(get_db),
    moderator: User = Depends(require_moderator),
) -> ArticleDeletedResponse:
    """
    Delete an article with its images, comments and interactions.

    Failures on dependent tables are reported in ``failed_tables``; the
    article itself is still removed.
    """
    result = await _service(db, moderator, request).delete_article(article_id)
    return ArticleDeletedResponse(
        message="Article and related data deleted successfully",
        article_id=result.article_id,
        removed=result.removed,
        failed_tables=result.failed_tables,
    )


# --- Users ---


@router.get(
    "/users",
    response_model=ListModeratedUsersResponse,
    status_code=status.HTTP_200_OK,
)
async def list_users(
    request: Request,
    db: AsyncSession = Depends(get_db),
    moderator: User = Depends(require_moderator),
) -> ListModeratedUsersResponse:
    """All users with counts of their flagged comments and articles."""
    rows = await _service(db, moderator, request).list_users()
    return ListModeratedUsersResponse(
        users=[
            ModeratedUserResponse(
                **UserResponse.from_user(row.user).model_dump(),
                flagged_comment_count=row.flagged_comment_count,
                flagged_article_count=row.flagged_article_count,
            )
            for row in rows
        ]
    )


def _ban_response(
    user: User,
    action: str,
    message: str,
    background_tasks: BackgroundTasks,
    notifier: NotificationDispatcher,
) -> BanTransitionResponse:
    background_tasks.add_task(
        notifier.notify_ban_change,
        user.email,
        user.display_name,
        action,
        user.ban_end_date,
    )
    return BanTransitionResponse(message=message, user=UserResponse.from_user(user))


@router.put(
    "/users/{user_id}/ban",
    response_model=BanTransitionResponse,
    status_code=status.HTTP_200_OK,
)
async def ban_user(
    user_id: UUID,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    moderator: User = Depends(require_moderator),
    notifier: NotificationDispatcher = Depends(get_notifier),
) -> BanTransitionResponse:
    """Hard-ban a user for 30 days. Admins cannot be banned."""
    user = await _service(db, moderator, request).ban(user_id)
    return _ban_response(user, "ban", "User banned successfully", background_tasks, notifier)


@router.put(
    "/users/{user_id}/unban",
    response_model=BanTransitionResponse,
    status_code=status.HTTP_200_OK,
)
async def unban_user(
    user_id: UUID,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    moderator: User = Depends(require_moderator),
    notifier: NotificationDispatcher = Depends(get_notifier),
) -> BanTransitionResponse:
    user = await _service(db, moderator, request).unban(user_id)
    return _ban_response(user, "unban", "User unbanned successfully", background_tasks, notifier)


@router.put(
    "/users/{user_id}/soft-ban",
    response_model=BanTransitionResponse,
    status_code=status.HTTP_200_OK,
)
async def soft_ban_user(
    user_id: UUID,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    moderator: User = Depends(require_moderator),
    notifier: NotificationDispatcher = Depends(get_notifier),
) -> BanTransitionResponse:
    """Restrict a user or journalist from commenting for 7 days."""
    user = await _service(db, moderator, request).soft_ban(user_id)
    return _ban_response(
        user, "soft_ban", "User soft-banned successfully", background_tasks, notifier
    )


@router.put(
    "/users/{user_id}/unsoft-ban",
    response_model=BanTransitionResponse,
    status_code=status.HTTP_200_OK,
)
async def unsoft_ban_user(
    user_id: UUID,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    moderator: User = Depends(require_moderator),
    notifier: NotificationDispatcher = Depends(get_notifier),
) -> BanTransitionResponse:
    user = await _service(db, moderator, request).unsoft_ban(user_id)
    return _ban_response(
        user, "unsoft_ban", "User soft-ban lifted successfully", background_tasks, notifier
    )
