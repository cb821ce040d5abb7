"""
Moderation engine.

Owns two independent state dimensions:

- content flags on articles and comments (``flagged`` true/false)
- the per-user ban state (active, soft_banned, hard_banned)

Every write is conditional on the state it was validated against, so a
concurrent change turns into a 404 instead of a lost update.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from uuid import UUID

from fastapi import Request
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from newsgate.config import settings
from newsgate.database import utcnow
from newsgate.errors import BadRequest, Forbidden, InternalError, NotFound
from newsgate.models.article import Article, NewsImage
from newsgate.models.comment import Comment
from newsgate.models.enums import ArticleStatus, BanStatus, ModerationAction, Role
from newsgate.models.interaction import Interaction
from newsgate.models.user import User
from newsgate.services.activity import ActivityService

logger = logging.getLogger(__name__)

BANNABLE_ROLES = frozenset({Role.USER, Role.JOURNALIST, Role.MODERATOR})
SOFT_BANNABLE_ROLES = frozenset({Role.USER, Role.JOURNALIST})
ALL_ROLES = frozenset(Role)


@dataclass(frozen=True)
class BanTransition:
    """One row of the ban state table."""

    action: ModerationAction
    allowed_from: frozenset[BanStatus]
    to: BanStatus
    eligible_roles: frozenset[Role]
    duration_setting: str | None
    # Lifting a restriction the user doesn't have is reported as 404
    lifts_restriction: bool
    ineligible_message: str
    wrong_state_message: str

    def end_date(self, now: datetime) -> datetime | None:
        if self.duration_setting is None:
            return None
        return now + timedelta(days=getattr(settings, self.duration_setting))


BAN = BanTransition(
    action=ModerationAction.BAN,
    allowed_from=frozenset({BanStatus.ACTIVE, BanStatus.SOFT_BANNED}),
    to=BanStatus.HARD_BANNED,
    eligible_roles=BANNABLE_ROLES,
    duration_setting="hard_ban_days",
    lifts_restriction=False,
    ineligible_message="Cannot ban an admin user",
    wrong_state_message="User is already banned",
)

SOFT_BAN = BanTransition(
    action=ModerationAction.SOFT_BAN,
    allowed_from=frozenset({BanStatus.ACTIVE}),
    to=BanStatus.SOFT_BANNED,
    eligible_roles=SOFT_BANNABLE_ROLES,
    duration_setting="soft_ban_days",
    lifts_restriction=False,
    ineligible_message="Only users and journalists can be soft-banned",
    wrong_state_message="Only active users can be soft-banned",
)

UNBAN = BanTransition(
    action=ModerationAction.UNBAN,
    allowed_from=frozenset({BanStatus.HARD_BANNED}),
    to=BanStatus.ACTIVE,
    eligible_roles=ALL_ROLES,
    duration_setting=None,
    lifts_restriction=True,
    ineligible_message="",
    wrong_state_message="User not found or is not currently banned",
)

UNSOFT_BAN = BanTransition(
    action=ModerationAction.UNSOFT_BAN,
    allowed_from=frozenset({BanStatus.SOFT_BANNED}),
    to=BanStatus.ACTIVE,
    eligible_roles=ALL_ROLES,
    duration_setting=None,
    lifts_restriction=True,
    ineligible_message="",
    wrong_state_message="User not found or is not currently soft-banned",
)


@dataclass
class CascadeResult:
    """Rows removed by a cascading article delete, per table."""

    article_id: int
    removed: dict[str, int] = field(default_factory=dict)
    failed_tables: list[str] = field(default_factory=list)


@dataclass
class UserFlagStats:
    user: User
    flagged_comment_count: int
    flagged_article_count: int


class ModerationService:
    """Flagging, ban transitions and cascading deletes."""

    def __init__(
        self,
        db: AsyncSession,
        moderator: User | None = None,
        request: Request | None = None,
    ):
        self.db = db
        self.moderator = moderator
        self.request = request
        self.activity = ActivityService(db)

    def _audit(self, action: ModerationAction, target_type, target_id, metadata=None) -> None:
        self.activity.log(
            moderator_id=self.moderator.id if self.moderator else None,
            action=action,
            target_type=target_type,
            target_id=target_id,
            request=self.request,
            metadata=metadata,
        )

    async def _commit(self, failure_message: str) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError:
            logger.exception(failure_message)
            await self.db.rollback()
            raise InternalError(failure_message)

    # --- Content flags ---

    async def report_article(self, article_id: int, reporter: User | None = None) -> None:
        """
        Flag a published article for review.

        Raises:
            NotFound: no such article
            BadRequest: article exists but is not published
        """
        try:
            result = await self.db.execute(
                update(Article)
                .where(Article.id == article_id)
                .where(Article.status == ArticleStatus.PUBLISHED)
                .values(flagged=True)
            )
        except SQLAlchemyError:
            logger.exception("Error reporting article %s", article_id)
            await self.db.rollback()
            raise InternalError("Failed to report article")

        if result.rowcount == 0:
            exists = await self.db.scalar(select(Article.id).where(Article.id == article_id))
            if exists is None:
                raise NotFound("Article not found")
            raise BadRequest("Article could not be reported (it is not published)")

        await self._commit("Failed to report article")
        logger.info(
            "Article %s reported by %s",
            article_id,
            reporter.id if reporter else "anonymous",
        )

    async def flag_comment(self, comment_id: int) -> None:
        """Flag a comment. Allowed for any caller, whatever the article status."""
        await self._set_comment_flag(comment_id, True, "Failed to flag comment")
        await self._commit("Failed to flag comment")
        logger.info("Comment %s flagged", comment_id)

    async def unflag_comment(self, comment_id: int) -> None:
        """Clear a comment's flag. Already-unflagged comments are a no-op."""
        await self._set_comment_flag(comment_id, False, "Failed to unflag comment")
        self._audit(ModerationAction.UNFLAG_COMMENT, "comment", comment_id)
        await self._commit("Failed to unflag comment")

    async def _set_comment_flag(self, comment_id: int, flagged: bool, failure_message: str) -> None:
        try:
            result = await self.db.execute(
                update(Comment).where(Comment.id == comment_id).values(flagged=flagged)
            )
        except SQLAlchemyError:
            logger.exception("%s %s", failure_message, comment_id)
            await self.db.rollback()
            raise InternalError(failure_message)
        if result.rowcount == 0:
            raise NotFound("Comment not found")

    async def unflag_article(self, article_id: int) -> None:
        """Clear an article's flag. Already-unflagged articles are a no-op."""
        try:
            result = await self.db.execute(
                update(Article).where(Article.id == article_id).values(flagged=False)
            )
        except SQLAlchemyError:
            logger.exception("Error unflagging article %s", article_id)
            await self.db.rollback()
            raise InternalError("Failed to unflag article")
        if result.rowcount == 0:
            raise NotFound("Article not found")

        self._audit(ModerationAction.UNFLAG_ARTICLE, "article", article_id)
        await self._commit("Failed to unflag article")

    async def delete_comment(self, comment_id: int) -> None:
        try:
            result = await self.db.execute(delete(Comment).where(Comment.id == comment_id))
        except SQLAlchemyError:
            logger.exception("Error deleting comment %s", comment_id)
            await self.db.rollback()
            raise InternalError("Failed to delete comment")
        if result.rowcount == 0:
            raise NotFound("Comment not found")

        self._audit(ModerationAction.DELETE_COMMENT, "comment", comment_id)
        await self._commit("Failed to delete comment")

    async def delete_article(self, article_id: int) -> CascadeResult:
        """
        Delete an article and every row that references it.

        Dependent tables are cleared first (images, comments, interactions),
        each inside its own savepoint. A failing dependent delete is rolled
        back to its savepoint and logged, and the article delete is still
        attempted; the whole cascade commits as one transaction.

        Raises:
            NotFound: no such article
            InternalError: the article row could not be deleted
        """
        exists = await self.db.scalar(select(Article.id).where(Article.id == article_id))
        if exists is None:
            raise NotFound("Article not found")

        cascade = CascadeResult(article_id=article_id)
        for model in (NewsImage, Comment, Interaction):
            table = model.__tablename__
            try:
                async with self.db.begin_nested():
                    result = await self.db.execute(
                        delete(model).where(model.article_id == article_id)
                    )
                cascade.removed[table] = result.rowcount
            except SQLAlchemyError:
                logger.exception("Cascade delete of %s failed for article %s", table, article_id)
                cascade.failed_tables.append(table)

        try:
            await self.db.execute(delete(Article).where(Article.id == article_id))
            self._audit(
                ModerationAction.DELETE_ARTICLE,
                "article",
                article_id,
                metadata={"removed": cascade.removed, "failed_tables": cascade.failed_tables},
            )
            await self.db.commit()
        except SQLAlchemyError:
            logger.exception("Error deleting article %s", article_id)
            await self.db.rollback()
            raise InternalError("Failed to delete article")

        logger.info("Deleted article %s with dependents %s", article_id, cascade.removed)
        return cascade

    # --- Queues ---

    async def list_reported_articles(self) -> list[Article]:
        result = await self.db.execute(
            select(Article)
            .options(selectinload(Article.category), selectinload(Article.publisher))
            .where(Article.flagged.is_(True))
            .where(Article.status == ArticleStatus.PUBLISHED)
            .order_by(Article.publication_date.desc())
        )
        return list(result.scalars().all())

    async def list_flagged_comments(self) -> list[Comment]:
        result = await self.db.execute(
            select(Comment)
            .options(selectinload(Comment.author))
            .where(Comment.flagged.is_(True))
            .order_by(Comment.comment_date.desc())
        )
        return list(result.scalars().all())

    async def list_users(self) -> list[UserFlagStats]:
        """All users, newest first, with counts of their flagged content."""
        flagged_comments = (
            select(Comment.user_id, func.count(Comment.id).label("flagged_comments"))
            .where(Comment.flagged.is_(True))
            .group_by(Comment.user_id)
            .subquery()
        )
        flagged_articles = (
            select(Article.published_by, func.count(Article.id).label("flagged_articles"))
            .where(Article.flagged.is_(True))
            .group_by(Article.published_by)
            .subquery()
        )
        result = await self.db.execute(
            select(
                User,
                func.coalesce(flagged_comments.c.flagged_comments, 0),
                func.coalesce(flagged_articles.c.flagged_articles, 0),
            )
            .outerjoin(flagged_comments, User.id == flagged_comments.c.user_id)
            .outerjoin(flagged_articles, User.id == flagged_articles.c.published_by)
            .order_by(User.created_at.desc())
        )
        return [
            UserFlagStats(user=user, flagged_comment_count=comments, flagged_article_count=articles)
            for user, comments, articles in result.all()
        ]

    # --- Ban state ---

    async def ban(self, user_id: UUID) -> User:
        return await self._transition(user_id, BAN)

    async def soft_ban(self, user_id: UUID) -> User:
        return await self._transition(user_id, SOFT_BAN)

    async def unban(self, user_id: UUID) -> User:
        return await self._transition(user_id, UNBAN)

    async def unsoft_ban(self, user_id: UUID) -> User:
        return await self._transition(user_id, UNSOFT_BAN)

    async def _transition(self, user_id: UUID, transition: BanTransition) -> User:
        action = transition.action.value
        if self.moderator is not None and self.moderator.id == user_id:
            raise Forbidden("Moderators cannot change their own ban status")

        user = await self.db.scalar(select(User).where(User.id == user_id))
        if user is None:
            if transition.lifts_restriction:
                raise NotFound(transition.wrong_state_message)
            raise NotFound("Target user not found")

        if user.role not in transition.eligible_roles:
            raise Forbidden(transition.ineligible_message)

        if user.ban_status not in transition.allowed_from:
            if transition.lifts_restriction:
                raise NotFound(transition.wrong_state_message)
            raise Forbidden(transition.wrong_state_message)

        previous = user.ban_status
        now = utcnow()
        try:
            result = await self.db.execute(
                update(User)
                .where(User.id == user_id)
                .where(User.ban_status.in_(list(transition.allowed_from)))
                .where(User.role.in_(list(transition.eligible_roles)))
                .values(
                    ban_status=transition.to,
                    ban_end_date=transition.end_date(now),
                    updated_at=now,
                )
            )
        except SQLAlchemyError:
            logger.exception("Failed to %s user %s", action, user_id)
            await self.db.rollback()
            raise InternalError(f"Failed to {action.replace('_', '-')} user")

        if result.rowcount == 0:
            # Status changed between the read and the conditional write
            await self.db.rollback()
            raise NotFound(transition.wrong_state_message)

        self._audit(
            transition.action,
            "user",
            user_id,
            metadata={"from": previous.value, "to": transition.to.value},
        )
        await self._commit(f"Failed to {action.replace('_', '-')} user")
        await self.db.refresh(user)

        logger.info(
            "User %s %s by moderator %s",
            user_id,
            action,
            self.moderator.id if self.moderator else None,
        )
        return user
