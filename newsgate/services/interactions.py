"""Deduplicated view counting and article stats."""

import logging
from dataclasses import dataclass
from datetime import timedelta
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from newsgate.config import settings
from newsgate.database import utcnow
from newsgate.errors import BadRequest, InternalError, NotFound
from newsgate.models.article import Article
from newsgate.models.comment import Comment
from newsgate.models.enums import InteractionType
from newsgate.models.interaction import Interaction

logger = logging.getLogger(__name__)


@dataclass
class ArticleStats:
    total_views: int
    total_comments: int


class InteractionService:
    """
    Records views, skipping repeats from the same reader.

    The duplicate check and the insert are separate statements, so two
    identical requests racing each other can both insert. Counts are
    approximate by design of the data model (no uniqueness constraint).
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def record_view(
        self,
        article_id: int,
        user_id: UUID | None = None,
        device_id: str | None = None,
    ) -> bool:
        """
        Record a view unless one was recorded for the same reader recently.

        The reader is the resolved user when known, otherwise the device.

        Returns:
            True if a new interaction row was written.

        Raises:
            BadRequest: neither user_id nor device_id given
            NotFound: article does not exist
        """
        if user_id is None and not device_id:
            raise BadRequest("Missing user_id or device_id")

        exists = await self.db.scalar(select(Article.id).where(Article.id == article_id))
        if exists is None:
            raise NotFound(f"Article '{article_id}' not found")

        now = utcnow()
        window_start = now - timedelta(minutes=settings.view_dedup_window_minutes)

        query = (
            select(func.count(Interaction.id))
            .where(Interaction.article_id == article_id)
            .where(Interaction.interaction_type == InteractionType.VIEW)
            .where(Interaction.interaction_date >= window_start)
            .where(Interaction.interaction_date <= now)
        )
        if user_id is not None:
            query = query.where(Interaction.user_id == user_id)
        else:
            query = query.where(Interaction.device_id == device_id)

        try:
            recent = await self.db.scalar(query)
        except SQLAlchemyError:
            logger.exception("View deduplication check failed for article %s", article_id)
            raise InternalError("Failed to check for duplicate views")

        if recent:
            return False

        self.db.add(
            Interaction(
                article_id=article_id,
                user_id=user_id,
                device_id=device_id,
                interaction_type=InteractionType.VIEW,
                interaction_date=now,
            )
        )
        try:
            await self.db.commit()
        except SQLAlchemyError:
            logger.exception("Failed to record view for article %s", article_id)
            await self.db.rollback()
            raise InternalError("Failed to record view")
        return True

    async def article_stats(self, article_id: int) -> ArticleStats:
        views = await self.db.scalar(
            select(func.count(Interaction.id))
            .where(Interaction.article_id == article_id)
            .where(Interaction.interaction_type == InteractionType.VIEW)
        )
        comments = await self.db.scalar(
            select(func.count(Comment.id)).where(Comment.article_id == article_id)
        )
        return ArticleStats(total_views=views or 0, total_comments=comments or 0)
