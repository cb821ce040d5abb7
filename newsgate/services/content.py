"""Article and comment reads/writes outside the moderation workflow."""

import logging
from datetime import datetime
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from newsgate.database import utcnow
from newsgate.errors import BadRequest, Forbidden, InternalError, NotFound
from newsgate.models.article import Article, Category, NewsImage
from newsgate.models.comment import Comment
from newsgate.models.enums import ArticleStatus, BanStatus
from newsgate.models.user import User

logger = logging.getLogger(__name__)

HIGH_PRIORITY = 1


class ContentService:
    """Articles and comments as seen by readers and publishers."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_article(self, article_id: int) -> Article:
        result = await self.db.execute(
            select(Article)
            .options(selectinload(Article.category), selectinload(Article.publisher))
            .where(Article.id == article_id)
            .execution_options(populate_existing=True)
        )
        article = result.scalar_one_or_none()
        if article is None:
            raise NotFound(f"Article '{article_id}' not found")
        return article

    async def list_published(self, cursor: datetime | None, limit: int) -> tuple[list[Article], bool]:
        """Published articles, newest first, cursor-paginated on publication date."""
        query = (
            select(Article)
            .options(selectinload(Article.category), selectinload(Article.publisher))
            .where(Article.status == ArticleStatus.PUBLISHED)
        )
        if cursor:
            query = query.where(Article.publication_date < cursor)
        query = query.order_by(Article.publication_date.desc()).limit(limit + 1)

        result = await self.db.execute(query)
        articles = list(result.scalars().all())
        has_more = len(articles) > limit
        return articles[:limit], has_more

    async def create_article(
        self,
        publisher: User,
        title: str,
        content: str,
        status: ArticleStatus,
        category_id: int | None = None,
        publication_date: datetime | None = None,
        priority: int = 0,
        image_urls: list[str] | None = None,
    ) -> Article:
        """
        Create an article on behalf of ``publisher``.

        Raises:
            Forbidden: publisher is banned
            BadRequest: scheduled without a date, or unknown category
        """
        if publisher.ban_status == BanStatus.HARD_BANNED:
            raise Forbidden("Your account is banned")
        if status == ArticleStatus.SCHEDULED and publication_date is None:
            raise BadRequest("Scheduled articles require a publication_date")
        if category_id is not None and await self.db.get(Category, category_id) is None:
            raise BadRequest(f"Category '{category_id}' does not exist")

        article = Article(
            title=title,
            content=content,
            status=status,
            category_id=category_id,
            publication_date=publication_date or utcnow(),
            priority=priority,
            published_by=publisher.id,
        )
        self.db.add(article)
        try:
            await self.db.flush()
            for url in image_urls or []:
                self.db.add(NewsImage(article_id=article.id, image_url=url))
            await self.db.commit()
        except SQLAlchemyError:
            logger.exception("Failed to create article '%s'", title)
            await self.db.rollback()
            raise InternalError("Failed to create article")

        logger.info("Article %s created by %s (%s)", article.id, publisher.id, status.value)
        return await self.get_article(article.id)

    async def create_comment(self, author: User, article_id: int, text: str) -> Comment:
        """
        Post a comment.

        Raises:
            Forbidden: author is soft- or hard-banned
            NotFound: article does not exist
        """
        if author.is_restricted:
            raise Forbidden("You are restricted from commenting")

        exists = await self.db.scalar(select(Article.id).where(Article.id == article_id))
        if exists is None:
            raise NotFound(f"Article '{article_id}' not found")

        comment = Comment(
            article_id=article_id,
            user_id=author.id,
            comment_text=text,
            comment_date=utcnow(),
            flagged=False,
        )
        self.db.add(comment)
        try:
            await self.db.commit()
        except SQLAlchemyError:
            logger.exception("Failed to post comment on article %s", article_id)
            await self.db.rollback()
            raise InternalError("Failed to post comment")

        await self.db.refresh(comment, ["author"])
        return comment

    async def list_comments(self, article_id: int) -> list[Comment]:
        result = await self.db.execute(
            select(Comment)
            .options(selectinload(Comment.author))
            .where(Comment.article_id == article_id)
            .order_by(Comment.comment_date.desc())
        )
        return list(result.scalars().all())
