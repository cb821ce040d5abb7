"""
Scheduled publication.

Promotes ``scheduled`` articles whose publication date has passed. The sweep
is triggered by ``POST /schedule/schedule-run`` and, when configured, by an
in-process loop started with the application.
"""

import asyncio
import logging

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from newsgate.database import utcnow
from newsgate.errors import InternalError
from newsgate.models.article import Article
from newsgate.models.enums import ArticleStatus

logger = logging.getLogger(__name__)


async def run_sweep(db: AsyncSession) -> list[int]:
    """
    Publish every scheduled article that is due.

    Safe to run concurrently: rows that are already published no longer
    match the predicate.

    Returns:
        Ids of the articles published by this call.
    """
    now = utcnow()
    stmt = (
        update(Article)
        .where(Article.status == ArticleStatus.SCHEDULED)
        .where(Article.publication_date <= now)
        .values(status=ArticleStatus.PUBLISHED)
        .returning(Article.id)
        .execution_options(synchronize_session=False)
    )
    try:
        result = await db.execute(stmt)
        published = sorted(result.scalars().all())
        await db.commit()
    except SQLAlchemyError:
        logger.exception("Scheduled publication sweep failed")
        await db.rollback()
        raise InternalError("Failed to publish scheduled articles")

    if published:
        logger.info("Published %d scheduled article(s): %s", len(published), published)
    return published


class PublicationScheduler:
    """Runs the sweep on a fixed interval until stopped."""

    def __init__(self, session_factory: async_sessionmaker, interval_seconds: int):
        self.session_factory = session_factory
        self.interval_seconds = interval_seconds
        self.is_running = False

    async def start(self) -> None:
        if self.is_running:
            logger.warning("Publication scheduler is already running")
            return

        self.is_running = True
        logger.info("Publication scheduler started, sweeping every %d seconds", self.interval_seconds)

        while self.is_running:
            try:
                async with self.session_factory() as db:
                    await run_sweep(db)
            except InternalError:
                # already logged by run_sweep
                pass
            except SQLAlchemyError:
                logger.exception("Publication scheduler could not open a session")

            await asyncio.sleep(self.interval_seconds)

    async def stop(self) -> None:
        if not self.is_running:
            return
        self.is_running = False
        logger.info("Publication scheduler stopped")
