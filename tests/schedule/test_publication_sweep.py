"""
Tests for POST /api/v1/schedule/schedule-run and the sweep scheduler.
"""

import asyncio
import contextlib
from datetime import timedelta

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from factories import make_article
from newsgate.database import utcnow
from newsgate.models import ArticleStatus
from newsgate.services.publication import PublicationScheduler, run_sweep


class TestScheduleRun:
    """POST /api/v1/schedule/schedule-run tests."""

    async def test_publishes_due_articles(
        self, async_client: AsyncClient, db_session: AsyncSession,
    ):
        due = await make_article(
            db_session,
            title="Due",
            status=ArticleStatus.SCHEDULED,
            publication_date=utcnow() - timedelta(minutes=5),
        )
        future = await make_article(
            db_session,
            title="Future",
            status=ArticleStatus.SCHEDULED,
            publication_date=utcnow() + timedelta(days=1),
        )
        draft = await make_article(
            db_session,
            title="Draft",
            status=ArticleStatus.DRAFT,
            publication_date=utcnow() - timedelta(days=1),
        )

        response = await async_client.post("/api/v1/schedule/schedule-run")
        assert response.status_code == 200
        assert response.json()["published"] == [due.id]

        for article in (due, future, draft):
            await db_session.refresh(article)
        assert due.status == ArticleStatus.PUBLISHED
        assert future.status == ArticleStatus.SCHEDULED
        assert draft.status == ArticleStatus.DRAFT

    async def test_second_run_publishes_nothing(
        self, async_client: AsyncClient, db_session: AsyncSession,
    ):
        """Running the sweep twice is the same as running it once."""
        await make_article(
            db_session,
            status=ArticleStatus.SCHEDULED,
            publication_date=utcnow() - timedelta(minutes=5),
        )

        await async_client.post("/api/v1/schedule/schedule-run")
        response = await async_client.post("/api/v1/schedule/schedule-run")
        assert response.json() == {"message": "No articles ready to publish", "published": []}


class TestRunSweep:
    """Direct tests of the sweep function and scheduler."""

    async def test_run_sweep_returns_ids(self, db_session: AsyncSession):
        first = await make_article(
            db_session,
            status=ArticleStatus.SCHEDULED,
            publication_date=utcnow() - timedelta(hours=2),
        )
        second = await make_article(
            db_session,
            status=ArticleStatus.SCHEDULED,
            publication_date=utcnow() - timedelta(hours=1),
        )
        assert await run_sweep(db_session) == sorted([first.id, second.id])

    async def test_scheduler_sweeps_on_start(self, db_engine, db_session: AsyncSession):
        article = await make_article(
            db_session,
            status=ArticleStatus.SCHEDULED,
            publication_date=utcnow() - timedelta(minutes=1),
        )
        scheduler = PublicationScheduler(
            async_sessionmaker(db_engine, expire_on_commit=False), interval_seconds=3600
        )
        task = asyncio.create_task(scheduler.start())
        try:
            for _ in range(100):
                await asyncio.sleep(0.01)
                await db_session.refresh(article)
                if article.status == ArticleStatus.PUBLISHED:
                    break
        finally:
            await scheduler.stop()
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

        assert article.status == ArticleStatus.PUBLISHED
        assert scheduler.is_running is False
