"""
Test data factories for Newsgate API tests.

Each helper inserts and commits one row through the shared test session.
"""

from datetime import datetime, timedelta
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from newsgate.database import utcnow
from newsgate.models import (
    Article,
    ArticleStatus,
    BanStatus,
    Category,
    Comment,
    Interaction,
    InteractionType,
    NewsImage,
    Plan,
    Role,
    Subscription,
    SubscriptionStatus,
    User,
)


async def make_user(
    db: AsyncSession,
    auth_id: str,
    email: str,
    role: Role = Role.USER,
    ban_status: BanStatus = BanStatus.ACTIVE,
    display_name: str | None = None,
) -> dict[str, Any]:
    """Insert a profile row and return its identifiers (plus the model)."""
    user = User(
        auth_id=auth_id,
        email=email,
        display_name=display_name or auth_id.replace("-", " ").title(),
        role=role,
        ban_status=ban_status,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    return {
        "user_id": str(user.id),
        "auth_id": user.auth_id,
        "email": user.email,
        "role": user.role.value,
        "model": user,
    }


async def make_category(db: AsyncSession, name: str = "Politics") -> Category:
    category = Category(name=name)
    db.add(category)
    await db.commit()
    return category


async def make_article(
    db: AsyncSession,
    title: str = "City council passes budget",
    status: ArticleStatus = ArticleStatus.PUBLISHED,
    flagged: bool = False,
    publication_date: datetime | None = None,
    published_by: UUID | None = None,
    article_id: int | None = None,
    priority: int = 0,
) -> Article:
    article = Article(
        id=article_id,
        title=title,
        content="The council voted 7-2 on Tuesday night.",
        status=status,
        flagged=flagged,
        priority=priority,
        publication_date=publication_date or utcnow() - timedelta(hours=1),
        published_by=published_by,
    )
    db.add(article)
    await db.commit()
    return article


async def make_comment(
    db: AsyncSession,
    article_id: int,
    user_id: UUID | None = None,
    text: str = "Great reporting.",
    flagged: bool = False,
) -> Comment:
    comment = Comment(
        article_id=article_id,
        user_id=user_id,
        comment_text=text,
        comment_date=utcnow(),
        flagged=flagged,
    )
    db.add(comment)
    await db.commit()
    return comment


async def make_view(
    db: AsyncSession,
    article_id: int,
    user_id: UUID | None = None,
    device_id: str | None = None,
    at: datetime | None = None,
) -> Interaction:
    interaction = Interaction(
        article_id=article_id,
        user_id=user_id,
        device_id=device_id,
        interaction_type=InteractionType.VIEW,
        interaction_date=at or utcnow(),
    )
    db.add(interaction)
    await db.commit()
    return interaction


async def make_image(db: AsyncSession, article_id: int, url: str = "https://cdn.example.com/a.jpg") -> NewsImage:
    image = NewsImage(article_id=article_id, image_url=url)
    db.add(image)
    await db.commit()
    return image


async def make_plan(
    db: AsyncSession,
    name: str = "Monthly",
    stripe_price_id: str = "price_monthly_test",
    duration_days: int = 30,
) -> Plan:
    plan = Plan(name=name, stripe_price_id=stripe_price_id, duration_days=duration_days)
    db.add(plan)
    await db.commit()
    return plan


async def make_subscription(
    db: AsyncSession,
    user_id: UUID,
    plan_id: int,
    start_date: datetime,
    end_date: datetime,
    status: SubscriptionStatus = SubscriptionStatus.ACTIVE,
) -> Subscription:
    subscription = Subscription(
        user_id=user_id,
        plan_id=plan_id,
        start_date=start_date,
        end_date=end_date,
        status=status,
    )
    db.add(subscription)
    await db.commit()
    return subscription
