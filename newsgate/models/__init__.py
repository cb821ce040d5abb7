"""Database models for the newsgate API."""

from newsgate.models.activity import ModerationLog
from newsgate.models.article import Article, Category, NewsImage
from newsgate.models.comment import Comment
from newsgate.models.enums import (
    ArticleStatus,
    BanStatus,
    InteractionType,
    ModerationAction,
    Role,
    SubscriptionStatus,
)
from newsgate.models.idempotency import ProcessedWebhookEvent
from newsgate.models.interaction import Interaction
from newsgate.models.site import SiteSettings
from newsgate.models.subscription import Plan, Subscription
from newsgate.models.user import User

__all__ = [
    "User",
    "Article",
    "Category",
    "NewsImage",
    "Comment",
    "Interaction",
    "Plan",
    "Subscription",
    "SiteSettings",
    "ProcessedWebhookEvent",
    "ModerationLog",
    "Role",
    "BanStatus",
    "ArticleStatus",
    "InteractionType",
    "SubscriptionStatus",
    "ModerationAction",
]
