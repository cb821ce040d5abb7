"""Closed value sets shared by models, services and schemas."""

import enum

from sqlalchemy import Enum


class Role(str, enum.Enum):
    USER = "user"
    JOURNALIST = "journalist"
    MODERATOR = "moderator"
    ADMIN = "admin"


class BanStatus(str, enum.Enum):
    ACTIVE = "active"
    SOFT_BANNED = "soft_banned"
    HARD_BANNED = "hard_banned"


class ArticleStatus(str, enum.Enum):
    DRAFT = "draft"
    SCHEDULED = "scheduled"
    PUBLISHED = "published"


class InteractionType(str, enum.Enum):
    VIEW = "view"
    LIKE = "like"
    SHARE = "share"


class SubscriptionStatus(str, enum.Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class ModerationAction(str, enum.Enum):
    UNFLAG_ARTICLE = "unflag_article"
    DELETE_ARTICLE = "delete_article"
    UNFLAG_COMMENT = "unflag_comment"
    DELETE_COMMENT = "delete_comment"
    BAN = "ban"
    UNBAN = "unban"
    SOFT_BAN = "soft_ban"
    UNSOFT_BAN = "unsoft_ban"


def enum_column(enum_cls: type[enum.Enum], name: str) -> Enum:
    """Store an enum by value in a plain VARCHAR column."""
    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        length=32,
        values_callable=lambda members: [m.value for m in members],
    )
