"""Moderator queue and ban-transition schemas."""

from pydantic import BaseModel

from newsgate.schemas.articles import ArticleResponse
from newsgate.schemas.comments import CommentResponse
from newsgate.schemas.users import UserResponse


class ModeratedUserResponse(UserResponse):
    """User row with counts of their flagged content."""

    flagged_comment_count: int
    flagged_article_count: int


class ListModeratedUsersResponse(BaseModel):
    users: list[ModeratedUserResponse]


class ListFlaggedCommentsResponse(BaseModel):
    comments: list[CommentResponse]


class ListReportedArticlesResponse(BaseModel):
    articles: list[ArticleResponse]


class BanTransitionResponse(BaseModel):
    """Result of a ban, unban, soft-ban or unsoft-ban."""

    message: str
    user: UserResponse


class ArticleDeletedResponse(BaseModel):
    """Result of a cascading article delete."""

    message: str
    article_id: int
    removed: dict[str, int]
    failed_tables: list[str]
