"""Article schemas."""

from datetime import datetime

from pydantic import BaseModel, field_validator

from newsgate.models.article import Article
from newsgate.models.enums import ArticleStatus
from newsgate.schemas.common import isoformat


class ArticleResponse(BaseModel):
    id: int
    title: str
    content: str
    category: str | None
    status: str
    flagged: bool
    priority: int
    publication_date: str | None
    published_by: str | None
    publisher_name: str | None

    @classmethod
    def from_article(cls, article: Article) -> "ArticleResponse":
        return cls(
            id=article.id,
            title=article.title,
            content=article.content,
            category=article.category.name if article.category else None,
            status=article.status.value,
            flagged=article.flagged,
            priority=article.priority,
            publication_date=isoformat(article.publication_date),
            published_by=str(article.published_by) if article.published_by else None,
            publisher_name=article.publisher.display_name if article.publisher else None,
        )


class ListArticlesResponse(BaseModel):
    items: list[ArticleResponse]
    next_cursor: str | None
    has_more: bool


class CreateArticleRequest(BaseModel):
    """Request to submit a new article."""

    title: str
    content: str
    category_id: int | None = None
    status: ArticleStatus = ArticleStatus.DRAFT
    publication_date: datetime | None = None
    priority: int = 0
    image_urls: list[str] = []

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title cannot be empty")
        if len(v) > 500:
            raise ValueError("Title must be 500 characters or less")
        return v

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Content cannot be empty")
        return v

    @field_validator("priority")
    @classmethod
    def validate_priority(cls, v: int) -> int:
        if v not in (0, 1):
            raise ValueError("Priority must be 0 (normal) or 1 (high)")
        return v


class SweepResponse(BaseModel):
    message: str
    published: list[int]
