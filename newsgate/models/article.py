"""Article, category and image models."""

from sqlalchemy import Boolean, Column, ForeignKey, Index, Integer, String, Text, Uuid, false
from sqlalchemy.orm import relationship

from newsgate.database import Base, UTCDateTime, utcnow
from newsgate.models.enums import ArticleStatus, enum_column


class Category(Base):
    """Article category."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)


class Article(Base):
    """News article."""

    __tablename__ = "article"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False)
    content = Column(Text, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"))
    publication_date = Column(UTCDateTime(), default=utcnow)
    status = Column(
        enum_column(ArticleStatus, "article_status"),
        nullable=False,
        default=ArticleStatus.DRAFT,
    )
    flagged = Column(Boolean, nullable=False, default=False, server_default=false())
    priority = Column(Integer, nullable=False, default=0, server_default="0")
    published_by = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"))

    __table_args__ = (
        Index("idx_article_status_publication", status, publication_date),
        Index("idx_article_flagged", flagged, status),
    )

    category = relationship("Category")
    publisher = relationship("User", foreign_keys=[published_by])


class NewsImage(Base):
    """Image attached to an article."""

    __tablename__ = "news_images"

    id = Column(Integer, primary_key=True, autoincrement=True)
    article_id = Column(Integer, ForeignKey("article.id"), nullable=False)
    image_url = Column(Text, nullable=False)
    created_at = Column(UTCDateTime(), default=utcnow)

    __table_args__ = (
        Index("idx_news_images_article", article_id),
    )
