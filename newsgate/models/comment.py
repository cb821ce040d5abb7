"""Reader comment model."""

from sqlalchemy import Boolean, Column, ForeignKey, Index, Integer, Text, Uuid, false
from sqlalchemy.orm import relationship

from newsgate.database import Base, UTCDateTime, utcnow


class Comment(Base):
    """Comment on an article."""

    __tablename__ = "comment"

    id = Column(Integer, primary_key=True, autoincrement=True)
    article_id = Column(Integer, ForeignKey("article.id"), nullable=False)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"))
    comment_text = Column(Text, nullable=False)
    comment_date = Column(UTCDateTime(), default=utcnow, nullable=False)
    flagged = Column(Boolean, nullable=False, default=False, server_default=false())

    __table_args__ = (
        Index("idx_comment_article", article_id, comment_date),
        Index("idx_comment_flagged", flagged),
    )

    author = relationship("User", back_populates="comments")
