"""Append-only reader interaction model."""

from sqlalchemy import Column, ForeignKey, Index, Integer, String, Uuid

from newsgate.database import Base, UTCDateTime, utcnow
from newsgate.models.enums import InteractionType, enum_column


class Interaction(Base):
    """A single view/like/share by a user or an anonymous device."""

    __tablename__ = "interaction"

    id = Column(Integer, primary_key=True, autoincrement=True)
    article_id = Column(Integer, ForeignKey("article.id"), nullable=False)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"))
    device_id = Column(String(128))
    interaction_type = Column(
        enum_column(InteractionType, "interaction_type"),
        nullable=False,
        default=InteractionType.VIEW,
    )
    interaction_date = Column(UTCDateTime(), default=utcnow, nullable=False)

    __table_args__ = (
        Index("idx_interaction_user_dedup", article_id, interaction_type, user_id, interaction_date),
        Index("idx_interaction_device_dedup", article_id, interaction_type, device_id, interaction_date),
    )
