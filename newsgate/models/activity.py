"""Moderation audit log model."""

from sqlalchemy import JSON, Column, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import relationship

from newsgate.database import Base, UTCDateTime, utcnow
from newsgate.models.enums import ModerationAction, enum_column


class ModerationLog(Base):
    """
    Append-only record of moderator actions.

    Written in the same transaction as the action it describes, so a rolled
    back transition leaves no entry behind.
    """

    __tablename__ = "moderation_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    moderator_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"))
    action = Column(enum_column(ModerationAction, "moderation_action"), nullable=False)
    target_type = Column(String(20), nullable=False)
    target_id = Column(String(64), nullable=False)
    request_id = Column(String(64))
    extra_data = Column(JSON, default=dict)
    created_at = Column(UTCDateTime(), default=utcnow, nullable=False)

    __table_args__ = (
        Index("idx_moderation_log_target", "target_type", "target_id", "created_at"),
        Index("idx_moderation_log_moderator", "moderator_id", "created_at"),
    )

    moderator = relationship("User", foreign_keys=[moderator_id])
