"""User profile model."""

import uuid

from sqlalchemy import Column, Index, String, Text, Uuid
from sqlalchemy.orm import relationship

from newsgate.database import Base, UTCDateTime, utcnow
from newsgate.models.enums import BanStatus, Role, enum_column


class User(Base):
    """Platform user profile, keyed to an identity-provider account."""

    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    auth_id = Column(String(64), unique=True, nullable=False)
    email = Column(String, unique=True)
    display_name = Column(Text)
    role = Column(enum_column(Role, "user_role"), nullable=False, default=Role.USER)
    ban_status = Column(
        enum_column(BanStatus, "ban_status"),
        nullable=False,
        default=BanStatus.ACTIVE,
    )
    ban_end_date = Column(UTCDateTime())
    created_at = Column(UTCDateTime(), default=utcnow, nullable=False)
    updated_at = Column(UTCDateTime(), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("idx_users_created", created_at.desc()),
    )

    comments = relationship("Comment", back_populates="author")

    @property
    def is_restricted(self) -> bool:
        return self.ban_status != BanStatus.ACTIVE
