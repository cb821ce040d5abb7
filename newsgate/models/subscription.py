"""Plan and subscription ledger models."""

from sqlalchemy import Column, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import relationship

from newsgate.database import Base, UTCDateTime, utcnow
from newsgate.models.enums import SubscriptionStatus, enum_column


class Plan(Base):
    """Purchasable plan, matched to a Stripe price."""

    __tablename__ = "plan"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    stripe_price_id = Column(String(255), unique=True, nullable=False)
    duration_days = Column(Integer, nullable=False)


class Subscription(Base):
    """Time-bounded access granted by a confirmed payment."""

    __tablename__ = "subscriptions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    plan_id = Column(Integer, ForeignKey("plan.id"), nullable=False)
    start_date = Column(UTCDateTime(), nullable=False)
    end_date = Column(UTCDateTime(), nullable=False)
    status = Column(
        enum_column(SubscriptionStatus, "subscription_status"),
        nullable=False,
        default=SubscriptionStatus.ACTIVE,
    )
    created_at = Column(UTCDateTime(), default=utcnow)
    updated_at = Column(UTCDateTime(), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("idx_subscriptions_user_status", user_id, status, end_date),
    )

    plan = relationship("Plan")
