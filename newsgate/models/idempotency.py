"""Processed webhook event ledger."""

from sqlalchemy import Column, Index, String

from newsgate.database import Base, UTCDateTime, utcnow


class ProcessedWebhookEvent(Base):
    """
    Provider event ids that have already been applied.

    Redelivered events are matched by primary key and acknowledged
    without being applied a second time.
    """

    __tablename__ = "processed_webhook_events"

    event_id = Column(String(255), primary_key=True)
    event_type = Column(String(100), nullable=False)
    processed_at = Column(UTCDateTime(), default=utcnow, nullable=False)

    __table_args__ = (
        Index("idx_webhook_events_processed", "processed_at"),
    )
