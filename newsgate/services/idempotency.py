"""Webhook redelivery guard keyed by provider event id."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from newsgate.database import utcnow
from newsgate.models.idempotency import ProcessedWebhookEvent

logger = logging.getLogger(__name__)


class WebhookEventLedger:
    """
    Remembers which provider events have been applied.

    ``record`` only stages the row; it is committed together with the
    effects of the event, so a crash between the two leaves neither.
    A concurrent delivery of the same event fails that commit with an
    ``IntegrityError`` on the primary key.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def seen(self, event_id: str) -> bool:
        found = await self.db.scalar(
            select(ProcessedWebhookEvent.event_id).where(ProcessedWebhookEvent.event_id == event_id)
        )
        return found is not None

    def record(self, event_id: str, event_type: str) -> None:
        self.db.add(
            ProcessedWebhookEvent(
                event_id=event_id,
                event_type=event_type,
                processed_at=utcnow(),
            )
        )
