"""
Subscription ledger.

A confirmed checkout either extends the user's current active subscription
or opens a new one starting now.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from newsgate.database import utcnow
from newsgate.errors import BadRequest, InternalError
from newsgate.models.enums import SubscriptionStatus
from newsgate.models.subscription import Plan, Subscription
from newsgate.models.user import User
from newsgate.services.idempotency import WebhookEventLedger

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"


def stacked_end_date(existing_end: datetime | None, duration_days: int, now: datetime) -> datetime:
    """End date after buying ``duration_days`` more.

    Time left on a subscription that hasn't expired is kept; otherwise the
    new period starts now.
    """
    base = existing_end if existing_end is not None and existing_end > now else now
    return base + timedelta(days=duration_days)


@dataclass
class WebhookOutcome:
    received: bool = True
    duplicate: bool = False
    subscription_id: int | None = None


class SubscriptionService:
    """Applies payment events to the subscription ledger."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.ledger = WebhookEventLedger(db)

    async def handle_event(self, event: Mapping[str, Any]) -> WebhookOutcome:
        """
        Apply a verified Stripe event at most once.

        Only ``checkout.session.completed`` changes state; other types are
        recorded and acknowledged.
        """
        event_id = event.get("id")
        event_type = event.get("type", "")
        if not event_id:
            raise BadRequest("Event has no id")

        if await self.ledger.seen(event_id):
            logger.info("Stripe event %s already processed", event_id)
            return WebhookOutcome(duplicate=True)

        subscription = None
        if event_type == CHECKOUT_COMPLETED:
            session = event["data"]["object"]
            subscription = await self._apply_checkout(session.get("metadata") or {})
        else:
            logger.info("Ignoring Stripe event %s of type %s", event_id, event_type)

        self.ledger.record(event_id, event_type)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.info("Stripe event %s was processed concurrently", event_id)
            return WebhookOutcome(duplicate=True)
        except SQLAlchemyError:
            logger.exception("Failed to apply Stripe event %s", event_id)
            await self.db.rollback()
            raise InternalError("Failed to record subscription")

        return WebhookOutcome(subscription_id=subscription.id if subscription else None)

    async def _apply_checkout(self, metadata: Mapping[str, Any]) -> Subscription:
        user_id = metadata.get("user_id")
        price_id = metadata.get("plan_price_id")
        if not user_id or not price_id:
            raise BadRequest("Missing user_id or plan_price_id in session metadata")
        try:
            user_uuid = UUID(str(user_id))
        except ValueError:
            raise BadRequest(f"Invalid user_id in session metadata: '{user_id}'")

        if await self.db.scalar(select(User.id).where(User.id == user_uuid)) is None:
            raise BadRequest(f"Unknown user_id in session metadata: '{user_id}'")

        plan = await self.db.scalar(select(Plan).where(Plan.stripe_price_id == price_id))
        if plan is None:
            logger.error("No plan is configured for Stripe price %s", price_id)
            raise InternalError(f"No plan found for price '{price_id}'")

        now = utcnow()
        current = await self.db.scalar(
            select(Subscription)
            .where(Subscription.user_id == user_uuid)
            .where(Subscription.status == SubscriptionStatus.ACTIVE)
            .where(Subscription.end_date > now)
            .order_by(Subscription.end_date.desc())
            .limit(1)
        )

        if current is not None:
            current.end_date = stacked_end_date(current.end_date, plan.duration_days, now)
            logger.info(
                "Extended subscription %s for user %s to %s",
                current.id, user_uuid, current.end_date.isoformat(),
            )
            await self._flush(user_uuid)
            return current

        subscription = Subscription(
            user_id=user_uuid,
            plan_id=plan.id,
            start_date=now,
            end_date=stacked_end_date(None, plan.duration_days, now),
            status=SubscriptionStatus.ACTIVE,
        )
        self.db.add(subscription)
        await self._flush(user_uuid)
        logger.info("Created subscription %s for user %s (plan %s)", subscription.id, user_uuid, plan.name)
        return subscription

    async def _flush(self, user_id: UUID) -> None:
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            logger.error("Subscription write for user %s violated a constraint", user_id)
            raise BadRequest(f"Cannot record a subscription for user '{user_id}'")
