"""Stripe router: checkout sessions and the payment webhook."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Header, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from newsgate.adapters.payments import (
    PaymentsAPIError,
    PaymentsConfigError,
    StripeAdapter,
    WebhookSignatureError,
    price_ids,
)
from newsgate.auth.dependencies import get_optional_user
from newsgate.config import settings
from newsgate.database import get_db
from newsgate.dependencies import get_stripe_adapter
from newsgate.errors import BadRequest, InternalError, NotFound
from newsgate.middleware.rate_limit import limiter
from newsgate.models.user import User
from newsgate.schemas.commerce import CheckoutRequest, CheckoutResponse, WebhookResponse
from newsgate.services.subscriptions import SubscriptionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/stripe", tags=["Stripe"])


async def _anonymous_buyer(db: AsyncSession, user_id: str | None) -> str:
    """Validate a body-supplied buyer id before any payment is taken."""
    if not user_id:
        raise BadRequest("Missing user_id")
    try:
        buyer = UUID(user_id)
    except ValueError:
        raise BadRequest(f"Invalid user_id: '{user_id}'")

    exists = await db.scalar(select(User.id).where(User.id == buyer))
    if exists is None:
        raise NotFound("User not found")
    return str(buyer)


@router.post(
    "/create-checkout-session",
    response_model=CheckoutResponse,
    status_code=status.HTTP_200_OK,
)
@limiter.limit(settings.checkout_rate_limit)
async def create_checkout_session(
    request: Request,
    data: CheckoutRequest,
    user: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
    stripe_adapter: StripeAdapter = Depends(get_stripe_adapter),
) -> CheckoutResponse:
    """
    Start a one-time payment for the monthly or yearly plan.

    The buyer is the signed-in user, or ``user_id`` from the body for
    anonymous callers.
    """
    prices = price_ids()
    if data.plan not in prices:
        raise BadRequest("Invalid subscription plan selected")

    buyer_id = str(user.id) if user else await _anonymous_buyer(db, data.user_id)

    try:
        session = await stripe_adapter.create_checkout_session(prices[data.plan], buyer_id)
    except PaymentsConfigError as e:
        logger.error("Checkout for plan %s misconfigured: %s", data.plan, e)
        raise InternalError(
            f"Configuration error: Stripe price id for the {data.plan} plan is not set correctly"
        )
    except PaymentsAPIError as e:
        logger.error("Stripe checkout session creation failed: %s", e)
        raise InternalError("Failed to create checkout session")

    return CheckoutResponse(url=session.url, session_id=session.id)


@router.post(
    "/webhook",
    response_model=WebhookResponse,
    status_code=status.HTTP_200_OK,
)
async def stripe_webhook(
    request: Request,
    stripe_signature: str | None = Header(default=None, alias="Stripe-Signature"),
    db: AsyncSession = Depends(get_db),
    stripe_adapter: StripeAdapter = Depends(get_stripe_adapter),
) -> WebhookResponse:
    """
    Apply a signed Stripe event to the subscription ledger.

    Redelivered events are acknowledged with ``duplicate=true``.
    """
    payload = await request.body()
    try:
        event = stripe_adapter.construct_event(payload, stripe_signature)
    except WebhookSignatureError as e:
        logger.warning("Rejected Stripe webhook: %s", e)
        raise BadRequest(f"Webhook error: {e}")

    outcome = await SubscriptionService(db).handle_event(event)
    return WebhookResponse(received=outcome.received, duplicate=outcome.duplicate)
