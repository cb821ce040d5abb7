"""
Stripe payments adapter.

Creates one-time Checkout sessions and verifies webhook signatures. The
subscription ledger itself lives in ``newsgate.services.subscriptions``.
"""

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import stripe

from newsgate.config import settings

logger = logging.getLogger(__name__)


class PaymentsError(Exception):
    """Base exception for payment adapter errors."""


class PaymentsConfigError(PaymentsError):
    """Raised when a price id is missing or malformed."""


class PaymentsAPIError(PaymentsError):
    """Raised when the Stripe API call fails."""


class WebhookSignatureError(PaymentsError):
    """Raised when a webhook payload or signature does not verify."""


@dataclass
class CheckoutSession:
    id: str
    url: str | None


def price_ids() -> dict[str, str]:
    """Plan name to Stripe price id, from settings."""
    return {
        "monthly": settings.stripe_price_monthly,
        "yearly": settings.stripe_price_yearly,
    }


class StripeAdapter:
    """Stripe Checkout and webhook verification."""

    def __init__(
        self,
        secret_key: str | None = None,
        webhook_secret: str | None = None,
        frontend_url: str | None = None,
    ):
        self._secret_key = settings.stripe_secret_key if secret_key is None else secret_key
        self._webhook_secret = (
            settings.stripe_webhook_secret if webhook_secret is None else webhook_secret
        )
        self._frontend_url = (frontend_url or settings.frontend_url).rstrip("/")

    async def create_checkout_session(self, price_id: str, user_id: str) -> CheckoutSession:
        """
        Create a one-time payment session for ``price_id``.

        The user id and price id travel in the session metadata and come back
        in the ``checkout.session.completed`` event.
        """
        if not price_id or not price_id.startswith("price_"):
            raise PaymentsConfigError(f"Stripe price id is not configured correctly: '{price_id}'")

        params: dict[str, Any] = {
            "payment_method_types": ["card"],
            "line_items": [{"price": price_id, "quantity": 1}],
            "mode": "payment",
            "success_url": f"{self._frontend_url}/subscription-success?session_id={{CHECKOUT_SESSION_ID}}",
            "cancel_url": f"{self._frontend_url}/subscribe",
            "metadata": {"user_id": user_id, "plan_price_id": price_id},
            "api_key": self._secret_key,
        }
        try:
            session = await asyncio.to_thread(stripe.checkout.Session.create, **params)
        except stripe.StripeError as e:
            raise PaymentsAPIError(str(e)) from e

        logger.info("Stripe checkout session created: %s", session.id)
        return CheckoutSession(id=session.id, url=session.url)

    def construct_event(self, payload: bytes, signature: str | None) -> Mapping[str, Any]:
        """Verify a webhook payload against its ``Stripe-Signature`` header."""
        if not signature:
            raise WebhookSignatureError("Missing Stripe-Signature header")
        try:
            return stripe.Webhook.construct_event(payload, signature, self._webhook_secret)
        except ValueError as e:
            raise WebhookSignatureError(f"Invalid payload: {e}") from e
        except stripe.SignatureVerificationError as e:
            raise WebhookSignatureError(f"Invalid signature: {e}") from e
