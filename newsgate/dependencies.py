"""Dependencies that hand process-wide collaborator clients to handlers."""

import httpx
from fastapi import Depends, Request

from newsgate.adapters.email import EmailService
from newsgate.adapters.identity import IdentityProviderAdmin
from newsgate.adapters.inference import InferenceClient
from newsgate.adapters.payments import StripeAdapter
from newsgate.adapters.telegram import TelegramAlertClient
from newsgate.errors import InternalError
from newsgate.services.notifications import NotificationDispatcher


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Shared HTTP client opened in the application lifespan."""
    client = getattr(request.app.state, "http_client", None)
    if client is None:
        raise InternalError("HTTP client is not initialized")
    return client


def get_email_service() -> EmailService:
    return EmailService()


def get_telegram_client(
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> TelegramAlertClient:
    return TelegramAlertClient(http_client)


def get_inference_client(
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> InferenceClient:
    return InferenceClient(http_client)


def get_identity_admin(
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> IdentityProviderAdmin:
    return IdentityProviderAdmin(http_client)


def get_stripe_adapter() -> StripeAdapter:
    return StripeAdapter()


def get_notifier(
    email: EmailService = Depends(get_email_service),
    alerts: TelegramAlertClient = Depends(get_telegram_client),
) -> NotificationDispatcher:
    return NotificationDispatcher(email=email, alerts=alerts)
