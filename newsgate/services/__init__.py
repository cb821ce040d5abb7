"""Domain services for the newsgate API."""

from newsgate.services.activity import ActivityService
from newsgate.services.content import ContentService
from newsgate.services.idempotency import WebhookEventLedger
from newsgate.services.interactions import InteractionService
from newsgate.services.moderation import ModerationService
from newsgate.services.notifications import NotificationDispatcher
from newsgate.services.publication import PublicationScheduler, run_sweep
from newsgate.services.subscriptions import SubscriptionService

__all__ = [
    "ActivityService",
    "ContentService",
    "InteractionService",
    "ModerationService",
    "NotificationDispatcher",
    "PublicationScheduler",
    "SubscriptionService",
    "WebhookEventLedger",
    "run_sweep",
]
