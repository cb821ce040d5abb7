"""Fire-and-forget notification dispatch.

Each method is meant to run as a background task after the primary write has
been committed. Failures are logged and swallowed.
"""

import logging
from datetime import datetime

from newsgate.adapters.email import EmailService
from newsgate.adapters.telegram import TelegramAlertClient

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Routes moderation and newsroom events to email and chat alerts."""

    def __init__(self, email: EmailService, alerts: TelegramAlertClient):
        self.email = email
        self.alerts = alerts

    async def notify_ban_change(
        self,
        email: str | None,
        display_name: str | None,
        action: str,
        ban_end_date: datetime | None,
    ) -> None:
        if not email:
            logger.info("Skipping %s notice: user has no email on file", action)
            return
        try:
            await self.email.send_moderation_notice(email, display_name, action, ban_end_date)
        except Exception:
            logger.exception("Failed to send %s notice to %s", action, email)

    async def alert_high_priority_submission(
        self,
        user_id: str,
        username: str,
        title: str,
        category: str,
        time_sent: str,
        content: str | None = None,
        attachment: str | None = None,
    ) -> None:
        try:
            await self.alerts.send_submission_alert(
                user_id=user_id,
                username=username,
                title=title,
                category=category,
                time_sent=time_sent,
                content=content,
                attachment=attachment,
            )
        except Exception:
            logger.exception("Telegram alert failed for submission '%s'", title)
