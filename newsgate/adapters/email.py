"""
Resend email adapter.

Without an API key configured, messages are logged instead of sent so local
development and tests never reach the provider.
"""

import asyncio
import html
import logging
from datetime import datetime, timezone

import resend

from newsgate.config import settings

logger = logging.getLogger(__name__)

BRAND_NAME = "Merisols Times"


class EmailDeliveryError(Exception):
    """Raised when the provider rejects or fails to send a message."""


class EmailService:
    """Email delivery through the Resend API."""

    def __init__(
        self,
        api_key: str | None = None,
        from_email: str | None = None,
        override_recipient: str | None = None,
    ):
        self._api_key = settings.resend_api_key if api_key is None else api_key
        self._from_email = from_email or settings.email_from
        self._override_recipient = (
            settings.email_override_recipient if override_recipient is None else override_recipient
        )

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    async def send(self, to_email: str, subject: str, body_html: str) -> str | None:
        """
        Send a single message.

        Returns:
            Provider message id, or None when delivery is disabled.

        Raises:
            EmailDeliveryError: provider call failed
        """
        recipient = self._override_recipient or to_email
        if not self.enabled:
            logger.info("[DEV] Email to %s: %s", recipient, subject)
            return None

        resend.api_key = self._api_key
        params = {
            "from": self._from_email,
            "to": [recipient],
            "subject": subject,
            "html": body_html,
        }
        try:
            response = await asyncio.to_thread(resend.Emails.send, params)
        except Exception as e:
            raise EmailDeliveryError(str(e)) from e

        message_id = response.get("id") if isinstance(response, dict) else None
        logger.info("Email sent to %s (id=%s)", recipient, message_id)
        return message_id

    async def send_moderation_notice(
        self,
        to_email: str,
        display_name: str | None,
        action: str,
        ban_end_date: datetime | None,
    ) -> str | None:
        """Tell a user their account restriction changed."""
        subject, paragraph = _moderation_copy(action, ban_end_date)
        return await self.send(
            to_email,
            subject,
            _wrap_html(display_name or "reader", f"<p>{paragraph}</p>"),
        )

    async def send_reply(
        self,
        to_email: str,
        recipient_name: str | None,
        subject: str,
        reply_text: str,
        original_message: str | None = None,
    ) -> str | None:
        """Reply to a reader inquiry."""
        original = (
            html.escape(original_message).replace("\n", "<br>")
            if original_message
            else "No original message provided"
        )
        body = (
            "<p>Thank you for contacting us. Below is our response to your inquiry:</p>"
            '<div style="background-color: #f9f9f9; padding: 15px; border-left: 4px solid #333;">'
            f"{html.escape(reply_text).replace(chr(10), '<br>')}"
            "</div>"
            "<p><strong>Your original message:</strong></p>"
            f'<div style="background-color: #f5f5f5; padding: 15px; color: #666;">{original}</div>'
        )
        return await self.send(
            to_email,
            f"Re: {subject}",
            _wrap_html(recipient_name or "reader", body),
        )


def _moderation_copy(action: str, ban_end_date: datetime | None) -> tuple[str, str]:
    until = ban_end_date.strftime("%d %B %Y") if ban_end_date else None
    if action == "ban":
        return (
            f"Your {BRAND_NAME} account has been suspended",
            f"Your account has been suspended until {until} following a moderation review.",
        )
    if action == "soft_ban":
        return (
            f"Commenting restricted on your {BRAND_NAME} account",
            f"You will not be able to post comments until {until}.",
        )
    return (
        f"Your {BRAND_NAME} account has been restored",
        "The restriction on your account has been lifted. Welcome back.",
    )


def _wrap_html(name: str, inner: str) -> str:
    year = datetime.now(timezone.utc).year
    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        f'<div style="background-color: #333; color: white; padding: 20px; text-align: center;">'
        f'<h1 style="margin: 0;">{BRAND_NAME}</h1></div>'
        '<div style="padding: 20px; border: 1px solid #ddd; border-top: none;">'
        f"<p>Dear {html.escape(name)},</p>{inner}</div>"
        '<div style="background-color: #f5f5f5; padding: 15px; text-align: center; font-size: 12px;">'
        f"<p>&copy; {year} {BRAND_NAME}. All rights reserved.</p></div>"
        "</div>"
    )
