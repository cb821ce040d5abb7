"""Telegram Bot API adapter for newsroom chat alerts."""

import logging

import httpx

from newsgate.config import settings

logger = logging.getLogger(__name__)

PREVIEW_WORD_LIMIT = 100


class TelegramAlertError(Exception):
    """Raised when the Bot API rejects a message."""


def content_preview(content: str | None, limit: int = PREVIEW_WORD_LIMIT) -> str:
    """First ``limit`` words of ``content``, with an ellipsis if truncated."""
    words = (content or "").split()
    preview = " ".join(words[:limit])
    return preview + "..." if len(words) > limit else preview


class TelegramAlertClient:
    """Posts messages and photos to the configured group chat."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        bot_token: str | None = None,
        chat_id: str | None = None,
        api_url: str | None = None,
    ):
        self._http = http_client
        self._token = settings.telegram_bot_token if bot_token is None else bot_token
        self._chat_id = settings.telegram_group_id if chat_id is None else chat_id
        self._api_url = (api_url or settings.telegram_api_url).rstrip("/")

    @property
    def enabled(self) -> bool:
        return bool(self._token and self._chat_id)

    async def _call(self, method: str, payload: dict) -> dict:
        url = f"{self._api_url}/bot{self._token}/{method}"
        try:
            response = await self._http.post(url, json={"chat_id": self._chat_id, **payload})
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise TelegramAlertError(f"Telegram {method} failed: {e}") from e

        if not data.get("ok"):
            raise TelegramAlertError(f"Telegram {method} failed: {data.get('description')}")
        return data

    async def send_message(self, text: str) -> None:
        await self._call("sendMessage", {"text": text})

    async def send_photo(self, photo_url: str) -> None:
        await self._call("sendPhoto", {"photo": photo_url})

    async def send_submission_alert(
        self,
        user_id: str,
        username: str,
        title: str,
        category: str,
        time_sent: str,
        content: str | None = None,
        attachment: str | None = None,
    ) -> bool:
        """
        Announce a high-priority article submission.

        Returns False without calling the API when alerts are not configured.

        Raises:
            TelegramAlertError: the Bot API call failed
        """
        if not self.enabled:
            logger.info("[DEV] Telegram alert skipped for '%s' (bot not configured)", title)
            return False

        message = (
            "---- User Article Submission ----\n\n"
            f"User ID: {user_id}\n"
            f"Username: {username}\n"
            f"Time Sent: {time_sent}\n"
            "Priority: High\n"
            f"Category: {category}\n"
            f"Title: {title}\n\n"
            f"Content:\n{content_preview(content)}"
        )
        await self.send_message(message)
        if attachment:
            await self.send_photo(attachment)
        return True
