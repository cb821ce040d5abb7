"""Telegram router: newsroom alerts for high-priority submissions."""

import logging

from fastapi import APIRouter, Depends, Request, status

from newsgate.adapters.telegram import TelegramAlertClient, TelegramAlertError
from newsgate.config import settings
from newsgate.dependencies import get_telegram_client
from newsgate.errors import BadRequest, InternalError
from newsgate.middleware.rate_limit import limiter
from newsgate.schemas.collaborators import AlertResponse, HighPriorityAlertRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/telegram", tags=["Telegram"])

REQUIRED_FIELDS = ("user_id", "username", "title", "category", "time_sent")


@router.post(
    "/high-priority-alert",
    response_model=AlertResponse,
    status_code=status.HTTP_200_OK,
)
@limiter.limit(settings.forwarding_rate_limit)
async def high_priority_alert(
    request: Request,
    data: HighPriorityAlertRequest,
    alerts: TelegramAlertClient = Depends(get_telegram_client),
) -> AlertResponse:
    """Post a submission alert to the editors' group. Only priority 1 is sent."""
    missing = [name for name in REQUIRED_FIELDS if not getattr(data, name)]
    if missing:
        raise BadRequest(f"Missing required fields: {', '.join(missing)}")

    if data.priority != 1:
        return AlertResponse(sent=False, message="Priority is not high, no alert sent")

    try:
        sent = await alerts.send_submission_alert(
            user_id=data.user_id,
            username=data.username,
            title=data.title,
            category=data.category,
            time_sent=data.time_sent,
            content=data.content,
            attachment=data.attachment,
        )
    except TelegramAlertError as e:
        logger.error("Telegram alert for '%s' failed: %s", data.title, e)
        raise InternalError("Failed to send Telegram alert")

    if not sent:
        return AlertResponse(sent=False, message="Telegram alerts are not configured")
    return AlertResponse(sent=True, message="Telegram alert sent successfully")
