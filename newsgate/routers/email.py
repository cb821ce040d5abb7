"""Email router: replies to reader inquiries."""

import logging

from fastapi import APIRouter, Depends, Request, status

from newsgate.adapters.email import EmailDeliveryError, EmailService
from newsgate.auth.dependencies import require_admin
from newsgate.config import settings
from newsgate.dependencies import get_email_service
from newsgate.errors import BadRequest, InternalError
from newsgate.middleware.rate_limit import limiter
from newsgate.models.user import User
from newsgate.schemas.collaborators import SendReplyRequest, SendReplyResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/email", tags=["Email"])


@router.post(
    "/send-reply",
    response_model=SendReplyResponse,
    status_code=status.HTTP_200_OK,
)
@limiter.limit(settings.forwarding_rate_limit)
async def send_reply(
    request: Request,
    data: SendReplyRequest,
    admin: User = Depends(require_admin),
    email_service: EmailService = Depends(get_email_service),
) -> SendReplyResponse:
    """Send an admin's reply to a contact-form message."""
    if not data.reply_text or not data.subject:
        raise BadRequest("Missing required fields: subject and reply_text")
    if not data.recipient_email and not settings.email_override_recipient:
        raise BadRequest("Missing required field: recipient_email")

    try:
        email_id = await email_service.send_reply(
            to_email=data.recipient_email or "",
            recipient_name=data.recipient_name,
            subject=data.subject,
            reply_text=data.reply_text,
            original_message=data.original_message,
        )
    except EmailDeliveryError as e:
        logger.error("Reply to message %s failed: %s", data.message_id, e)
        raise InternalError("Failed to send email")

    logger.info("Admin %s replied to message %s", admin.id, data.message_id)
    return SendReplyResponse(success=True, message="Email sent successfully", email_id=email_id)
