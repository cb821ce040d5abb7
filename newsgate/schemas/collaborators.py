"""Request and response bodies for the forwarding endpoints.

Required fields are checked by the handlers so that a missing value is
reported as 400 with the usual error envelope.
"""

from pydantic import BaseModel


class SendReplyRequest(BaseModel):
    recipient_email: str | None = None
    recipient_name: str | None = None
    subject: str | None = None
    original_message: str | None = None
    reply_text: str | None = None
    message_id: str | None = None


class SendReplyResponse(BaseModel):
    success: bool
    message: str
    email_id: str | None = None


class HighPriorityAlertRequest(BaseModel):
    user_id: str | None = None
    username: str | None = None
    title: str | None = None
    category: str | None = None
    priority: int | None = None
    time_sent: str | None = None
    content: str | None = None
    attachment: str | None = None


class AlertResponse(BaseModel):
    sent: bool
    message: str


class SummaryRequest(BaseModel):
    text: str | None = None


class SummaryResponse(BaseModel):
    summary: str


class ModerateArticleRequest(BaseModel):
    text: str | None = None
    image_url: str | None = None


class ModerateArticleResponse(BaseModel):
    similarity_score: float | None
    verdict: str | None
