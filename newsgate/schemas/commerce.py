"""Checkout and webhook schemas."""

from pydantic import BaseModel, field_validator


class CheckoutRequest(BaseModel):
    plan: str
    user_id: str | None = None

    @field_validator("plan")
    @classmethod
    def normalize_plan(cls, v: str) -> str:
        return v.strip().lower()


class CheckoutResponse(BaseModel):
    url: str | None
    session_id: str


class WebhookResponse(BaseModel):
    received: bool
    duplicate: bool = False
