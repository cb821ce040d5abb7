"""Shared response shapes."""

from pydantic import BaseModel


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


def isoformat(value) -> str | None:
    return value.isoformat() if value is not None else None
