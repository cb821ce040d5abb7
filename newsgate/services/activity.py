"""Moderation audit logging."""

from typing import Any, Literal
from uuid import UUID

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from newsgate.models.activity import ModerationLog
from newsgate.models.enums import ModerationAction

TargetType = Literal["article", "comment", "user"]


class ActivityService:
    """Appends moderator actions to the audit log."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def log(
        self,
        moderator_id: UUID | None,
        action: ModerationAction,
        target_type: TargetType,
        target_id: Any,
        request: Request | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> ModerationLog:
        """
        Stage an audit entry.

        Args:
            moderator_id: Acting moderator
            action: What was done
            target_type: Kind of entity acted upon
            target_id: Id of that entity
            request: Current request, for the request id
            metadata: Optional additional context
        """
        request_id = getattr(request.state, "request_id", None) if request else None
        entry = ModerationLog(
            moderator_id=moderator_id,
            action=action,
            target_type=target_type,
            target_id=str(target_id),
            request_id=request_id,
            extra_data=metadata or {},
        )
        self.db.add(entry)
        # Committed by the caller together with the action itself
        return entry
