"""Authentication dependencies for FastAPI endpoints."""

import logging

from fastapi import Depends, Header, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from newsgate.auth.jwt import decode_token
from newsgate.database import get_db
from newsgate.errors import Forbidden, Unauthorized
from newsgate.models.enums import BanStatus, Role
from newsgate.models.user import User

logger = logging.getLogger(__name__)


def _extract_bearer(authorization: str | None) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise Unauthorized("Bearer token required")
    token = authorization[len("Bearer "):].strip()
    if not token:
        raise Unauthorized("Bearer token required")
    return token


async def _resolve_user(token: str, request: Request, db: AsyncSession) -> User:
    payload = decode_token(token)
    subject = payload.get("sub") if payload else None
    if not subject:
        raise Unauthorized("Invalid or expired token")

    result = await db.execute(select(User).where(User.auth_id == subject))
    user = result.scalar_one_or_none()
    if not user:
        logger.warning("No user profile provisioned for auth_id %s", subject)
        raise Forbidden("User profile not found")

    request.state.user_id = str(user.id)
    request.state.role = user.role.value
    return user


async def get_current_user(
    request: Request,
    authorization: str | None = Header(default=None),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Resolve the caller's profile from the bearer token.

    Raises:
        Unauthorized: token missing, malformed, expired or rejected
        Forbidden: token valid but no profile row matches its subject
    """
    token = _extract_bearer(authorization)
    return await _resolve_user(token, request, db)


async def get_optional_user(
    request: Request,
    authorization: str | None = Header(default=None),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """Like get_current_user, but anonymous callers resolve to None."""
    if authorization is None:
        return None
    token = _extract_bearer(authorization)
    return await _resolve_user(token, request, db)


def require_role(*roles: Role):
    """Dependency factory to require one of the given roles."""
    allowed = set(roles)
    label = " or ".join(sorted(r.value for r in allowed))

    async def check_role(user: User = Depends(get_current_user)) -> User:
        if user.ban_status == BanStatus.HARD_BANNED:
            logger.warning("Hard-banned user %s attempted a %s action", user.id, label)
            raise Forbidden("Your account is banned")
        if user.role not in allowed:
            logger.warning(
                "User %s has role '%s', required %s", user.id, user.role.value, label
            )
            raise Forbidden(f"Requires {label} role")
        return user

    return check_role


require_moderator = require_role(Role.MODERATOR)
require_admin = require_role(Role.ADMIN)
