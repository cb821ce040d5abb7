"""Admin router for account provisioning."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from newsgate.adapters.identity import IdentityProviderAdmin, IdentityProviderError
from newsgate.auth.dependencies import require_admin
from newsgate.database import get_db
from newsgate.dependencies import get_identity_admin
from newsgate.errors import BadRequest, InternalError
from newsgate.models.user import User
from newsgate.schemas.admin import CreateUserRequest, CreateUserResponse, DeleteUserResponse
from newsgate.schemas.users import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/admin", tags=["Admin"])


@router.post(
    "/create-user",
    response_model=CreateUserResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_user(
    data: CreateUserRequest,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
    identity: IdentityProviderAdmin = Depends(get_identity_admin),
) -> CreateUserResponse:
    """
    Create a staff or reader account.

    The identity-provider account is created first, then the profile row.
    Requires admin role.
    """
    if not data.email or not data.password or not data.name:
        raise BadRequest("Missing fields: email, password and name are required")

    existing = await db.scalar(select(User.id).where(User.email == data.email))
    if existing is not None:
        raise BadRequest("A user with this email already exists")

    try:
        auth_id = await identity.create_user(data.email, data.password, data.name)
    except IdentityProviderError as e:
        logger.error("Identity provider rejected account for %s: %s", data.email, e)
        raise InternalError(f"Auth create failed: {e}")

    user = User(
        auth_id=auth_id,
        email=data.email,
        display_name=data.name,
        role=data.role,
    )
    db.add(user)
    try:
        await db.commit()
    except SQLAlchemyError:
        logger.exception("Profile insert failed for auth account %s", auth_id)
        await db.rollback()
        try:
            await identity.delete_user(auth_id)
        except IdentityProviderError as e:
            logger.error("Could not remove orphaned auth account %s: %s", auth_id, e)
        raise InternalError("User table insert failed")

    await db.refresh(user)
    logger.info("Admin %s created %s account %s", admin.id, user.role.value, user.id)
    return CreateUserResponse(success=True, user=UserResponse.from_user(user))


@router.delete(
    "/delete-user/{auth_id}",
    response_model=DeleteUserResponse,
    status_code=status.HTTP_200_OK,
)
async def delete_user(
    auth_id: str,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
    identity: IdentityProviderAdmin = Depends(get_identity_admin),
) -> DeleteUserResponse:
    """Remove the identity-provider account, then the profile row."""
    if auth_id == admin.auth_id:
        raise BadRequest("Admins cannot delete their own account")

    try:
        await identity.delete_user(auth_id)
    except IdentityProviderError as e:
        logger.error("Failed to delete auth account %s: %s", auth_id, e)
        raise InternalError(f"Failed to delete auth user: {e}")

    try:
        await db.execute(delete(User).where(User.auth_id == auth_id))
        await db.commit()
    except SQLAlchemyError:
        logger.exception("Auth account %s deleted but profile delete failed", auth_id)
        await db.rollback()
        raise InternalError("Deleted from auth, but failed to delete from users table")

    logger.info("Admin %s deleted account %s", admin.id, auth_id)
    return DeleteUserResponse(success=True, message="User deleted successfully")
