"""Users router for profile lookups."""

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from newsgate.auth.dependencies import get_current_user, require_admin
from newsgate.database import get_db
from newsgate.models.user import User
from newsgate.schemas.users import ListUsersResponse, UserResponse

router = APIRouter(prefix="/api/v1/users", tags=["Users"])


@router.get(
    "",
    response_model=ListUsersResponse,
    status_code=status.HTTP_200_OK,
)
async def list_users(
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> ListUsersResponse:
    """
    List all user profiles.

    Requires admin role.
    """
    result = await db.execute(select(User).order_by(User.created_at.desc()))
    users = result.scalars().all()
    return ListUsersResponse(
        count=len(users),
        users=[UserResponse.from_user(u) for u in users],
    )


@router.get(
    "/me",
    response_model=UserResponse,
    status_code=status.HTTP_200_OK,
)
async def get_me(user: User = Depends(get_current_user)) -> UserResponse:
    """Profile of the authenticated caller."""
    return UserResponse.from_user(user)
