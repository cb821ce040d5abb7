"""User profile schemas."""

from pydantic import BaseModel

from newsgate.models.user import User
from newsgate.schemas.common import isoformat


class UserResponse(BaseModel):
    """A user profile as shown to moderators, admins and the user themselves."""

    user_id: str
    auth_id: str
    email: str | None
    display_name: str | None
    role: str
    ban_status: str
    ban_end_date: str | None
    created_at: str

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            user_id=str(user.id),
            auth_id=user.auth_id,
            email=user.email,
            display_name=user.display_name,
            role=user.role.value,
            ban_status=user.ban_status.value,
            ban_end_date=isoformat(user.ban_end_date),
            created_at=user.created_at.isoformat(),
        )


class ListUsersResponse(BaseModel):
    count: int
    users: list[UserResponse]
