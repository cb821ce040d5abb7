"""Admin account management schemas."""

from pydantic import BaseModel

from newsgate.models.enums import Role
from newsgate.schemas.users import UserResponse


class CreateUserRequest(BaseModel):
    email: str | None = None
    password: str | None = None
    name: str | None = None
    role: Role = Role.USER


class CreateUserResponse(BaseModel):
    success: bool
    user: UserResponse


class DeleteUserResponse(BaseModel):
    success: bool
    message: str
